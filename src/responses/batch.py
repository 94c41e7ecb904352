"""Sequential batch generation with fixed pacing"""
from __future__ import annotations

import asyncio
from typing import Sequence

from pydantic import ValidationError

from config import logger, settings
from src.core import (
    AppError,
    BatchFailure,
    BatchOutcome,
    BatchReview,
    BatchSuccess,
    ReviewInput,
)
from src.responses.generator import ResponseGenerator

UNEXPECTED_FAILURE_MESSAGE = "Failed to process review. Please try again."


class BatchOrchestrator:
    """
    Runs generate_single over a list of reviews, one at a time

    Every item is finished (success or failure) before the next starts, and
    a fixed delay follows every item. A failing item is recorded and the
    loop moves on.
    """

    def __init__(
        self,
        generator: ResponseGenerator,
        delay_seconds: float = settings.batch_delay_seconds,
    ) -> None:
        self.generator = generator
        self.delay_seconds = delay_seconds

    async def run_batch(
        self,
        reviews: Sequence[BatchReview],
        business_type: str,
        tone: str,
        business_name: str,
    ) -> BatchOutcome:
        outcome = BatchOutcome()
        logger.info(f"Starting batch of {len(reviews)} reviews")

        for review in reviews:
            try:
                review_input = ReviewInput(
                    text=review.text,
                    business_type=business_type,
                    tone=tone,
                    business_name=business_name,
                )
                result = await self.generator.generate_single(review_input)
                outcome.succeeded.append(BatchSuccess(review_id=review.review_id, result=result))
            except ValidationError as e:
                logger.warning(f"Batch item {review.review_id} rejected: {e.error_count()} validation errors")
                outcome.failed.append(
                    BatchFailure(
                        review_id=review.review_id,
                        error_message=f"Invalid review input: {e.errors()[0]['msg']}",
                    )
                )
            except AppError as e:
                logger.warning(f"Batch item {review.review_id} failed: {e}")
                outcome.failed.append(BatchFailure(review_id=review.review_id, error_message=e.message))
            except Exception:
                logger.exception(f"Batch item {review.review_id} failed unexpectedly")
                outcome.failed.append(
                    BatchFailure(review_id=review.review_id, error_message=UNEXPECTED_FAILURE_MESSAGE)
                )

            await asyncio.sleep(self.delay_seconds)

        logger.info(
            f"Batch finished: succeeded={len(outcome.succeeded)} failed={len(outcome.failed)}"
        )
        return outcome
