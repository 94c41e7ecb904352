"""Usage-gated request lifecycle wrapping every metered generation"""
from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from functools import partial
from typing import Callable, Optional, Set

from pydantic import ValidationError

from config import logger, log_business_event
from src.core import (
    AppError,
    GenerationReceipt,
    InvalidInputError,
    ReviewInput,
    UsageState,
)
from src.core.ports.storage import Storage
from src.lifecycle.gates import AuthGate, QuotaGate, RateLimitGate, SubscriptionGate
from src.responses.generator import ResponseGenerator


class RequestLifecycle:
    """
    Runs one metered generation request through its gates

    Unauthenticated -> Authenticated -> TrialOrSubscriptionValid -> UnderQuota
    -> UnderRateLimit -> Executing -> Completed

    A failing gate raises straight away, before anything is persisted,
    counted or audited. Once the generation is stored the usage increment is
    scheduled as a background task whose outcome only reaches the log.
    """

    def __init__(
        self,
        auth_gate: AuthGate,
        subscription_gate: SubscriptionGate,
        quota_gate: QuotaGate,
        rate_limit_gate: RateLimitGate,
        generator: ResponseGenerator,
        storage: Storage,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.auth_gate = auth_gate
        self.subscription_gate = subscription_gate
        self.quota_gate = quota_gate
        self.rate_limit_gate = rate_limit_gate
        self.generator = generator
        self.storage = storage
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._background: Set[asyncio.Task] = set()

    async def handle(
        self,
        token: Optional[str],
        review_text: str,
        business_type: str,
        tone: str,
        business_name: Optional[str] = None,
    ) -> GenerationReceipt:
        """
        Authenticate, gate, generate, persist and meter one request

        Args:
            token: Bearer credential
            review_text: Review to respond to
            business_type: Business-type tag
            tone: Requested tone tag
            business_name: Overrides the account's business name when given

        Returns:
            GenerationReceipt with the stored record id and the post-request usage

        Raises:
            AuthError, PaymentRequiredError, QuotaExceededError,
            RateLimitExceededError, InvalidInputError: gate rejections (4xx)
            GenerationError: model failure or unusable output (5xx)
        """
        account = await self.auth_gate.authenticate(token)
        await self.subscription_gate.check(account, self._clock())
        self.quota_gate.check_usage(account)
        await self.rate_limit_gate.check(account.id)

        try:
            review = ReviewInput(
                text=review_text,
                business_type=business_type,
                tone=tone,
                business_name=business_name or account.business_name,
            )
        except ValidationError as e:
            raise InvalidInputError(
                message="Validation failed",
                details=[
                    {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
                    for err in e.errors()
                ],
            ) from e

        result = await self.generator.generate(review)

        try:
            record_id = await self.storage.insert_generated_response(
                user_id=account.id,
                original_review=review.text,
                business_type=review.business_type,
                tone=review.tone,
                candidates=[candidate.to_record() for candidate in result.candidates],
                status="pending",
                auto_generated=False,
                sentiment_score=result.sentiment.score,
                sentiment_category=result.sentiment.sentiment,
            )
        except Exception as e:
            logger.exception("Failed to persist generated responses")
            raise AppError(
                code="PERSISTENCE_FAILED",
                message="Failed to save generated responses. Please try again.",
            ) from e

        self._increment_usage_in_background(account.id)
        await self._audit(account.id, record_id, result.sentiment.sentiment, review)

        log_business_event(
            "Review responses generated successfully",
            user_id=account.id,
            review_id=record_id,
            business_type=review.business_type,
            tone=review.tone,
            response_count=len(result.candidates),
            sentiment=result.sentiment.sentiment,
        )

        return GenerationReceipt(
            record_id=record_id,
            result=result,
            # expected value, the increment may still be in flight
            monthly_usage=account.monthly_usage + 1,
            usage_limit=account.usage_limit,
        )

    async def usage_summary(self, token: Optional[str]) -> dict:
        """Trial and usage status for the caller; not metered and not trial-gated"""
        account = await self.auth_gate.authenticate(token)
        now = self._clock()
        state = UsageState(
            monthly_usage=account.monthly_usage,
            usage_limit=account.usage_limit,
            trial_end_date=account.trial_end_date,
            has_active_subscription=await self.storage.has_active_subscription(account.id),
        )
        return {
            "monthly_usage": state.monthly_usage,
            "usage_limit": state.usage_limit,
            "usage_remaining": state.remaining,
            "has_active_subscription": state.has_active_subscription,
            "trial": {
                "is_active": account.in_trial(now),
                "days_remaining": state.trial_days_remaining(now),
                "end_date": state.trial_end_date.isoformat() if state.trial_end_date else None,
            },
        }

    async def revoke(self, token: str) -> bool:
        """Log the caller out by blacklisting their credential"""
        return await self.auth_gate.revoke(token, self._clock())

    async def drain(self) -> None:
        """
        Wait for outstanding usage increments (used on shutdown and in tests)

        Increments scheduled from another event loop, such as the Gradio
        server's, are awaited on the loop that owns them. Increments whose
        loop has already stopped cannot finish and are logged as abandoned.
        """
        pending = [task for task in list(self._background) if not task.done()]
        if not pending:
            return

        current = asyncio.get_running_loop()
        waiters = []
        for task in pending:
            owner = task.get_loop()
            if owner is current:
                waiters.append(task)
            elif owner.is_running():
                waiters.append(asyncio.wrap_future(asyncio.run_coroutine_threadsafe(_settle(task), owner)))
            else:
                logger.warning(f"Usage increment abandoned, its event loop has stopped: {task.get_name()}")

        if waiters:
            await asyncio.gather(*waiters, return_exceptions=True)

    def _increment_usage_in_background(self, user_id: str) -> None:
        task = asyncio.create_task(self.storage.increment_usage(user_id))
        self._background.add(task)
        task.add_done_callback(partial(self._on_increment_done, user_id))

    def _on_increment_done(self, user_id: str, task: asyncio.Task) -> None:
        self._background.discard(task)
        if task.cancelled():
            logger.warning(f"Usage increment cancelled for user_id={user_id}")
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Usage increment error for user_id={user_id}: {exc!r}")
            return
        logger.debug(f"Usage incremented for user_id={user_id} monthly_usage={task.result()}")

    async def _audit(self, user_id: str, record_id: str, sentiment: str, review: ReviewInput) -> None:
        try:
            await self.storage.record_audit(
                user_id=user_id,
                action="responses.generated",
                resource_type="generated_response",
                resource_id=record_id,
                details={
                    "business_type": review.business_type,
                    "tone": review.tone,
                    "sentiment": sentiment,
                },
            )
        except Exception as e:
            logger.error(f"Audit log write failed for record {record_id}: {e!r}")


async def _settle(task: asyncio.Task) -> None:
    await asyncio.gather(task, return_exceptions=True)
