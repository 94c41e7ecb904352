"""Response generation service: sentiment -> prompt -> model -> validated candidates"""
from __future__ import annotations

import json
import math
import re
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional

from config import logger, log_business_event, settings
from src.core import (
    AppError,
    GenerationError,
    GenerationResult,
    ResponseCandidate,
    ReviewInput,
    SingleResponse,
)
from src.core.ports.language_model import LanguageModel
from src.responses.prompts import CANDIDATE_COUNT, compose_prompt
from src.responses.sentiment import SentimentClassifier

WORDS_PER_MINUTE = 200

_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


def parse_candidates(raw: str) -> List[dict]:
    """
    Strictly parse the model's JSON output into candidate dicts

    Accepts a JSON array (optionally wrapped in a markdown code fence) or an
    object carrying the array under 'responses'.

    Raises:
        ValueError: If the output is not JSON, does not hold exactly
            CANDIDATE_COUNT items, or an item lacks response text
    """
    text = (raw or "").strip()
    fenced = _CODE_FENCE.match(text)
    if fenced:
        text = fenced.group(1)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Generation output is not JSON: {text[:200]!r}") from e

    if isinstance(data, dict):
        data = data.get("responses")
    if not isinstance(data, list):
        raise ValueError("Generation output must be a JSON array of responses")
    if len(data) != CANDIDATE_COUNT:
        raise ValueError(f"Expected {CANDIDATE_COUNT} responses, got {len(data)}")

    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise ValueError(f"Response {index + 1} is not an object")
        response = item.get("response")
        if not isinstance(response, str) or not response.strip():
            raise ValueError(f"Response {index + 1} is missing response text")
    return data


def estimate_reading_time(word_count: int) -> int:
    """ceil(words / 200); zero words gives zero"""
    return math.ceil(word_count / WORDS_PER_MINUTE)


def _key_points(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(point) for point in value if str(point).strip()]


def enrich_candidates(items: List[dict], tone: str, sentiment: str) -> List[ResponseCandidate]:
    """Attach id, echoed tone/sentiment, word length and reading time to parsed items"""
    candidates = []
    for index, item in enumerate(items):
        text = item["response"].strip()
        word_length = len(text.split())
        candidates.append(
            ResponseCandidate(
                id=index + 1,
                text=text,
                word_length=word_length,
                tone=tone,
                sentiment_addressed=sentiment,
                estimated_reading_seconds=estimate_reading_time(word_length),
                key_points=_key_points(item.get("key_points")),
            )
        )
    return candidates


class ResponseGenerator:
    """
    Generates three response drafts for a review

    Pipeline (strictly sequential):
    1. Classify sentiment (never fails, may degrade to keywords)
    2. Resolve business/tone/strategy context and compose the prompt
    3. Call the language model
    4. Parse exactly three candidates and enrich them

    Any failure from step 2 on surfaces as a single GenerationError; the
    provider-specific cause goes to the diagnostic log only.
    """

    def __init__(
        self,
        language_model: LanguageModel,
        classifier: Optional[SentimentClassifier] = None,
        max_tokens: int = settings.openai_max_tokens,
        temperature: float = settings.generation_temperature,
        presence_penalty: float = settings.generation_presence_penalty,
        frequency_penalty: float = settings.generation_frequency_penalty,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.language_model = language_model
        self.classifier = classifier or SentimentClassifier(language_model)
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.presence_penalty = presence_penalty
        self.frequency_penalty = frequency_penalty
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def generate(self, review: ReviewInput) -> GenerationResult:
        """
        Generate three response candidates for a review

        Args:
            review: Validated review input

        Returns:
            GenerationResult with exactly three candidates in model order

        Raises:
            GenerationError: If the model call fails or its output is unusable
        """
        sentiment = await self.classifier.classify(review.text)

        try:
            prompt = compose_prompt(
                review_text=review.text,
                business_type=review.business_type,
                tone=review.tone,
                business_name=review.business_name,
                sentiment=sentiment.sentiment,
            )
            raw = await self.language_model.complete(
                prompt.system_instructions,
                prompt.user_payload,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                presence_penalty=self.presence_penalty,
                frequency_penalty=self.frequency_penalty,
            )
            items = parse_candidates(raw)
            candidates = enrich_candidates(items, review.tone, sentiment.sentiment)
            result = GenerationResult(
                candidates=candidates,
                sentiment=sentiment,
                business_type=review.business_type,
                tone=review.tone,
                generated_at=self._clock(),
                original_review=review.text,
                model=getattr(self.language_model, "model_name", None),
            )
        except AppError:
            raise
        except Exception as e:
            logger.exception(f"Response generation failed: {e!r}")
            raise GenerationError() from e

        log_business_event(
            "Review responses generated",
            review_length=len(review.text),
            business_type=review.business_type,
            tone=review.tone,
            sentiment=sentiment.sentiment,
            responses_count=len(candidates),
        )
        return result

    async def generate_single(self, review: ReviewInput) -> SingleResponse:
        """First candidate of a full generation, for automated posting"""
        result = await self.generate(review)
        return SingleResponse(
            text=result.candidates[0].text,
            sentiment=result.sentiment,
            metadata=result.metadata(),
        )

    async def validate_connection(self) -> bool:
        try:
            ok = await self.language_model.validate_connection()
        except Exception as e:
            logger.error(f"Language model connection validation failed: {e!r}")
            return False
        if ok:
            logger.info("Language model connection validated successfully")
        return ok
