"""Sentiment classification with a deterministic keyword fallback"""
from __future__ import annotations

import json

from pydantic import ValidationError

from config import logger, settings
from src.core import SentimentResult
from src.core.ports.language_model import LanguageModel

SENTIMENT_SYSTEM_PROMPT = "You are a sentiment analysis expert. Respond only with valid JSON."

SENTIMENT_USER_TEMPLATE = """Analyze the sentiment of this review and return ONLY a JSON object with the following format:
{{
  "sentiment": "positive|negative|neutral",
  "score": 0.85,
  "confidence": "high|medium|low",
  "key_emotions": ["satisfied", "disappointed", "etc"],
  "main_concerns": ["service", "quality", "etc"]
}}

Review: "{review}\""""

POSITIVE_WORDS = ("good", "great", "excellent", "amazing", "love", "perfect", "awesome")
NEGATIVE_WORDS = ("bad", "terrible", "awful", "hate", "worst", "horrible", "disappointed")


def parse_sentiment(raw: str) -> SentimentResult:
    """
    Parse a model completion into a SentimentResult

    Raises:
        ValueError: If the text is not JSON or does not match the schema
            (including sentiment labels outside positive/negative/neutral)
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"Sentiment output is not JSON: {raw[:200]!r}") from e
    if not isinstance(data, dict):
        raise ValueError("Sentiment output must be a JSON object")
    try:
        return SentimentResult.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Sentiment output failed validation: {e}") from e


def keyword_sentiment(text: str) -> SentimentResult:
    """
    Deterministic fallback classification by keyword containment

    Counts how many positive and negative words appear anywhere in the
    lower-cased text. Ties (including zero/zero) are neutral.
    """
    lowered = text.lower()
    positive = sum(1 for word in POSITIVE_WORDS if word in lowered)
    negative = sum(1 for word in NEGATIVE_WORDS if word in lowered)

    if positive > negative:
        label = "positive"
    elif negative > positive:
        label = "negative"
    else:
        label = "neutral"

    return SentimentResult(
        sentiment=label,
        score=0.5,
        confidence="low",
        key_emotions=[],
        main_concerns=[],
    )


class SentimentClassifier:
    """
    Classifies review text through the language model, degrading to keywords

    classify() never raises: transport errors, malformed JSON and unknown
    labels all take the keyword path.
    """

    def __init__(
        self,
        language_model: LanguageModel,
        max_tokens: int = settings.sentiment_max_tokens,
        temperature: float = settings.sentiment_temperature,
    ) -> None:
        self.language_model = language_model
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def classify(self, text: str) -> SentimentResult:
        """
        Classify the sentiment of a review

        Args:
            text: Review text

        Returns:
            SentimentResult from the model, or the low-confidence keyword result
        """
        try:
            raw = await self.language_model.complete(
                SENTIMENT_SYSTEM_PROMPT,
                SENTIMENT_USER_TEMPLATE.format(review=text),
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                expect_json=True,
            )
            result = parse_sentiment(raw)
        except Exception as e:
            logger.error(f"Sentiment analysis failed, using keyword fallback: {e!r}")
            return keyword_sentiment(text)

        logger.debug(
            f"Sentiment analysis completed: sentiment={result.sentiment} "
            f"score={result.score} confidence={result.confidence}"
        )
        return result
