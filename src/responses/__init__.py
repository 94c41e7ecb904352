"""
Response generation module
"""

from .context import (
    DEFAULT_BUSINESS_TYPE,
    DEFAULT_TONE,
    BusinessContext,
    SentimentStrategy,
    resolve_context,
    resolve_strategy,
    resolve_tone,
)
from .sentiment import SentimentClassifier, keyword_sentiment
from .prompts import ComposedPrompt, compose_prompt
from .generator import ResponseGenerator
from .batch import BatchOrchestrator

__all__ = [
    "DEFAULT_BUSINESS_TYPE",
    "DEFAULT_TONE",
    "BusinessContext",
    "SentimentStrategy",
    "resolve_context",
    "resolve_strategy",
    "resolve_tone",
    "SentimentClassifier",
    "keyword_sentiment",
    "ComposedPrompt",
    "compose_prompt",
    "ResponseGenerator",
    "BatchOrchestrator",
]
