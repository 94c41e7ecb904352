import json
import logging

import pytest

from src.responses.sentiment import SentimentClassifier, keyword_sentiment, parse_sentiment
from tests.conftest import FakeLanguageModel

EXAMPLE_REVIEW = "Great food and excellent service! Will definitely come back."


async def test_classify_uses_model_output():
    model = FakeLanguageModel(
        sentiment=json.dumps(
            {
                "sentiment": "negative",
                "score": 0.2,
                "confidence": "medium",
                "key_emotions": ["frustrated"],
                "main_concerns": ["wait time"],
            }
        )
    )
    result = await SentimentClassifier(model).classify("We waited an hour for cold soup.")

    assert result.sentiment == "negative"
    assert result.score == 0.2
    assert result.confidence == "medium"
    assert result.key_emotions == ["frustrated"]
    assert result.main_concerns == ["wait time"]


async def test_classify_requests_json_with_low_temperature():
    model = FakeLanguageModel()
    await SentimentClassifier(model, max_tokens=300, temperature=0.1).classify(EXAMPLE_REVIEW)

    call = model.calls_of("sentiment")[0]
    assert call["max_tokens"] == 300
    assert call["temperature"] == 0.1
    assert EXAMPLE_REVIEW in call["user_prompt"]


@pytest.mark.parametrize(
    "script",
    [
        ConnectionError("boom"),
        "not json at all",
        json.dumps(["positive"]),
        json.dumps({"sentiment": "ecstatic", "score": 0.9, "confidence": "high"}),
        json.dumps({"sentiment": "positive", "score": 1.7, "confidence": "high"}),
        json.dumps({"sentiment": "positive", "score": 0.8, "confidence": "certain"}),
    ],
)
async def test_any_primary_failure_falls_back_to_keywords(script):
    model = FakeLanguageModel(sentiment=script)
    result = await SentimentClassifier(model).classify(EXAMPLE_REVIEW)

    assert result.sentiment == "positive"
    assert result.confidence == "low"
    assert result.score == 0.5
    assert result.key_emotions == []
    assert result.main_concerns == []


async def test_fallback_never_raises_for_neutral_text():
    model = FakeLanguageModel(sentiment=RuntimeError("provider down"))
    result = await SentimentClassifier(model).classify("We visited on a Tuesday afternoon.")
    assert result.sentiment == "neutral"


def test_keyword_majority_decides_label():
    assert keyword_sentiment("Terrible wait and awful food, but good music").sentiment == "negative"
    assert keyword_sentiment("Amazing staff, perfect room, one bad pillow").sentiment == "positive"


def test_keyword_tie_is_neutral():
    assert keyword_sentiment("Good food, bad parking").sentiment == "neutral"


def test_keyword_matching_is_substring_and_case_insensitive():
    assert keyword_sentiment("GREATLY improved since last year").sentiment == "positive"
    assert keyword_sentiment("Honestly DISAPPOINTED").sentiment == "negative"


def test_keyword_counts_each_word_once():
    assert keyword_sentiment("great great great but terrible and awful").sentiment == "negative"


def test_parse_sentiment_defaults_missing_lists():
    result = parse_sentiment(json.dumps({"sentiment": "neutral", "score": 0.5, "confidence": "low"}))
    assert result.key_emotions == []
    assert result.main_concerns == []


async def test_fallback_is_logged_as_error(log_records):
    model = FakeLanguageModel(sentiment=ConnectionError("provider unreachable"))
    await SentimentClassifier(model).classify(EXAMPLE_REVIEW)

    errors = log_records.messages(logging.ERROR)
    assert len(errors) == 1
    assert "keyword fallback" in errors[0]
    assert "provider unreachable" in errors[0]


async def test_model_result_is_logged_at_debug(log_records):
    await SentimentClassifier(FakeLanguageModel()).classify(EXAMPLE_REVIEW)

    assert log_records.messages(logging.ERROR) == []
    assert any(
        "sentiment=positive" in m and "score=0.92" in m and "confidence=high" in m
        for m in log_records.messages(logging.DEBUG)
    )
