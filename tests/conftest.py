"""Shared fixtures: a scripted language model and in-memory collaborators"""
from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, List, Optional, Union

import pytest
import pytest_asyncio

from config import Settings
from src.adapters import InMemoryCache, InMemoryCredentialIssuer, InMemoryStorage
from src.container import build_container

Script = Union[str, Exception, Callable[[str], str]]

POSITIVE_SENTIMENT = json.dumps(
    {
        "sentiment": "positive",
        "score": 0.92,
        "confidence": "high",
        "key_emotions": ["satisfied", "happy"],
        "main_concerns": [],
    }
)

_FILLER = (
    "Our whole team works hard every single day to make each visit feel special, "
    "and hearing that the experience matched what we hoped to deliver means a great deal to us. "
    "We look forward to welcoming you back again very soon and sharing more of what we do best."
)


def business_name_from(user_prompt: str) -> str:
    match = re.search(r"^Business: (.+)$", user_prompt, re.MULTILINE)
    return match.group(1) if match else "our business"


def make_candidates(business_name: str, count: int = 3) -> str:
    items = []
    for index in range(count):
        text = f"Option {index + 1}: thank you for choosing {business_name}. {_FILLER}"
        items.append(
            {
                "response": text,
                "length": len(text.split()),
                "key_points": ["gratitude", f"point {index + 1}"],
            }
        )
    return json.dumps(items)


def default_generation(user_prompt: str) -> str:
    return make_candidates(business_name_from(user_prompt))


class FakeLanguageModel:
    """LanguageModel double; sentiment calls are the ones made with expect_json=True"""

    model_name = "fake-model"

    def __init__(
        self,
        sentiment: Script = POSITIVE_SENTIMENT,
        generation: Script = default_generation,
        connection_ok: bool = True,
    ) -> None:
        self.sentiment = sentiment
        self.generation = generation
        self.connection_ok = connection_ok
        self.calls: List[dict] = []
        self.closed = False

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        max_tokens: int,
        temperature: float,
        presence_penalty: float = 0.0,
        frequency_penalty: float = 0.0,
        expect_json: bool = False,
    ) -> str:
        self.calls.append(
            {
                "kind": "sentiment" if expect_json else "generation",
                "system_prompt": system_prompt,
                "user_prompt": user_prompt,
                "max_tokens": max_tokens,
                "temperature": temperature,
                "presence_penalty": presence_penalty,
                "frequency_penalty": frequency_penalty,
            }
        )
        script = self.sentiment if expect_json else self.generation
        if isinstance(script, Exception):
            raise script
        if callable(script):
            return script(user_prompt)
        return script

    async def validate_connection(self) -> bool:
        if not self.connection_ok:
            raise ConnectionError("provider unreachable")
        return True

    async def aclose(self) -> None:
        self.closed = True

    def calls_of(self, kind: str) -> List[dict]:
        return [call for call in self.calls if call["kind"] == kind]


class FakeClock:
    """Mutable 'now' for datetime-based collaborators"""

    def __init__(self, start: Optional[datetime] = None) -> None:
        self.now = start or datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: Any) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def fake_model() -> FakeLanguageModel:
    return FakeLanguageModel()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def storage(clock: FakeClock) -> InMemoryStorage:
    return InMemoryStorage(clock=clock)


@pytest.fixture
def cache() -> InMemoryCache:
    return InMemoryCache()


@pytest.fixture
def issuer(clock: FakeClock) -> InMemoryCredentialIssuer:
    return InMemoryCredentialIssuer(clock=clock)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        batch_delay_seconds=0.01,
        rate_limit_max_requests=5,
        rate_limit_window_seconds=60,
        openai_api_key="test-key",
    )


@pytest_asyncio.fixture
async def container(test_settings, fake_model, storage, cache, issuer, clock):
    built = build_container(
        settings=test_settings,
        language_model=fake_model,
        storage=storage,
        cache=cache,
        credentials=issuer,
        clock=clock,
    )
    yield built
    await built.aclose()


@pytest.fixture
def account(storage):
    return storage.create_account(
        email="owner@tonys.example",
        business_name="Tony's Diner",
        business_type="restaurant",
        trial_days=14,
        usage_limit=50,
    )


@pytest.fixture
def token(issuer, account) -> str:
    return issuer.issue(account.id, ttl=timedelta(days=30))


class RecordingHandler(logging.Handler):
    """Collects records from the app loggers, which do not propagate to caplog"""

    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.records: List[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)

    def messages(self, level: int, logger_name: str = "reviewbot") -> List[str]:
        return [
            r.getMessage() for r in self.records if r.levelno == level and r.name == logger_name
        ]


@pytest.fixture
def log_records():
    handler = RecordingHandler()
    loggers = [logging.getLogger("reviewbot"), logging.getLogger("reviewbot.business")]
    levels = [lg.level for lg in loggers]
    for lg in loggers:
        lg.addHandler(handler)
        lg.setLevel(logging.DEBUG)
    yield handler
    for lg, level in zip(loggers, levels):
        lg.removeHandler(handler)
        lg.setLevel(level)
