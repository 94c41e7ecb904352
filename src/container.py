"""Container wiring collaborators into the services with dependency injection"""
from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import AsyncIterator, Callable, Optional

from config import Settings, logger, settings as default_settings
from src.adapters import (
    InMemoryCache,
    InMemoryCredentialIssuer,
    InMemoryStorage,
    OpenAIChatModel,
)
from src.core.ports.cache import Cache
from src.core.ports.credentials import CredentialVerifier
from src.core.ports.language_model import LanguageModel
from src.core.ports.storage import Storage
from src.lifecycle import AuthGate, QuotaGate, RateLimitGate, RequestLifecycle, SubscriptionGate
from src.responses import BatchOrchestrator, ResponseGenerator, SentimentClassifier


@dataclass
class Container:
    """
    Explicitly constructed set of collaborators and services

    Attributes:
        language_model: LanguageModel used for sentiment and generation
        storage: Persistence collaborator
        cache: Cache/counter collaborator
        credentials: Credential verifier
        generator: ResponseGenerator
        lifecycle: RequestLifecycle wrapping metered generation
        batch: BatchOrchestrator for unattended runs
    """
    settings: Settings
    language_model: LanguageModel
    storage: Storage
    cache: Cache
    credentials: CredentialVerifier
    generator: ResponseGenerator
    lifecycle: RequestLifecycle
    batch: BatchOrchestrator

    async def aclose(self) -> None:
        """Finish background usage increments, then release the model client"""
        try:
            await self.lifecycle.drain()
        finally:
            await self.language_model.aclose()
        logger.info("Container closed")


def build_container(
    settings: Optional[Settings] = None,
    language_model: Optional[LanguageModel] = None,
    storage: Optional[Storage] = None,
    cache: Optional[Cache] = None,
    credentials: Optional[CredentialVerifier] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> Container:
    """
    Build a Container; any collaborator not passed in gets its default adapter

    Returns:
        Container with every service wired to the same collaborators
    """
    settings = settings or default_settings
    language_model = language_model or OpenAIChatModel(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        base_url=settings.openai_base_url,
        max_retries=settings.openai_max_retries,
        timeout=settings.openai_timeout_seconds,
    )
    storage = storage or InMemoryStorage()
    cache = cache or InMemoryCache()
    credentials = credentials or InMemoryCredentialIssuer()

    classifier = SentimentClassifier(
        language_model,
        max_tokens=settings.sentiment_max_tokens,
        temperature=settings.sentiment_temperature,
    )
    generator = ResponseGenerator(
        language_model,
        classifier=classifier,
        max_tokens=settings.openai_max_tokens,
        temperature=settings.generation_temperature,
        presence_penalty=settings.generation_presence_penalty,
        frequency_penalty=settings.generation_frequency_penalty,
        clock=clock,
    )
    lifecycle = RequestLifecycle(
        auth_gate=AuthGate(credentials, storage, cache),
        subscription_gate=SubscriptionGate(storage),
        quota_gate=QuotaGate(),
        rate_limit_gate=RateLimitGate(
            cache,
            max_requests=settings.rate_limit_max_requests,
            window_seconds=settings.rate_limit_window_seconds,
        ),
        generator=generator,
        storage=storage,
        clock=clock,
    )
    batch = BatchOrchestrator(generator, delay_seconds=settings.batch_delay_seconds)

    logger.info(f"Container ready (model={getattr(language_model, 'model_name', 'unknown')})")
    return Container(
        settings=settings,
        language_model=language_model,
        storage=storage,
        cache=cache,
        credentials=credentials,
        generator=generator,
        lifecycle=lifecycle,
        batch=batch,
    )


@asynccontextmanager
async def lifespan(**overrides) -> AsyncIterator[Container]:
    """Open a Container for the duration of a block and close it on exit"""
    container = build_container(**overrides)
    try:
        yield container
    finally:
        await container.aclose()
