import asyncio
import threading
from datetime import timedelta

from src.adapters import InMemoryCache, InMemoryCredentialIssuer, InMemoryStorage, OpenAIChatModel
from src.container import build_container, lifespan
from tests.conftest import FakeLanguageModel

REVIEW = "Great food and excellent service! Will definitely come back."


async def test_services_share_the_same_collaborators(container, fake_model, storage, cache):
    assert container.generator.language_model is fake_model
    assert container.generator.classifier.language_model is fake_model
    assert container.lifecycle.storage is storage
    assert container.lifecycle.auth_gate.cache is cache
    assert container.lifecycle.rate_limit_gate.max_requests == 5
    assert container.batch.generator is container.generator
    assert container.batch.delay_seconds == 0.01


async def test_default_adapters_are_used_when_nothing_is_injected(test_settings):
    built = build_container(settings=test_settings)
    try:
        assert isinstance(built.language_model, OpenAIChatModel)
        assert built.language_model.model_name == "gpt-4"
        assert isinstance(built.storage, InMemoryStorage)
        assert isinstance(built.cache, InMemoryCache)
        assert isinstance(built.credentials, InMemoryCredentialIssuer)
    finally:
        await built.aclose()


async def test_lifespan_closes_the_model(test_settings):
    model = FakeLanguageModel()
    async with lifespan(settings=test_settings, language_model=model) as built:
        assert built.language_model is model
        assert not model.closed
    assert model.closed


class SlowIncrementStorage(InMemoryStorage):
    async def increment_usage(self, user_id: str) -> int:
        await asyncio.sleep(0.2)
        return await super().increment_usage(user_id)


async def test_close_finishes_increments_started_on_a_server_loop(test_settings, clock):
    model = FakeLanguageModel()
    storage = SlowIncrementStorage(clock=clock)
    issuer = InMemoryCredentialIssuer(clock=clock)
    built = build_container(
        settings=test_settings,
        language_model=model,
        storage=storage,
        credentials=issuer,
        clock=clock,
    )
    account = storage.create_account(
        email="owner@tonys.example", business_name="Tony's Diner", business_type="restaurant"
    )
    token = issuer.issue(account.id, ttl=timedelta(days=30))

    server_loop = asyncio.new_event_loop()
    server = threading.Thread(target=server_loop.run_forever, daemon=True)
    server.start()
    try:
        request = built.lifecycle.handle(
            token=token, review_text=REVIEW, business_type="restaurant", tone="grateful"
        )
        receipt = await asyncio.wrap_future(asyncio.run_coroutine_threadsafe(request, server_loop))
        assert receipt.monthly_usage == 1
        assert storage.accounts[account.id].monthly_usage == 0

        await built.aclose()

        assert storage.accounts[account.id].monthly_usage == 1
        assert model.closed
    finally:
        server_loop.call_soon_threadsafe(server_loop.stop)
        server.join(timeout=5)
        server_loop.close()


async def test_close_still_releases_the_model_when_the_server_loop_is_gone(test_settings, clock):
    model = FakeLanguageModel()
    storage = SlowIncrementStorage(clock=clock)
    issuer = InMemoryCredentialIssuer(clock=clock)
    built = build_container(
        settings=test_settings, language_model=model, storage=storage, credentials=issuer, clock=clock
    )
    account = storage.create_account(
        email="owner@tonys.example", business_name="Tony's Diner", business_type="restaurant"
    )
    token = issuer.issue(account.id, ttl=timedelta(days=30))

    server_loop = asyncio.new_event_loop()
    server = threading.Thread(target=server_loop.run_forever, daemon=True)
    server.start()
    request = built.lifecycle.handle(
        token=token, review_text=REVIEW, business_type="restaurant", tone="grateful"
    )
    await asyncio.wrap_future(asyncio.run_coroutine_threadsafe(request, server_loop))
    server_loop.call_soon_threadsafe(server_loop.stop)
    server.join(timeout=5)

    await built.aclose()

    assert model.closed
    assert storage.accounts[account.id].monthly_usage == 0
    server_loop.close()
