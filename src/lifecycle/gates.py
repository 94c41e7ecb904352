"""Pass/fail gates run before a metered action"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from config import logger, settings
from src.core import (
    Account,
    AuthError,
    PaymentRequiredError,
    QuotaExceededError,
    RateLimitExceededError,
)
from src.core.ports.cache import Cache
from src.core.ports.credentials import CredentialVerifier
from src.core.ports.storage import Storage

BLACKLIST_PREFIX = "blacklist:"
REFRESH_TOKEN_PREFIX = "refresh_token:"
RATE_LIMIT_PREFIX = "rate_limit:generate:"


def extract_bearer(authorization: Optional[str]) -> Optional[str]:
    """Return the token part of an 'Authorization: Bearer <token>' header value"""
    if not authorization:
        return None
    parts = authorization.strip().split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return None


class AuthGate:
    """
    Resolves the caller's account from a bearer credential

    A credential found on the blacklist is rejected as invalid even when its
    embedded expiry is still in the future.
    """

    def __init__(self, verifier: CredentialVerifier, storage: Storage, cache: Cache) -> None:
        self.verifier = verifier
        self.storage = storage
        self.cache = cache

    async def authenticate(self, token: Optional[str]) -> Account:
        if not token:
            raise AuthError(reason="missing")

        claims = self.verifier.verify(token)

        if await self.cache.exists(f"{BLACKLIST_PREFIX}{token}"):
            raise AuthError(reason="invalid", message="This token has been invalidated")

        account = await self.storage.get_account(claims.user_id)
        if account is None or not account.is_active:
            raise AuthError(reason="invalid", message="User account not found or deactivated")

        logger.debug(f"User authenticated: user_id={account.id}")
        return account

    async def revoke(self, token: str, now: datetime) -> bool:
        """
        Blacklist a credential for the rest of its lifetime and drop the
        owner's refresh token

        Returns:
            True if the credential was blacklisted, False if it had already expired
        """
        try:
            claims = self.verifier.verify(token)
        except AuthError as e:
            logger.info(f"Skipping revocation of unusable token: {e.code}")
            return False

        ttl_seconds = int((claims.expires_at - now).total_seconds())
        if ttl_seconds <= 0:
            return False

        await self.cache.set(f"{BLACKLIST_PREFIX}{token}", True, ttl_seconds)
        await self.cache.delete(f"{REFRESH_TOKEN_PREFIX}{claims.user_id}")
        logger.info(f"Token revoked for user_id={claims.user_id}")
        return True


class SubscriptionGate:
    """Rejects callers whose trial has ended without an active subscription"""

    def __init__(self, storage: Storage) -> None:
        self.storage = storage

    async def check(self, account: Account, now: datetime) -> None:
        if account.trial_end_date is None or account.in_trial(now):
            return

        if await self.storage.has_active_subscription(account.id):
            return

        raise PaymentRequiredError(
            trial_end_date=account.trial_end_date.isoformat(),
            remediation="Upgrade to a paid plan to continue generating responses",
        )


class QuotaGate:
    """Rejects callers who have used their monthly allowance"""

    def check_usage(self, account: Account) -> int:
        """
        Compare the pre-request usage snapshot against the limit

        Concurrent requests from the same caller can both pass before either
        increments; the counter is only incremented after generation completes.

        Returns:
            Remaining requests before this one
        """
        if account.monthly_usage >= account.usage_limit:
            raise QuotaExceededError(
                current_usage=account.monthly_usage,
                limit=account.usage_limit,
            )
        return account.usage_limit - account.monthly_usage


class RateLimitGate:
    """Fixed-window request counter per caller, kept in the cache"""

    def __init__(
        self,
        cache: Cache,
        max_requests: int = settings.rate_limit_max_requests,
        window_seconds: int = settings.rate_limit_window_seconds,
    ) -> None:
        self.cache = cache
        self.max_requests = max_requests
        self.window_seconds = window_seconds

    async def check(self, user_id: str) -> int:
        """
        Count this request against the caller's window

        Returns:
            Requests remaining in the current window

        Raises:
            RateLimitExceededError: With retry_after seconds until the window resets
        """
        key = f"{RATE_LIMIT_PREFIX}{user_id}"
        count = await self.cache.incr(key)
        if count == 1:
            await self.cache.expire(key, self.window_seconds)

        if count > self.max_requests:
            ttl = await self.cache.ttl(key)
            retry_after = ttl if ttl > 0 else self.window_seconds
            logger.warning(f"Rate limit exceeded for user_id={user_id} count={count}")
            raise RateLimitExceededError(
                retry_after=retry_after,
                limit=self.max_requests,
                window_seconds=self.window_seconds,
            )
        return self.max_requests - count
