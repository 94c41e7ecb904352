"""In-process implementations of the storage, cache and credential ports

Used by the Gradio demo and the test-suite. State lives on the instance, so
each container owns its own collaborators.
"""
from __future__ import annotations

import json
import secrets
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

from config import settings
from src.core import Account, AuthError, CredentialClaims


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class GeneratedResponseRecord:
    """Row of the generated_responses table"""
    id: str
    user_id: str
    original_review: str
    business_type: str
    tone: str
    generated_responses_json: str
    response_status: str
    auto_generated: bool
    sentiment_score: Optional[float]
    sentiment_category: Optional[str]
    created_at: datetime

    @property
    def candidates(self) -> List[Dict[str, Any]]:
        return json.loads(self.generated_responses_json)


@dataclass
class AuditLogRecord:
    user_id: Optional[str]
    action: str
    resource_type: Optional[str]
    resource_id: Optional[str]
    details: Dict[str, Any]
    created_at: datetime = field(default_factory=_utcnow)


class InMemoryStorage:
    """Accounts, subscriptions, generated responses and audit log held in dicts"""

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self.accounts: Dict[str, Account] = {}
        self.subscriptions: Dict[str, str] = {}
        self.generated_responses: Dict[str, GeneratedResponseRecord] = {}
        self.audit_logs: List[AuditLogRecord] = []

    def create_account(
        self,
        email: str,
        business_name: str,
        business_type: str,
        trial_days: int = settings.trial_days,
        usage_limit: int = settings.trial_usage_limit,
        monthly_usage: int = 0,
    ) -> Account:
        """Register an account whose trial starts now"""
        now = self._clock()
        account = Account(
            id=str(uuid.uuid4()),
            email=email,
            business_name=business_name,
            business_type=business_type,
            monthly_usage=monthly_usage,
            usage_limit=usage_limit,
            trial_start_date=now,
            trial_end_date=now + timedelta(days=trial_days),
        )
        self.accounts[account.id] = account
        return account

    def update_account(self, user_id: str, **changes: Any) -> Account:
        account = self.accounts[user_id].model_copy(update=changes)
        self.accounts[user_id] = account
        return account

    def add_subscription(self, user_id: str, status: str = "active") -> None:
        self.subscriptions[user_id] = status

    async def get_account(self, user_id: str) -> Optional[Account]:
        account = self.accounts.get(user_id)
        return account.model_copy() if account else None

    async def has_active_subscription(self, user_id: str) -> bool:
        return self.subscriptions.get(user_id) == "active"

    async def insert_generated_response(
        self,
        user_id: str,
        original_review: str,
        business_type: str,
        tone: str,
        candidates: List[Dict[str, Any]],
        status: str = "pending",
        auto_generated: bool = False,
        sentiment_score: Optional[float] = None,
        sentiment_category: Optional[str] = None,
    ) -> str:
        record = GeneratedResponseRecord(
            id=str(uuid.uuid4()),
            user_id=user_id,
            original_review=original_review,
            business_type=business_type,
            tone=tone,
            generated_responses_json=json.dumps(candidates),
            response_status=status,
            auto_generated=auto_generated,
            sentiment_score=sentiment_score,
            sentiment_category=sentiment_category,
            created_at=self._clock(),
        )
        self.generated_responses[record.id] = record
        return record.id

    async def increment_usage(self, user_id: str) -> int:
        account = self.accounts[user_id]
        updated = self.update_account(user_id, monthly_usage=account.monthly_usage + 1)
        return updated.monthly_usage

    async def record_audit(
        self,
        user_id: Optional[str],
        action: str,
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.audit_logs.append(
            AuditLogRecord(
                user_id=user_id,
                action=action,
                resource_type=resource_type,
                resource_id=resource_id,
                details=details or {},
            )
        )


class InMemoryCache:
    """Key/value cache with per-key expiry measured on a monotonic clock"""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._data: Dict[str, Tuple[Any, Optional[float]]] = {}

    def _live(self, key: str) -> Optional[Tuple[Any, Optional[float]]]:
        entry = self._data.get(key)
        if entry is None:
            return None
        _, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            del self._data[key]
            return None
        return entry

    async def get(self, key: str) -> Optional[Any]:
        entry = self._live(key)
        return entry[0] if entry else None

    async def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        expires_at = self._clock() + ttl_seconds if ttl_seconds else None
        self._data[key] = (value, expires_at)

    async def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    async def exists(self, key: str) -> bool:
        return self._live(key) is not None

    async def incr(self, key: str) -> int:
        entry = self._live(key)
        if entry is None:
            self._data[key] = (1, None)
            return 1
        value, expires_at = entry
        value = int(value) + 1
        self._data[key] = (value, expires_at)
        return value

    async def expire(self, key: str, ttl_seconds: int) -> bool:
        entry = self._live(key)
        if entry is None:
            return False
        self._data[key] = (entry[0], self._clock() + ttl_seconds)
        return True

    async def ttl(self, key: str) -> int:
        entry = self._live(key)
        if entry is None:
            return -2
        if entry[1] is None:
            return -1
        return max(0, int(round(entry[1] - self._clock())))


class InMemoryCredentialIssuer:
    """Issues opaque bearer tokens and verifies them against an in-process table"""

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._tokens: Dict[str, CredentialClaims] = {}

    def issue(self, user_id: str, ttl: timedelta = timedelta(days=7)) -> str:
        token = secrets.token_urlsafe(32)
        self._tokens[token] = CredentialClaims(user_id=user_id, expires_at=self._clock() + ttl)
        return token

    def verify(self, token: str) -> CredentialClaims:
        claims = self._tokens.get(token)
        if claims is None:
            raise AuthError(reason="invalid")
        if self._clock() >= claims.expires_at:
            raise AuthError(reason="expired")
        return claims
