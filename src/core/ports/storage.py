"""Port for the persistence collaborator (accounts, generated responses, audit log)"""
from typing import Any, Dict, List, Optional, Protocol

from src.core.models import Account


class Storage(Protocol):
    """Interface for the relational store backing accounts and generation records"""

    async def get_account(self, user_id: str) -> Optional[Account]:
        """Return the account row, or None if no such account exists"""
        ...

    async def has_active_subscription(self, user_id: str) -> bool:
        ...

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
        """
        Insert a generated_responses row

        Returns:
            str: Identifier of the new record
        """
        ...

    async def increment_usage(self, user_id: str) -> int:
        """Atomically add one to monthly_usage and return the new value"""
        ...

    async def record_audit(
        self,
        user_id: Optional[str],
        action: str,
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        ...
