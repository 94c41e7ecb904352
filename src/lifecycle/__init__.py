"""
Usage-gated request lifecycle
"""

from .gates import AuthGate, SubscriptionGate, QuotaGate, RateLimitGate, extract_bearer
from .lifecycle import RequestLifecycle

__all__ = [
    "AuthGate",
    "SubscriptionGate",
    "QuotaGate",
    "RateLimitGate",
    "extract_bearer",
    "RequestLifecycle",
]
