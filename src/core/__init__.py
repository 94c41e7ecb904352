"""
Core domain layer
"""
from .models import (
    BUSINESS_TYPES,
    TONES,
    Account,
    BatchFailure,
    BatchOutcome,
    BatchReview,
    BatchSuccess,
    CredentialClaims,
    GenerationMetadata,
    GenerationReceipt,
    GenerationResult,
    ResponseCandidate,
    ReviewInput,
    SentimentResult,
    SingleResponse,
    UsageState,
)
from .exceptions import (
    AppError,
    InvalidInputError,
    AuthError,
    PaymentRequiredError,
    QuotaExceededError,
    RateLimitExceededError,
    GenerationError,
)

__all__ = [
    "BUSINESS_TYPES",
    "TONES",
    "Account",
    "BatchFailure",
    "BatchOutcome",
    "BatchReview",
    "BatchSuccess",
    "CredentialClaims",
    "GenerationMetadata",
    "GenerationReceipt",
    "GenerationResult",
    "ResponseCandidate",
    "ReviewInput",
    "SentimentResult",
    "SingleResponse",
    "UsageState",
    "AppError",
    "InvalidInputError",
    "AuthError",
    "PaymentRequiredError",
    "QuotaExceededError",
    "RateLimitExceededError",
    "GenerationError",
]
