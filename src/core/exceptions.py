"""Custom exceptions for the review response application"""

from typing import Any, Dict, Optional


class AppError(Exception):
    """
    Base exception for all application errors

    Attributes:
        message: Human-readable error message
        code: Short error code for identification
        status_code: HTTP-equivalent status for callers that map errors to responses
        extra: Machine-readable metadata surfaced next to code and message
    """

    code: str = "GENERAL_ERROR"
    message: str = "An application error occurred"
    status_code: int = 500

    def __init__(
        self,
        code: Optional[str] = None,
        message: Optional[str] = None,
        **kwargs: Any
    ):
        self.code = code or self.code
        self.message = message or self.message
        self.extra = kwargs
        super().__init__(self.message)

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for response"""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                **self.extra,
            }
        }

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"

class InvalidInputError(AppError):
    """Raised when request data is invalid (review too short, missing business name, etc.)"""
    code = "INVALID_INPUT"
    message = "The provided input is invalid or malformed"
    status_code = 400

class AuthError(AppError):
    """
    Raised when the bearer credential is missing, invalid, expired or revoked

    A revoked (blacklisted) credential is reported with reason 'invalid'
    """
    code = "AUTH_FAILED"
    message = "Authentication failed"
    status_code = 401

    _CODES = {
        "missing": ("TOKEN_MISSING", "Please provide a valid access token"),
        "invalid": ("TOKEN_INVALID", "The provided token is invalid"),
        "expired": ("TOKEN_EXPIRED", "The provided token has expired"),
    }

    def __init__(self, reason: str = "invalid", message: Optional[str] = None, **kwargs: Any):
        if reason not in self._CODES:
            raise ValueError(f"Unknown auth failure reason: {reason}")
        code, default_message = self._CODES[reason]
        self.reason = reason
        super().__init__(code=code, message=message or default_message, **kwargs)

class PaymentRequiredError(AppError):
    """Raised when the trial window has elapsed and no active subscription exists"""
    code = "TRIAL_EXPIRED"
    message = "Your trial has expired. Please upgrade to continue using ReviewBot Pro."
    status_code = 402

class QuotaExceededError(AppError):
    """Raised when the monthly generation quota is used up"""
    code = "USAGE_LIMIT_EXCEEDED"
    message = (
        "You have reached your monthly usage limit. "
        "Please upgrade your plan or wait for the next billing cycle."
    )
    status_code = 429

class RateLimitExceededError(AppError):
    """Raised when a caller sends too many generation requests within the window"""
    code = "RATE_LIMIT_EXCEEDED"
    message = "Too many response generation requests, please try again later."
    status_code = 429

class GenerationError(AppError):
    """Raised when the model call fails or its output breaks the 3-candidate contract"""
    code = "GENERATION_FAILED"
    message = "Failed to generate review responses. Please try again."
    status_code = 502
