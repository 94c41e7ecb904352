import pytest

from src.core import (
    AppError,
    AuthError,
    GenerationError,
    InvalidInputError,
    PaymentRequiredError,
    QuotaExceededError,
    RateLimitExceededError,
)


@pytest.mark.parametrize(
    "error_cls,status",
    [
        (InvalidInputError, 400),
        (AuthError, 401),
        (PaymentRequiredError, 402),
        (QuotaExceededError, 429),
        (RateLimitExceededError, 429),
        (GenerationError, 502),
    ],
)
def test_status_codes(error_cls, status):
    error = error_cls()
    assert error.status_code == status
    assert isinstance(error, AppError)
    assert error.is_client_error == (status < 500)


def test_to_dict_carries_code_message_and_metadata():
    error = RateLimitExceededError(retry_after=120, limit=10)
    assert error.to_dict() == {
        "error": {
            "code": "RATE_LIMIT_EXCEEDED",
            "message": "Too many response generation requests, please try again later.",
            "retry_after": 120,
            "limit": 10,
        }
    }


@pytest.mark.parametrize(
    "reason,code",
    [("missing", "TOKEN_MISSING"), ("invalid", "TOKEN_INVALID"), ("expired", "TOKEN_EXPIRED")],
)
def test_auth_error_reasons_map_to_codes(reason, code):
    error = AuthError(reason=reason)
    assert error.code == code
    assert str(error).startswith(code)


def test_auth_error_rejects_unknown_reason():
    with pytest.raises(ValueError):
        AuthError(reason="blacklisted")


def test_generation_error_hides_cause_from_payload():
    try:
        try:
            raise ConnectionError("api.openai.com: 503 upstream")
        except ConnectionError as e:
            raise GenerationError() from e
    except GenerationError as error:
        assert "openai" not in str(error.to_dict())
