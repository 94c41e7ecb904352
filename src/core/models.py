"""Core data models for the review response system"""
import math
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

SentimentType = Literal["positive", "negative", "neutral"]
ConfidenceType = Literal["high", "medium", "low"]

BUSINESS_TYPES = (
    "restaurant",
    "salon",
    "retail",
    "medical",
    "automotive",
    "professional_services",
    "hotel",
)
TONES = ("professional", "friendly", "apologetic", "grateful", "formal")

REVIEW_MIN_LENGTH = 10
REVIEW_MAX_LENGTH = 2000


class ReviewInput(BaseModel):
    """A review submitted for response generation"""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    text: str = Field(
        ...,
        min_length=REVIEW_MIN_LENGTH,
        max_length=REVIEW_MAX_LENGTH,
        description="Review text, 10-2000 characters"
    )
    business_type: str = Field(
        ...,
        description="Business type tag; unknown values resolve to the default context"
    )
    tone: str = Field(
        ...,
        description="Requested tone tag; unknown values resolve to 'professional'"
    )
    business_name: str = Field(
        ...,
        min_length=1,
        description="Name every response must mention"
    )


class SentimentResult(BaseModel):
    """Structured sentiment judgment for a single review"""
    model_config = ConfigDict(frozen=True)

    sentiment: SentimentType = Field(
        ...,
        description="Detected sentiment: 'positive', 'negative' or 'neutral'"
    )
    score: float = Field(
        ...,
        ge=0.0,
        le=1.0,
        description="Classifier score in [0, 1]"
    )
    confidence: ConfidenceType = Field(
        ...,
        description="Confidence bucket: 'high', 'medium' or 'low'"
    )
    key_emotions: List[str] = Field(default_factory=list)
    main_concerns: List[str] = Field(default_factory=list)


class ResponseCandidate(BaseModel):
    """One of the three generated response drafts"""
    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=1, description="1-based position in generation order")
    text: str = Field(..., min_length=1)
    word_length: int = Field(..., ge=0)
    tone: str
    sentiment_addressed: SentimentType
    estimated_reading_seconds: int = Field(..., ge=0)
    key_points: List[str] = Field(default_factory=list)

    def to_record(self) -> Dict[str, Any]:
        """Shape stored in generated_responses.generated_responses_json"""
        return {
            "id": self.id,
            "response": self.text,
            "length": self.word_length,
            "key_points": list(self.key_points),
            "tone": self.tone,
            "sentiment_addressed": self.sentiment_addressed,
            "estimated_reading_time": self.estimated_reading_seconds,
        }


class GenerationMetadata(BaseModel):
    """Everything about a generation except the candidates themselves"""
    model_config = ConfigDict(frozen=True)

    original_review: str
    business_type: str
    tone: str
    sentiment: SentimentResult
    generated_at: datetime
    model: Optional[str] = None


class GenerationResult(BaseModel):
    """Immutable outcome of one generation call"""
    model_config = ConfigDict(frozen=True)

    candidates: List[ResponseCandidate] = Field(..., min_length=3, max_length=3)
    sentiment: SentimentResult
    business_type: str
    tone: str
    generated_at: datetime
    original_review: str
    model: Optional[str] = None

    def metadata(self) -> GenerationMetadata:
        return GenerationMetadata(
            original_review=self.original_review,
            business_type=self.business_type,
            tone=self.tone,
            sentiment=self.sentiment,
            generated_at=self.generated_at,
            model=self.model,
        )


class SingleResponse(BaseModel):
    """First candidate only, for unattended callers"""
    model_config = ConfigDict(frozen=True)

    text: str
    sentiment: SentimentResult
    metadata: GenerationMetadata


class Account(BaseModel):
    """Caller account as stored by the persistence collaborator"""
    id: str
    email: str
    business_name: str
    business_type: str
    subscription_tier: str = "starter"
    monthly_usage: int = Field(default=0, ge=0)
    usage_limit: int = Field(default=100, ge=0)
    is_active: bool = True
    trial_start_date: Optional[datetime] = None
    trial_end_date: Optional[datetime] = None

    def in_trial(self, now: datetime) -> bool:
        return self.trial_end_date is not None and now <= self.trial_end_date


class UsageState(BaseModel):
    """Read-only usage snapshot of an account"""
    monthly_usage: int
    usage_limit: int
    trial_end_date: Optional[datetime] = None
    has_active_subscription: bool = False

    @property
    def remaining(self) -> int:
        return max(0, self.usage_limit - self.monthly_usage)

    def trial_days_remaining(self, now: datetime) -> int:
        if self.trial_end_date is None or now > self.trial_end_date:
            return 0
        return math.ceil((self.trial_end_date - now).total_seconds() / 86400)


class CredentialClaims(BaseModel):
    """Identity carried by a verified bearer credential"""
    user_id: str
    expires_at: datetime


class GenerationReceipt(BaseModel):
    """Result handed back by the gated request lifecycle"""
    record_id: str
    result: GenerationResult
    monthly_usage: int = Field(
        ...,
        ge=0,
        description="Expected usage after this request; the increment runs in the background and is not confirmed",
    )
    usage_limit: int = Field(..., ge=0)


class BatchReview(BaseModel):
    """One review queued for batch processing"""
    review_id: str
    text: str

    @field_validator("review_id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> str:
        return str(value)


class BatchSuccess(BaseModel):
    review_id: str
    result: SingleResponse


class BatchFailure(BaseModel):
    review_id: str
    error_message: str


class BatchOutcome(BaseModel):
    """Per-item outcome of a batch run; failures never abort the batch"""
    succeeded: List[BatchSuccess] = Field(default_factory=list)
    failed: List[BatchFailure] = Field(default_factory=list)
