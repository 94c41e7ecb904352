"""Fixed business, tone and sentiment-strategy tables used to steer generation"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Tuple

DEFAULT_BUSINESS_TYPE = "professional_services"
DEFAULT_TONE = "professional"


@dataclass(frozen=True)
class BusinessContext:
    """Keywords and specialty framing for one business type"""
    keywords: FrozenSet[str]
    specialty_guidance: str


@dataclass(frozen=True)
class SentimentStrategy:
    """How to respond to a review of a given sentiment"""
    approach: str
    required_elements: Tuple[str, ...]


BUSINESS_CONTEXTS: Dict[str, BusinessContext] = {
    "restaurant": BusinessContext(
        keywords=frozenset({"food", "service", "dining", "meal", "chef", "menu", "taste", "atmosphere"}),
        specialty_guidance="Focus on food quality, service speed, ambiance, and overall dining experience",
    ),
    "salon": BusinessContext(
        keywords=frozenset({"hair", "styling", "cut", "color", "treatment", "stylist", "appointment"}),
        specialty_guidance="Emphasize expertise, cleanliness, professionalism, and customer satisfaction",
    ),
    "retail": BusinessContext(
        keywords=frozenset({"product", "quality", "price", "staff", "selection", "store", "shopping"}),
        specialty_guidance="Focus on product quality, customer service, value, and shopping experience",
    ),
    "medical": BusinessContext(
        keywords=frozenset({"treatment", "care", "doctor", "staff", "appointment", "professional", "health"}),
        specialty_guidance="Emphasize professionalism, care quality, staff expertise, and patient comfort",
    ),
    "automotive": BusinessContext(
        keywords=frozenset({"service", "repair", "mechanic", "parts", "vehicle", "maintenance", "quality"}),
        specialty_guidance="Focus on technical expertise, reliability, honesty, and customer service",
    ),
    "professional_services": BusinessContext(
        keywords=frozenset({"service", "expertise", "professional", "quality", "communication", "results"}),
        specialty_guidance="Emphasize expertise, professionalism, results, and client satisfaction",
    ),
    "hotel": BusinessContext(
        keywords=frozenset({"stay", "room", "service", "staff", "amenities", "location", "experience"}),
        specialty_guidance="Focus on comfort, service quality, amenities, and overall guest experience",
    ),
}

TONE_INSTRUCTIONS: Dict[str, str] = {
    "professional": "Use formal, business-appropriate language. Be courteous and maintain professional boundaries.",
    "friendly": "Use warm, conversational tone. Be personable while remaining appropriate.",
    "apologetic": "Express genuine remorse and commitment to improvement. Focus on making things right.",
    "grateful": "Express sincere appreciation and gratitude. Highlight positive aspects mentioned.",
    "formal": "Use very formal, traditional business language. Be respectful and conservative in tone.",
}

SENTIMENT_STRATEGIES: Dict[str, SentimentStrategy] = {
    "positive": SentimentStrategy(
        approach="Express gratitude, reinforce positive experience, encourage future visits",
        required_elements=("thank the customer", "highlight specific positive points", "invite them back"),
    ),
    "negative": SentimentStrategy(
        approach="Acknowledge concerns, apologize sincerely, offer resolution, invite direct contact",
        required_elements=("acknowledge the issue", "take responsibility", "offer solution", "provide contact info"),
    ),
    "neutral": SentimentStrategy(
        approach="Thank for feedback, provide helpful information, encourage future engagement",
        required_elements=("thank for feedback", "provide additional value", "invite future interaction"),
    ),
}


def normalize_business_type(business_type: str) -> str:
    """
    Map a business-type tag to a known table key

    'professional services' and 'Professional-Services' both become
    'professional_services'. Anything unknown becomes DEFAULT_BUSINESS_TYPE.
    """
    key = (business_type or "").strip().lower().replace(" ", "_").replace("-", "_")
    if key in BUSINESS_CONTEXTS:
        return key
    return DEFAULT_BUSINESS_TYPE


def normalize_tone(tone: str) -> str:
    key = (tone or "").strip().lower()
    if key in TONE_INSTRUCTIONS:
        return key
    return DEFAULT_TONE


def resolve_context(business_type: str) -> BusinessContext:
    """Business context for the tag, or the professional-services context when unknown"""
    return BUSINESS_CONTEXTS[normalize_business_type(business_type)]


def resolve_tone(tone: str) -> str:
    """Tone instruction text for the tag, or the professional tone when unknown"""
    return TONE_INSTRUCTIONS[normalize_tone(tone)]


def resolve_strategy(sentiment: str) -> SentimentStrategy:
    # sentiment is validated upstream, so a KeyError here is a programming error
    return SENTIMENT_STRATEGIES[sentiment]
