"""Prompt composition for response generation"""
from __future__ import annotations

from dataclasses import dataclass

from src.responses.context import resolve_context, resolve_strategy, resolve_tone

CANDIDATE_COUNT = 3
MIN_WORDS = 50
MAX_WORDS = 150

OUTPUT_FORMAT = """[
  {
    "response": "Response text here...",
    "length": 95,
    "key_points": ["point1", "point2"]
  },
  {
    "response": "Response text here...",
    "length": 87,
    "key_points": ["point1", "point2"]
  },
  {
    "response": "Response text here...",
    "length": 102,
    "key_points": ["point1", "point2"]
  }
]"""


@dataclass(frozen=True)
class ComposedPrompt:
    system_instructions: str
    user_payload: str


def compose_prompt(
    review_text: str,
    business_type: str,
    tone: str,
    business_name: str,
    sentiment: str,
) -> ComposedPrompt:
    """
    Build the system instructions and user payload for one generation call

    Args:
        review_text: Literal review text
        business_type: Business-type tag (unknown tags use the default context)
        tone: Tone tag (unknown tags use the professional tone)
        business_name: Name each response must include
        sentiment: Resolved sentiment label

    Returns:
        ComposedPrompt; identical inputs always produce identical prompts
    """
    context = resolve_context(business_type)
    tone_instruction = resolve_tone(tone)
    strategy = resolve_strategy(sentiment)

    requirements = [
        f"Generate exactly {CANDIDATE_COUNT} different response options",
        "Each response should be 2-4 sentences long",
        f'Include the business name: "{business_name}"',
        "Address specific points mentioned in the review",
        ", ".join(strategy.required_elements),
        "Make each response unique but appropriate",
        f"Keep responses between {MIN_WORDS}-{MAX_WORDS} words each",
        "Use natural, human-like language",
        "Avoid generic templates",
    ]
    requirement_lines = "\n".join(f"- {line}" for line in requirements)

    system_instructions = (
        f"You are an expert at writing professional review responses for {business_type} businesses.\n\n"
        f"BUSINESS CONTEXT: {context.specialty_guidance}\n"
        f"TONE: {tone_instruction}\n"
        f"STRATEGY: {strategy.approach}\n\n"
        f"REQUIREMENTS:\n{requirement_lines}\n\n"
        f"Return ONLY a JSON array with this exact format:\n{OUTPUT_FORMAT}"
    )

    user_payload = (
        f'Original Review: "{review_text}"\n\n'
        f"Business: {business_name}\n"
        f"Business Type: {business_type}\n"
        f"Requested Tone: {tone}\n"
        f"Review Sentiment: {sentiment}"
    )

    return ComposedPrompt(
        system_instructions=system_instructions,
        user_payload=user_payload,
    )
