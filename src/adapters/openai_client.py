"""
OpenAI chat-completions adapter for the LanguageModel port

- System prompt: sets the model's role (constant per task)
- User prompt: the review and request details (changes per call)
- expect_json: asks the provider for a JSON object (used for sentiment)
"""
from __future__ import annotations

from typing import Any, Optional

from openai import AsyncOpenAI

from config import logger, settings


class OpenAIChatModel:
    """LanguageModel backed by openai.AsyncOpenAI; retries are left to the SDK"""

    def __init__(
        self,
        api_key: Optional[str] = settings.openai_api_key,
        model: str = settings.openai_model,
        base_url: Optional[str] = settings.openai_base_url,
        max_retries: int = settings.openai_max_retries,
        timeout: float = settings.openai_timeout_seconds,
        client: Optional[Any] = None,
    ) -> None:
        self.model_name = model
        if client is None:
            if not api_key:
                logger.warning("No OPENAI_API_KEY set. Model calls will fail and sentiment will use keywords.")
            client = AsyncOpenAI(
                api_key=api_key or "missing-api-key",
                base_url=base_url,
                max_retries=max_retries,
                timeout=timeout,
            )
        self._client = client

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        max_tokens: int,
        temperature: float,
        presence_penalty: float = 0.0,
        frequency_penalty: float = 0.0,
        expect_json: bool = False,
    ) -> str:
        kwargs: dict = {}
        if expect_json:
            kwargs["response_format"] = {"type": "json_object"}

        response = await self._client.chat.completions.create(
            model=self.model_name,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            max_tokens=max_tokens,
            temperature=temperature,
            presence_penalty=presence_penalty,
            frequency_penalty=frequency_penalty,
            **kwargs,
        )

        content = response.choices[0].message.content
        if content is None:
            raise ValueError("Model returned an empty completion")
        return content

    async def validate_connection(self) -> bool:
        await self._client.chat.completions.create(
            model=self.model_name,
            messages=[{"role": "user", "content": "Hello"}],
            max_tokens=5,
        )
        return True

    async def aclose(self) -> None:
        await self._client.close()
