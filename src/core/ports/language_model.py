"""Port for the chat language model used by sentiment analysis and generation"""
from typing import Protocol


class LanguageModel(Protocol):
    """Interface for a chat-completion style language model"""

    model_name: str

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
        """
        Send a system/user prompt pair and return the raw completion text

        Args:
            system_prompt (str): Instructions that set the model's role
            user_prompt (str): Per-request payload
            max_tokens (int): Completion token budget
            temperature (float): Sampling temperature
            presence_penalty (float): Penalty for reusing topics
            frequency_penalty (float): Penalty for repeating tokens
            expect_json (bool): Ask the provider to constrain output to a JSON object

        Returns:
            str: Completion text, unparsed

        Raises:
            Exception: Any transport or provider failure after the adapter's own retries
        """
        ...

    async def validate_connection(self) -> bool:
        """Cheap round trip to confirm the provider is reachable and the key works"""
        ...

    async def aclose(self) -> None:
        ...
