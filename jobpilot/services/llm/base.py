"""Base class for LLM providers."""

from abc import ABC, abstractmethod


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    @abstractmethod
    async def generate(self, system_prompt: str, user_prompt: str) -> str:
        """Run one chat completion.

        Args:
            system_prompt: Role and output contract for the model
            user_prompt: Task payload

        Returns:
            Stripped completion text

        Raises:
            OracleError: transport failure or empty completion
        """
        pass
