import asyncio
import logging

from openai import APIError, APITimeoutError, OpenAI

from jobpilot.core.exceptions import OracleError
from jobpilot.services.llm.base import LLMProvider

logger = logging.getLogger(__name__)


class OpenAICompatibleProvider(LLMProvider):
    """Any chat-completions endpoint speaking the OpenAI protocol.

    Used for OpenRouter and for a local Ollama server.
    """

    def __init__(
        self,
        base_url: str,
        model: str,
        api_key: str = "",
        temperature: float = 0.7,
        max_tokens: int = 2000,
        timeout: float = 300.0,
    ):
        self.client = OpenAI(
            base_url=base_url,
            # Ollama ignores the key but the SDK insists on one
            api_key=api_key or "not-needed",
            timeout=timeout,
        )
        self.model = model
        self.base_url = base_url
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def generate(self, system_prompt: str, user_prompt: str) -> str:
        """Generate text for a system/user prompt pair."""
        try:
            logger.info(f"Calling LLM at {self.base_url} with model {self.model}")
            response = await asyncio.to_thread(
                self.client.chat.completions.create,
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except APITimeoutError as e:
            logger.error(f"LLM timeout: {e}")
            raise OracleError("LLM request timed out") from e
        except APIError as e:
            logger.error(f"LLM API error: {e}")
            raise OracleError(f"LLM API error: {e!s}") from e

        if not response.choices:
            raise OracleError("Empty response from LLM")
        content = response.choices[0].message.content
        if not content or not content.strip():
            raise OracleError("Empty content in response")
        logger.info(f"LLM response received, length: {len(content)}")
        return content.strip()
