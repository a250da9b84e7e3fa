"""Factory for creating LLM providers."""

from jobpilot.core.config import settings
from jobpilot.services.llm.base import LLMProvider
from jobpilot.services.llm.providers import OpenAICompatibleProvider


def get_llm_provider() -> LLMProvider:
    """Get the configured LLM provider instance."""
    if settings.llm_provider == "ollama":
        return OpenAICompatibleProvider(
            base_url=f"{settings.ollama_base_url}/v1",
            model=settings.ollama_model,
            temperature=settings.llm_temperature,
        )
    if settings.llm_provider == "openrouter":
        return OpenAICompatibleProvider(
            base_url=settings.llm_base_url,
            model=settings.llm_model,
            api_key=settings.llm_api_key,
            temperature=settings.llm_temperature,
            timeout=60.0,
        )
    raise ValueError(f"Unknown LLM provider: {settings.llm_provider}")
