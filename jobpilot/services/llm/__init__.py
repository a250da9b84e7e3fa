from jobpilot.services.llm.base import LLMProvider
from jobpilot.services.llm.factory import get_llm_provider
from jobpilot.services.llm.providers import OpenAICompatibleProvider

__all__ = ["LLMProvider", "OpenAICompatibleProvider", "get_llm_provider"]
