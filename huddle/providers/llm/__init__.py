"""Language model providers used by the response classifier."""

from huddle.config.models.providers import LLMProviderConfig
from huddle.providers.llm.base import (
    AuthenticationError,
    LLMMessage,
    LLMProvider,
    LLMResponse,
    ModelError,
    ProviderError,
    ProviderTimeoutError,
    RateLimitError,
)
from huddle.providers.llm.executor import LLMExecutor
from huddle.providers.llm.mock import MockLLMProvider


def create_llm_provider(config: LLMProviderConfig) -> LLMProvider:
    """Build the provider named by the configuration."""
    if config.provider == "mock":
        return MockLLMProvider(default_model=config.model)
    return LLMExecutor(config)


__all__ = [
    "AuthenticationError",
    "LLMExecutor",
    "LLMMessage",
    "LLMProvider",
    "LLMResponse",
    "MockLLMProvider",
    "ModelError",
    "ProviderError",
    "ProviderTimeoutError",
    "RateLimitError",
    "create_llm_provider",
]
