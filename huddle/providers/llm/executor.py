"""LLM executor backed by Agno model classes.

The configured provider name selects the Agno model:
- Claude for anthropic
- OpenAIChat for openai (and OpenAI-compatible base URLs)
- Ollama for ollama

Agno and vendor SDK errors are mapped onto the ProviderError hierarchy.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from huddle.config.models.providers import LLMProviderConfig
from huddle.observability.logging import get_logger
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

if TYPE_CHECKING:
    from agno.agent import Agent

logger = get_logger(__name__)

AGNO_PROVIDERS = ("anthropic", "openai", "ollama")

_KEYED_PROVIDERS = ("anthropic", "openai")


def _default_agent_factory(model: Any, instructions: list[str] | None) -> Agent:
    from agno.agent import Agent

    return Agent(model=model, instructions=instructions, markdown=False)


class LLMExecutor(LLMProvider):
    """Executes LLM calls against a single configured provider using Agno.

    Example:
        executor = LLMExecutor(LLMProviderConfig(provider="openai", model="gpt-4o-mini"))
        response = await executor.generate([LLMMessage(role="user", content="Hello")])
    """

    def __init__(
        self,
        config: LLMProviderConfig,
        agent_factory: Callable[[Any, list[str] | None], Agent] | None = None,
    ) -> None:
        """Initialize the executor.

        Args:
            config: Provider, model, credentials and limits
            agent_factory: Builds the Agno agent for one call (tests inject fakes)
        """
        if config.provider not in AGNO_PROVIDERS:
            raise ValueError(f"Unsupported LLM provider: {config.provider}")
        self._config = config
        self._agent_factory = agent_factory or _default_agent_factory

        logger.info("llm_executor_initialized", provider=config.provider, model=config.model)

    @property
    def provider_name(self) -> str:
        return self._config.provider

    @property
    def model(self) -> str:
        return self._config.model

    async def generate(
        self,
        messages: list[LLMMessage],
        *,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> LLMResponse:
        """Generate text from messages.

        Args:
            messages: Conversation messages; system messages become agent instructions
            max_tokens: Override of the configured token limit
            temperature: Override of the configured sampling temperature

        Returns:
            LLMResponse with the generated content

        Raises:
            ProviderError: On any provider failure, refined into the subclasses
                where the cause is known
        """
        max_tokens = max_tokens or self._config.max_tokens
        temperature = self._config.temperature if temperature is None else temperature

        agno_model = self._create_agno_model(max_tokens, temperature)
        system_prompt = self._get_system_prompt(messages)
        agent = self._agent_factory(agno_model, [system_prompt] if system_prompt else None)
        input_text = self._format_messages_for_agno(messages)

        start_time = time.perf_counter()
        try:
            run_response = await asyncio.wait_for(
                agent.arun(input_text), timeout=self._config.timeout
            )
        except asyncio.TimeoutError as e:
            raise ProviderTimeoutError(f"{self.provider_name} request timed out") from e
        except Exception as e:
            raise self._map_error(e) from e

        status = getattr(run_response, "status", None)
        if str(getattr(status, "value", status)).lower() == "error":
            raise ProviderError(f"Agno run failed: {run_response.content}")

        content = run_response.content
        content = "" if content is None else str(content)
        latency_ms = (time.perf_counter() - start_time) * 1000

        logger.debug(
            "llm_call_completed",
            provider=self.provider_name,
            model=self.model,
            latency_ms=round(latency_ms, 2),
            content_length=len(content),
        )
        return LLMResponse(
            content=content,
            model=self.model,
            finish_reason="stop",
            usage=None,  # Agno doesn't expose token usage consistently
            metadata={"latency_ms": latency_ms, "provider": self.provider_name},
        )

    def _api_key(self) -> str | None:
        if self._config.api_key is None:
            if self.provider_name in _KEYED_PROVIDERS:
                raise AuthenticationError(f"No API key configured for {self.provider_name}")
            return None
        return self._config.api_key.get_secret_value()

    def _create_agno_model(self, max_tokens: int, temperature: float) -> Any:
        """Create the Agno model class for the configured provider."""
        provider = self.provider_name
        api_key = self._api_key()

        if provider == "anthropic":
            from agno.models.anthropic import Claude

            client_params = {"base_url": self._config.base_url} if self._config.base_url else None
            return Claude(
                id=self.model,
                api_key=api_key,
                max_tokens=max_tokens,
                temperature=temperature,
                client_params=client_params,
            )

        elif provider == "openai":
            from agno.models.openai import OpenAIChat

            return OpenAIChat(
                id=self.model,
                api_key=api_key,
                base_url=self._config.base_url,
                max_tokens=max_tokens,
                temperature=temperature,
            )

        else:
            from agno.models.ollama import Ollama

            return Ollama(
                id=self.model,
                host=self._config.base_url,
                options={"temperature": temperature, "num_predict": max_tokens},
            )

    def _format_messages_for_agno(self, messages: list[LLMMessage]) -> str:
        """Convert our messages to Agno input format.

        Agno agents take a string input. Multi-turn input is formatted as a
        conversation; system messages are passed as instructions.
        """
        user_messages = [m for m in messages if m.role != "system"]

        if len(user_messages) == 1:
            return user_messages[0].content

        parts = []
        for msg in user_messages:
            if msg.role == "user":
                parts.append(f"User: {msg.content}")
            elif msg.role == "assistant":
                parts.append(f"Assistant: {msg.content}")
        return "\n\n".join(parts)

    def _get_system_prompt(self, messages: list[LLMMessage]) -> str | None:
        system = [m.content for m in messages if m.role == "system"]
        return "\n\n".join(system) if system else None

    def _map_error(self, error: Exception) -> ProviderError:
        if isinstance(error, ProviderError):
            return error

        provider = self.provider_name
        status_code = getattr(error, "status_code", None)
        message = str(error).lower()

        if "timeout" in type(error).__name__.lower():
            return ProviderTimeoutError(f"{provider} request timed out")
        if status_code in (401, 403):
            return AuthenticationError(f"{provider} rejected credentials")
        if status_code == 429 or ("rate" in message and "limit" in message):
            return RateLimitError(f"{provider} rate limited: {error}")
        if status_code == 404:
            return ModelError(f"{provider} model not found: {self.model}")
        return ProviderError(f"Agno execution failed: {error}")
