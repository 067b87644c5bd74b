"""Mock LLM provider for testing."""

from typing import Any

from huddle.providers.llm.base import LLMMessage, LLMProvider, LLMResponse


class MockLLMProvider(LLMProvider):
    """Mock LLM provider for testing.

    Returns configurable responses without making actual API calls.
    Responses are matched on a substring of the last message.
    """

    def __init__(
        self,
        default_response: str = "{}",
        default_model: str = "mock-model",
        responses: dict[str, str] | None = None,
    ):
        """Initialize mock provider.

        Args:
            default_response: Response to return when no trigger matches
            default_model: Model name to report
            responses: Dict mapping trigger substrings to responses
        """
        self._default_response = default_response
        self._default_model = default_model
        self._responses = responses or {}
        self._call_history: list[dict[str, Any]] = []

    @property
    def provider_name(self) -> str:
        return "mock"

    @property
    def call_history(self) -> list[dict[str, Any]]:
        """History of calls for testing assertions."""
        return self._call_history

    def set_response(self, trigger: str, response: str) -> None:
        """Set a response for messages containing `trigger`."""
        self._responses[trigger] = response

    async def generate(
        self,
        messages: list[LLMMessage],
        *,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> LLMResponse:
        """Generate mock response."""
        self._call_history.append({
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
        })

        content = self._default_response
        if messages:
            last_message = messages[-1].content
            for trigger, response in self._responses.items():
                if trigger in last_message:
                    content = response
                    break

        return LLMResponse(content=content, model=self._default_model, finish_reason="stop")
