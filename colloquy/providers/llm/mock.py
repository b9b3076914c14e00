"""Mock LLM provider for testing."""

from collections.abc import AsyncIterator
from typing import Any

from colloquy.config.models.providers import ProviderConfig
from colloquy.providers.llm.base import (
    LLMMessage,
    LLMProvider,
    LLMResponse,
    ProviderError,
    TokenUsage,
)


class MockLLMProvider(LLMProvider):
    """Mock LLM provider for testing.

    Returns configurable responses without making actual API calls.
    A response is picked by the content of the last message; otherwise
    the default response is returned.
    """

    def __init__(
        self,
        default_response: str = "Mock response",
        responses: dict[str, str] | None = None,
        config: ProviderConfig | None = None,
        stream_chunk_size: int = 10,
        fail_with: ProviderError | None = None,
    ):
        """Initialize mock provider.

        Args:
            default_response: Response to return when no match found
            responses: Dict mapping last message content to responses
            config: Generation parameters to report
            stream_chunk_size: Number of chars per stream chunk
            fail_with: Error raised by every call until cleared
        """
        self._default_response = default_response
        self._responses = responses or {}
        self._config = config or ProviderConfig(model="mock-model")
        self._stream_chunk_size = stream_chunk_size
        self._fail_with = fail_with
        self._call_history: list[dict[str, Any]] = []

    @property
    def provider_name(self) -> str:
        return "mock"

    @property
    def config(self) -> ProviderConfig:
        return self._config

    @property
    def call_history(self) -> list[dict[str, Any]]:
        """Return history of calls for testing assertions."""
        return self._call_history

    def clear_history(self) -> None:
        self._call_history.clear()

    def set_response(self, trigger: str, response: str) -> None:
        """Set a response for a specific last-message content."""
        self._responses[trigger] = response

    def fail_next_calls(self, error: ProviderError | None) -> None:
        """Make subsequent calls raise ``error`` (None restores normal behavior)."""
        self._fail_with = error

    async def generate(self, messages: list[LLMMessage], **kwargs: Any) -> LLMResponse:
        """Generate mock response."""
        self._call_history.append({"messages": list(messages), "kwargs": kwargs})

        if self._fail_with is not None:
            raise self._fail_with

        content = self._default_response
        if messages and messages[-1].content in self._responses:
            content = self._responses[messages[-1].content]

        prompt_tokens = sum(len(m.content) // 4 for m in messages)
        completion_tokens = len(content) // 4
        return LLMResponse(
            content=content,
            model=kwargs.get("model", self._config.model),
            finish_reason="stop",
            usage=TokenUsage(
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=prompt_tokens + completion_tokens,
            ),
        )

    async def generate_stream(
        self, messages: list[LLMMessage], **kwargs: Any
    ) -> AsyncIterator[str]:
        """Stream mock response in chunks."""
        response = await self.generate(messages, **kwargs)
        content = response.content
        for i in range(0, len(content), self._stream_chunk_size):
            yield content[i : i + self._stream_chunk_size]
