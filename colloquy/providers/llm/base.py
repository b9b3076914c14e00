"""LLM provider interface, data models and error types.

- LLMMessage: input message format
- LLMResponse: output response format
- TokenUsage: token counting
- LLMProvider: abstract backend (OpenAI, Anthropic, mock)
- Error types for different failure modes
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from typing import Any, Literal

from pydantic import BaseModel, Field

from colloquy.config.models.providers import ProviderConfig

MessageRole = Literal["system", "user", "assistant", "tool"]


class LLMMessage(BaseModel):
    """A message in a conversation."""

    role: MessageRole = Field(..., description="Role: system, user, assistant or tool")
    content: str = Field(..., description="Message content")


class TokenUsage(BaseModel):
    """Token usage statistics."""

    prompt_tokens: int = Field(..., description="Tokens in prompt")
    completion_tokens: int = Field(..., description="Tokens in completion")
    total_tokens: int = Field(..., description="Total tokens used")


class LLMResponse(BaseModel):
    """Response from an LLM call."""

    content: str = Field(..., description="Generated text")
    model: str = Field(..., description="Model used")
    finish_reason: str | None = Field(default=None, description="Why generation stopped")
    usage: TokenUsage | None = Field(default=None, description="Token usage stats")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Execution metadata")


# ============================================================================
# Error Types
# ============================================================================


class ProviderError(Exception):
    """Base exception for LLM provider errors."""

    pass


class AuthenticationError(ProviderError):
    """Invalid or missing API key."""

    pass


class RateLimitError(ProviderError):
    """Rate limit exceeded."""

    pass


class ModelError(ProviderError):
    """Model not found or unavailable."""

    pass


class ContentFilterError(ProviderError):
    """Content blocked by safety filter."""

    pass


# ============================================================================
# Provider Interface
# ============================================================================


class LLMProvider(ABC):
    """Abstract interface for text generation backends."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name."""
        pass

    @property
    @abstractmethod
    def config(self) -> ProviderConfig:
        """Return the generation parameters in use."""
        pass

    @abstractmethod
    async def generate(self, messages: list[LLMMessage], **kwargs: Any) -> LLMResponse:
        """Generate a completion for the conversation.

        Args:
            messages: Ordered conversation messages
            **kwargs: Per-call overrides of config fields

        Returns:
            LLMResponse with generated content

        Raises:
            ProviderError: On any backend failure
        """
        pass

    @abstractmethod
    def generate_stream(self, messages: list[LLMMessage], **kwargs: Any) -> AsyncIterator[str]:
        """Stream a completion as text chunks."""
        pass

    async def complete(self, messages: list[LLMMessage], **kwargs: Any) -> str:
        """Generate and return only the text."""
        response = await self.generate(messages, **kwargs)
        return response.content
