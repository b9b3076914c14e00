"""LLM providers for text generation."""

from colloquy.providers.llm.anthropic import AnthropicProvider
from colloquy.providers.llm.base import (
    AuthenticationError,
    ContentFilterError,
    LLMMessage,
    LLMProvider,
    LLMResponse,
    ModelError,
    ProviderError,
    RateLimitError,
    TokenUsage,
)
from colloquy.providers.llm.mock import MockLLMProvider
from colloquy.providers.llm.openai import OpenAIProvider

__all__ = [
    "AnthropicProvider",
    "AuthenticationError",
    "ContentFilterError",
    "LLMMessage",
    "LLMProvider",
    "LLMResponse",
    "MockLLMProvider",
    "ModelError",
    "OpenAIProvider",
    "ProviderError",
    "RateLimitError",
    "TokenUsage",
]
