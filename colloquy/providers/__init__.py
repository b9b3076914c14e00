"""External AI services: LLM and embedding providers.

Abstract interfaces with implementations for OpenAI, Anthropic,
sentence-transformers and in-process mocks.
"""

from colloquy.providers.embedding import (
    CachedEmbeddingProvider,
    EmbeddingProvider,
    MockEmbeddingProvider,
)
from colloquy.providers.factory import create_embedding_provider, create_llm_provider
from colloquy.providers.llm import LLMMessage, LLMProvider, MockLLMProvider, ProviderError

__all__ = [
    # LLM
    "LLMMessage",
    "LLMProvider",
    "MockLLMProvider",
    "ProviderError",
    # Embedding
    "CachedEmbeddingProvider",
    "EmbeddingProvider",
    "MockEmbeddingProvider",
    # Factories
    "create_embedding_provider",
    "create_llm_provider",
]
