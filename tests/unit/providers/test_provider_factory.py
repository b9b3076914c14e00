"""Unit tests for the provider factories."""

from pydantic import SecretStr

from colloquy.config.models import EmbeddingProviderConfig, LLMProviderConfig
from colloquy.providers import create_embedding_provider, create_llm_provider
from colloquy.providers.embedding import CachedEmbeddingProvider, MockEmbeddingProvider
from colloquy.providers.llm import AnthropicProvider, MockLLMProvider, OpenAIProvider


class TestCreateLLMProvider:
    """Tests for create_llm_provider."""

    def test_mock(self) -> None:
        provider = create_llm_provider(
            LLMProviderConfig(provider="mock", model="mock-1", temperature=0.2)
        )

        assert isinstance(provider, MockLLMProvider)
        assert provider.config.model == "mock-1"
        assert provider.config.temperature == 0.2

    def test_openai_with_key(self) -> None:
        provider = create_llm_provider(
            LLMProviderConfig(provider="openai", api_key=SecretStr("sk-test"))
        )
        assert isinstance(provider, OpenAIProvider)

    def test_anthropic_with_key(self) -> None:
        provider = create_llm_provider(
            LLMProviderConfig(
                provider="anthropic",
                model="claude-test",
                api_key=SecretStr("test-key"),
                max_tokens=256,
            )
        )

        assert isinstance(provider, AnthropicProvider)
        assert provider.build_payload([])["max_tokens"] == 256


class TestCreateEmbeddingProvider:
    """Tests for create_embedding_provider."""

    def test_mock_cached_by_default(self) -> None:
        provider = create_embedding_provider(
            EmbeddingProviderConfig(provider="mock", dimensions=16)
        )

        assert isinstance(provider, CachedEmbeddingProvider)
        assert provider.dimensions == 16

    def test_mock_uncached(self) -> None:
        provider = create_embedding_provider(
            EmbeddingProviderConfig(provider="mock", dimensions=16, cache=False)
        )
        assert isinstance(provider, MockEmbeddingProvider)

    def test_cache_cap_from_config(self) -> None:
        provider = create_embedding_provider(
            EmbeddingProviderConfig(provider="mock", dimensions=16, cache_max_entries=7)
        )

        assert isinstance(provider, CachedEmbeddingProvider)
        assert provider.max_entries == 7
