"""Provider factories driven by configuration.

API keys are read from environment variables unless the config sets one:
- OPENAI_API_KEY for the openai provider
- ANTHROPIC_API_KEY for the anthropic provider
"""

from colloquy.config.models.providers import (
    EmbeddingProviderConfig,
    LLMProviderConfig,
    ProviderConfig,
)
from colloquy.observability.logging import get_logger
from colloquy.providers.embedding import (
    CachedEmbeddingProvider,
    EmbeddingProvider,
    MockEmbeddingProvider,
)
from colloquy.providers.llm import (
    AnthropicProvider,
    LLMProvider,
    MockLLMProvider,
    OpenAIProvider,
)

logger = get_logger(__name__)


def create_llm_provider(config: LLMProviderConfig) -> LLMProvider:
    """Create an LLM provider from configuration.

    Raises:
        ValueError: If the provider type is not supported
    """
    generation = ProviderConfig.model_validate(
        config.model_dump(include=set(ProviderConfig.model_fields))
    )
    api_key = config.api_key.get_secret_value() if config.api_key else None
    logger.info("creating_llm_provider", provider=config.provider, model=config.model)

    if config.provider == "openai":
        return OpenAIProvider(api_key=api_key, config=generation, base_url=config.base_url)
    elif config.provider == "anthropic":
        if config.base_url:
            return AnthropicProvider(api_key=api_key, config=generation, base_url=config.base_url)
        return AnthropicProvider(api_key=api_key, config=generation)
    elif config.provider == "mock":
        return MockLLMProvider(config=generation)
    else:
        raise ValueError(f"Unsupported LLM provider: {config.provider}")


def create_embedding_provider(config: EmbeddingProviderConfig) -> EmbeddingProvider:
    """Create an embedding provider from configuration, cached if configured.

    Raises:
        ValueError: If the provider type is not supported
    """
    logger.info("creating_embedding_provider", provider=config.provider, model=config.model)

    provider: EmbeddingProvider
    if config.provider == "sentence_transformers":
        from colloquy.providers.embedding.sentence_transformers import (
            SentenceTransformersProvider,
        )

        provider = SentenceTransformersProvider(
            model_name=config.model,
            batch_size=config.batch_size,
        )
    elif config.provider == "mock":
        provider = MockEmbeddingProvider(dimensions=config.dimensions)
    else:
        raise ValueError(f"Unsupported embedding provider: {config.provider}")

    if config.cache:
        return CachedEmbeddingProvider(provider, max_entries=config.cache_max_entries)
    return provider
