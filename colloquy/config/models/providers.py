"""AI provider configuration models."""

from typing import Literal

from pydantic import BaseModel, Field, SecretStr, field_validator

LLMProviderType = Literal["openai", "anthropic", "mock"]
EmbeddingProviderType = Literal["sentence_transformers", "mock"]


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class ProviderConfig(BaseModel):
    """Generation parameters shared by LLM backends.

    Sampling parameters are clamped into their valid ranges instead of
    being rejected.
    """

    model: str = Field(default="gpt-4o-mini", description="Model identifier")
    temperature: float = Field(default=0.7, description="Sampling temperature, 0..2")
    max_tokens: int | None = Field(default=None, gt=0, description="Completion token limit")
    top_p: float | None = Field(default=None, description="Nucleus sampling, 0..1")
    frequency_penalty: float | None = Field(default=None, description="-2..2")
    presence_penalty: float | None = Field(default=None, description="-2..2")
    timeout: float = Field(default=60.0, gt=0, description="Request timeout in seconds")

    @field_validator("temperature")
    @classmethod
    def _clamp_temperature(cls, v: float) -> float:
        return _clamp(v, 0.0, 2.0)

    @field_validator("top_p")
    @classmethod
    def _clamp_top_p(cls, v: float | None) -> float | None:
        return None if v is None else _clamp(v, 0.0, 1.0)

    @field_validator("frequency_penalty", "presence_penalty")
    @classmethod
    def _clamp_penalty(cls, v: float | None) -> float | None:
        return None if v is None else _clamp(v, -2.0, 2.0)


class LLMProviderConfig(ProviderConfig):
    """Configuration for a named LLM provider."""

    provider: LLMProviderType = Field(default="openai", description="Provider type")
    api_key: SecretStr | None = Field(
        default=None,
        description="API key (prefer env var)",
    )
    base_url: str | None = Field(default=None, description="Custom API base URL")


class EmbeddingProviderConfig(BaseModel):
    """Configuration for an embedding provider."""

    provider: EmbeddingProviderType = Field(
        default="sentence_transformers",
        description="Provider type",
    )
    model: str = Field(default="all-MiniLM-L6-v2", description="Model identifier")
    dimensions: int = Field(default=384, gt=0, description="Embedding dimensions")
    batch_size: int = Field(default=32, gt=0, description="Batch size for encoding")
    cache: bool = Field(default=True, description="Cache embeddings per text")
    cache_max_entries: int = Field(
        default=10_000, gt=0, description="Most vectors kept by the embedding cache"
    )


class ProvidersConfig(BaseModel):
    """Configuration for AI providers."""

    default_llm: str = Field(default="default", description="Default LLM provider name")
    default_embedding: str = Field(
        default="default",
        description="Default embedding provider name",
    )
    llm: dict[str, LLMProviderConfig] = Field(
        default_factory=dict,
        description="Named LLM providers",
    )
    embedding: dict[str, EmbeddingProviderConfig] = Field(
        default_factory=dict,
        description="Named embedding providers",
    )
