"""EmbeddingProvider abstract interface."""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field


class EmbeddingResponse(BaseModel):
    """Response from an embedding provider."""

    embeddings: list[list[float]] = Field(..., description="One vector per input text")
    model: str = Field(..., description="Model used")
    dimensions: int = Field(..., description="Vector length")
    usage: dict[str, int] | None = Field(default=None, description="Token usage stats")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Provider-specific metadata")


class EmbeddingProvider(ABC):
    """Abstract interface for text embedding.

    Semantic guideline matching only needs ``embed_single``; batch
    ``embed`` is what backends implement.
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name."""
        pass

    @property
    @abstractmethod
    def dimensions(self) -> int:
        """Return embedding dimensions."""
        pass

    @abstractmethod
    async def embed(self, texts: list[str], **kwargs: Any) -> EmbeddingResponse:
        """Embed a batch of texts.

        Args:
            texts: Texts to embed
            **kwargs: Provider-specific options

        Returns:
            EmbeddingResponse with vectors in input order
        """
        pass

    async def embed_single(self, text: str, **kwargs: Any) -> list[float]:
        """Embed one text."""
        response = await self.embed([text], **kwargs)
        return response.embeddings[0]
