"""Mock embedding provider for testing."""

import hashlib
from typing import Any

from colloquy.providers.embedding.base import EmbeddingProvider, EmbeddingResponse


class MockEmbeddingProvider(EmbeddingProvider):
    """Mock embedding provider for testing.

    Generates deterministic embeddings from a hash of the text. Similar
    texts will NOT have similar embeddings; register fixed vectors with
    ``set_vector`` when a test needs controlled similarity.
    """

    def __init__(
        self,
        dimensions: int = 384,
        vectors: dict[str, list[float]] | None = None,
        default_model: str = "mock-embedding",
    ):
        """Initialize mock provider.

        Args:
            dimensions: Embedding vector dimensions
            vectors: Fixed vectors returned for exact texts
            default_model: Model name to report
        """
        self._dimensions = dimensions
        self._vectors = dict(vectors or {})
        self._default_model = default_model
        self._call_history: list[dict[str, Any]] = []
        self._fail_with: Exception | None = None

    @property
    def provider_name(self) -> str:
        return "mock"

    @property
    def dimensions(self) -> int:
        return self._dimensions

    @property
    def call_history(self) -> list[dict[str, Any]]:
        """Return history of calls for testing assertions."""
        return self._call_history

    def clear_history(self) -> None:
        self._call_history.clear()

    def set_vector(self, text: str, vector: list[float]) -> None:
        self._vectors[text] = vector

    def fail_next_calls(self, error: Exception | None) -> None:
        """Make subsequent calls raise ``error`` (None restores normal behavior)."""
        self._fail_with = error

    def _generate_embedding(self, text: str) -> list[float]:
        text_hash = hashlib.sha256(text.encode()).digest()

        embedding = []
        for i in range(self._dimensions):
            byte_val = text_hash[i % len(text_hash)]
            embedding.append((byte_val / 127.5) - 1.0)

        magnitude = sum(x * x for x in embedding) ** 0.5
        if magnitude > 0:
            embedding = [x / magnitude for x in embedding]
        return embedding

    async def embed(self, texts: list[str], **kwargs: Any) -> EmbeddingResponse:
        self._call_history.append({"texts": list(texts), "kwargs": kwargs})
        if self._fail_with is not None:
            raise self._fail_with

        embeddings = [
            list(self._vectors[text]) if text in self._vectors else self._generate_embedding(text)
            for text in texts
        ]
        return EmbeddingResponse(
            embeddings=embeddings,
            model=self._default_model,
            dimensions=self._dimensions,
            usage={"total_tokens": sum(len(t) // 4 for t in texts)},
        )
