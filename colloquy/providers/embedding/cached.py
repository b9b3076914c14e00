"""Caching wrapper around an embedding provider."""

from collections import OrderedDict
from typing import Any

from colloquy.observability.logging import get_logger
from colloquy.providers.embedding.base import EmbeddingProvider, EmbeddingResponse

logger = get_logger(__name__)

DEFAULT_MAX_ENTRIES = 10_000


class CachedEmbeddingProvider(EmbeddingProvider):
    """Memoizes vectors per exact text, least recently used first out.

    Only texts missing from the cache are sent to the wrapped provider,
    in a single batch. The cache never holds more than ``max_entries``
    vectors.
    """

    def __init__(self, inner: EmbeddingProvider, max_entries: int = DEFAULT_MAX_ENTRIES):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._inner = inner
        self._max_entries = max_entries
        self._cache: OrderedDict[str, list[float]] = OrderedDict()

    @property
    def provider_name(self) -> str:
        return f"cached_{self._inner.provider_name}"

    @property
    def dimensions(self) -> int:
        return self._inner.dimensions

    @property
    def max_entries(self) -> int:
        return self._max_entries

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def clear_cache(self) -> None:
        self._cache.clear()

    async def embed(self, texts: list[str], **kwargs: Any) -> EmbeddingResponse:
        found: dict[str, list[float]] = {}
        for text in texts:
            if text in self._cache:
                self._cache.move_to_end(text)
                found[text] = self._cache[text]

        missing = list(dict.fromkeys(t for t in texts if t not in found))
        model = self._inner.provider_name
        if missing:
            response = await self._inner.embed(missing, **kwargs)
            model = response.model
            for text, vector in zip(missing, response.embeddings, strict=True):
                found[text] = vector
                self._cache[text] = vector
                self._cache.move_to_end(text)
            evicted = 0
            while len(self._cache) > self._max_entries:
                self._cache.popitem(last=False)
                evicted += 1
            logger.debug(
                "embedding_cache_miss",
                count=len(missing),
                evicted=evicted,
                cache_size=len(self._cache),
            )

        return EmbeddingResponse(
            embeddings=[list(found[t]) for t in texts],
            model=model,
            dimensions=self._inner.dimensions,
            metadata={"cache_misses": len(missing)},
        )
