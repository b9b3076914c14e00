"""Embedding providers for text vectorization.

SentenceTransformersProvider needs the ``embeddings`` extra and is
imported from its module directly:

    from colloquy.providers.embedding.sentence_transformers import SentenceTransformersProvider
"""

from colloquy.providers.embedding.base import EmbeddingProvider, EmbeddingResponse
from colloquy.providers.embedding.cached import CachedEmbeddingProvider
from colloquy.providers.embedding.mock import MockEmbeddingProvider

__all__ = [
    "CachedEmbeddingProvider",
    "EmbeddingProvider",
    "EmbeddingResponse",
    "MockEmbeddingProvider",
]
