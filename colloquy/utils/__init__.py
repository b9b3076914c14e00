"""Shared utilities."""

from colloquy.utils.locks import AsyncReadWriteLock, SessionMutex
from colloquy.utils.vector import cosine_similarity

__all__ = ["AsyncReadWriteLock", "SessionMutex", "cosine_similarity"]
