"""Session store implementations."""

from colloquy.conversation.stores.inmemory import InMemorySessionStore

__all__ = ["InMemorySessionStore"]
