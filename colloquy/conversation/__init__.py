"""Conversation domain: sessions, context and session storage."""

from colloquy.conversation.models import (
    Context,
    ContextVariable,
    Message,
    MessageRole,
    Session,
    SessionStatus,
)
from colloquy.conversation.store import SessionStore
from colloquy.conversation.stores import InMemorySessionStore

__all__ = [
    "Context",
    "ContextVariable",
    "InMemorySessionStore",
    "Message",
    "MessageRole",
    "Session",
    "SessionStatus",
    "SessionStore",
]
