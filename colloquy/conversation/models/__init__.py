"""Conversation domain models."""

from colloquy.conversation.models.context import (
    BooleanValidator,
    Context,
    ContextVariable,
    DateTimeValidator,
    DateValidator,
    EmailValidator,
    EnumValidator,
    FloatValidator,
    IntegerValidator,
    Message,
    StringValidator,
    UrlValidator,
    Validator,
)
from colloquy.conversation.models.enums import MessageRole, SessionStatus
from colloquy.conversation.models.session import Session

__all__ = [
    "BooleanValidator",
    "Context",
    "ContextVariable",
    "DateTimeValidator",
    "DateValidator",
    "EmailValidator",
    "EnumValidator",
    "FloatValidator",
    "IntegerValidator",
    "Message",
    "MessageRole",
    "Session",
    "SessionStatus",
    "StringValidator",
    "UrlValidator",
    "Validator",
]
