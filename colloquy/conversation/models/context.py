"""Conversation context: message history and extracted variables."""

import re
from datetime import UTC, date, datetime
from typing import Annotated, Any, Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from colloquy.conversation.models.enums import MessageRole


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


class Message(BaseModel):
    """A single message in the conversation."""

    id: UUID = Field(default_factory=uuid4, description="Unique identifier")
    role: MessageRole = Field(..., description="Author role")
    content: str = Field(..., description="Message text")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Extra data")
    created_at: datetime = Field(default_factory=utc_now, description="Creation time")

    @classmethod
    def system(cls, content: str, **metadata: Any) -> "Message":
        return cls(role=MessageRole.SYSTEM, content=content, metadata=metadata)

    @classmethod
    def user(cls, content: str, **metadata: Any) -> "Message":
        return cls(role=MessageRole.USER, content=content, metadata=metadata)

    @classmethod
    def assistant(cls, content: str, **metadata: Any) -> "Message":
        return cls(role=MessageRole.ASSISTANT, content=content, metadata=metadata)

    @classmethod
    def tool(cls, content: str, **metadata: Any) -> "Message":
        return cls(role=MessageRole.TOOL, content=content, metadata=metadata)


# ============================================================================
# Validators
# ============================================================================


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


class StringValidator(BaseModel):
    type: Literal["string"] = "string"
    pattern: str | None = None
    min_length: int | None = Field(default=None, ge=0)
    max_length: int | None = Field(default=None, ge=0)

    def check(self, value: Any) -> str | None:
        if not isinstance(value, str):
            return "Value is not a string"
        if self.min_length is not None and len(value) < self.min_length:
            return f"String length {len(value)} is less than minimum {self.min_length}"
        if self.max_length is not None and len(value) > self.max_length:
            return f"String length {len(value)} exceeds maximum {self.max_length}"
        if self.pattern is not None:
            try:
                compiled = re.compile(self.pattern)
            except re.error as e:
                return f"Invalid regex pattern: {e}"
            if not compiled.search(value):
                return f"String does not match pattern: {self.pattern}"
        return None


class IntegerValidator(BaseModel):
    type: Literal["integer"] = "integer"
    min: int | None = None
    max: int | None = None

    def check(self, value: Any) -> str | None:
        if not isinstance(value, int) or isinstance(value, bool):
            return "Value is not an integer"
        if self.min is not None and value < self.min:
            return f"Integer {value} is less than minimum {self.min}"
        if self.max is not None and value > self.max:
            return f"Integer {value} exceeds maximum {self.max}"
        return None


class FloatValidator(BaseModel):
    type: Literal["float"] = "float"
    min: float | None = None
    max: float | None = None

    def check(self, value: Any) -> str | None:
        if not _is_number(value):
            return "Value is not a float"
        if self.min is not None and value < self.min:
            return f"Float {value} is less than minimum {self.min}"
        if self.max is not None and value > self.max:
            return f"Float {value} exceeds maximum {self.max}"
        return None


class BooleanValidator(BaseModel):
    type: Literal["boolean"] = "boolean"

    def check(self, value: Any) -> str | None:
        return None if isinstance(value, bool) else "Value is not a boolean"


class EmailValidator(BaseModel):
    type: Literal["email"] = "email"

    def check(self, value: Any) -> str | None:
        if not isinstance(value, str):
            return "Value is not a string"
        if "@" not in value or "." not in value:
            return "Invalid email format"
        return None


class UrlValidator(BaseModel):
    type: Literal["url"] = "url"

    def check(self, value: Any) -> str | None:
        if not isinstance(value, str):
            return "Value is not a string"
        if not value.startswith(("http://", "https://")):
            return "Invalid URL format (must start with http:// or https://)"
        return None


class DateValidator(BaseModel):
    """ISO 8601 calendar date, e.g. ``2024-05-01``."""

    type: Literal["date"] = "date"

    def check(self, value: Any) -> str | None:
        if not isinstance(value, str):
            return "Value is not a string"
        try:
            date.fromisoformat(value)
        except ValueError as e:
            return f"Invalid date format: {e}"
        return None


class DateTimeValidator(BaseModel):
    """ISO 8601 timestamp, e.g. ``2024-05-01T10:00:00Z``."""

    type: Literal["datetime"] = "datetime"

    def check(self, value: Any) -> str | None:
        if not isinstance(value, str):
            return "Value is not a string"
        try:
            datetime.fromisoformat(value)
        except ValueError as e:
            return f"Invalid datetime format: {e}"
        return None


class EnumValidator(BaseModel):
    type: Literal["enum"] = "enum"
    allowed_values: list[str] = Field(..., min_length=1)

    def check(self, value: Any) -> str | None:
        if not isinstance(value, str):
            return "Value is not a string"
        if value not in self.allowed_values:
            return f"Value {value!r} not in allowed values: {self.allowed_values}"
        return None


Validator = Annotated[
    StringValidator
    | IntegerValidator
    | FloatValidator
    | BooleanValidator
    | EmailValidator
    | UrlValidator
    | DateValidator
    | DateTimeValidator
    | EnumValidator,
    Field(discriminator="type"),
]


class ContextVariable(BaseModel):
    """A named value extracted from the conversation."""

    name: str = Field(..., description="Variable name")
    value: Any = Field(..., description="JSON-like value")
    validator: Validator | None = Field(default=None, description="Optional value constraint")
    source_message_id: UUID | None = Field(
        default=None, description="Message the value was extracted from"
    )
    extracted_at: datetime = Field(default_factory=utc_now, description="Extraction time")

    def check(self) -> str | None:
        """Validate the value; return the failure reason, or None if valid."""
        if self.validator is None:
            return None
        return self.validator.check(self.value)

    @property
    def is_valid(self) -> bool:
        return self.check() is None

    def as_text(self) -> str:
        """String form used by transition conditions; non-strings read as ''."""
        return self.value if isinstance(self.value, str) else ""


class Context(BaseModel):
    """Ordered message history plus context variables.

    History is capped at ``max_messages``; the oldest messages are
    dropped first.
    """

    model_config = ConfigDict(frozen=False, validate_assignment=True)

    messages: list[Message] = Field(default_factory=list, description="Conversation history")
    variables: dict[str, ContextVariable] = Field(
        default_factory=dict, description="Variables by name"
    )
    max_messages: int = Field(default=100, gt=0, description="History cap")

    def add_message(self, message: Message) -> None:
        self.messages.append(message)
        excess = len(self.messages) - self.max_messages
        if excess > 0:
            del self.messages[:excess]

    def last_message(self) -> Message | None:
        return self.messages[-1] if self.messages else None

    def last_n_messages(self, n: int) -> list[Message]:
        if n <= 0:
            return []
        return list(self.messages[-n:])

    def messages_by_role(self, role: MessageRole) -> list[Message]:
        return [m for m in self.messages if m.role == role]

    def add_variable(self, variable: ContextVariable) -> None:
        self.variables[variable.name] = variable

    def set_variable(
        self,
        name: str,
        value: Any,
        *,
        source_message_id: UUID | None = None,
        validator: Validator | None = None,
    ) -> ContextVariable:
        """Create or replace a variable.

        Raises:
            ValueError: If a validator is given and the value fails it
        """
        variable = ContextVariable(
            name=name,
            value=value,
            validator=validator,
            source_message_id=source_message_id,
        )
        reason = variable.check()
        if reason is not None:
            raise ValueError(f"Invalid value for {name}: {reason}")
        self.variables[name] = variable
        return variable

    def get_variable(self, name: str) -> ContextVariable | None:
        return self.variables.get(name)

    def variable_values(self) -> dict[str, Any]:
        return {name: var.value for name, var in self.variables.items()}

    def clear(self) -> None:
        self.messages.clear()
        self.variables.clear()
