"""Unit tests for conversation context and variables."""

import pytest

from colloquy.conversation.models import (
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
    MessageRole,
    StringValidator,
    UrlValidator,
)


class TestMessage:
    """Tests for Message constructors."""

    def test_role_constructors(self) -> None:
        assert Message.system("s").role == MessageRole.SYSTEM
        assert Message.user("u").role == MessageRole.USER
        assert Message.assistant("a").role == MessageRole.ASSISTANT
        assert Message.tool("t", tool_name="lookup").metadata == {"tool_name": "lookup"}


class TestContextHistory:
    """Tests for message history handling."""

    def test_oldest_messages_dropped_first(self) -> None:
        context = Context(max_messages=3)
        for i in range(5):
            context.add_message(Message.user(f"m{i}"))

        assert [m.content for m in context.messages] == ["m2", "m3", "m4"]

    def test_last_n_messages(self) -> None:
        context = Context()
        for i in range(4):
            context.add_message(Message.user(f"m{i}"))

        assert [m.content for m in context.last_n_messages(2)] == ["m2", "m3"]
        assert context.last_n_messages(0) == []
        assert len(context.last_n_messages(10)) == 4

    def test_last_message(self) -> None:
        context = Context()
        assert context.last_message() is None

        context.add_message(Message.assistant("latest"))
        assert context.last_message().content == "latest"

    def test_messages_by_role(self) -> None:
        context = Context()
        context.add_message(Message.user("q"))
        context.add_message(Message.assistant("a"))
        context.add_message(Message.user("q2"))

        assert [m.content for m in context.messages_by_role(MessageRole.USER)] == ["q", "q2"]

    def test_clear(self) -> None:
        context = Context()
        context.add_message(Message.user("hi"))
        context.set_variable("name", "Ada")

        context.clear()

        assert context.messages == []
        assert context.variables == {}


class TestContextVariables:
    """Tests for variable helpers."""

    def test_set_and_get(self) -> None:
        context = Context()
        message = Message.user("I'm in Tokyo")

        variable = context.set_variable("city", "Tokyo", source_message_id=message.id)

        assert context.get_variable("city") == variable
        assert variable.source_message_id == message.id
        assert context.variable_values() == {"city": "Tokyo"}

    def test_set_replaces_existing(self) -> None:
        context = Context()
        context.set_variable("city", "Tokyo")
        context.set_variable("city", "Osaka")

        assert context.variable_values() == {"city": "Osaka"}

    def test_set_rejects_invalid_value(self) -> None:
        context = Context()

        with pytest.raises(ValueError, match="Invalid value for age"):
            context.set_variable("age", 200, validator=IntegerValidator(min=0, max=150))

        assert context.get_variable("age") is None

    def test_missing_variable(self) -> None:
        assert Context().get_variable("nope") is None

    def test_as_text(self) -> None:
        assert ContextVariable(name="a", value="x").as_text() == "x"
        assert ContextVariable(name="a", value=5).as_text() == ""


class TestValidators:
    """Tests for the validator variants."""

    @pytest.mark.parametrize(
        ("validator", "value"),
        [
            (StringValidator(min_length=2, max_length=5, pattern="^[a-z]+$"), "abc"),
            (IntegerValidator(min=1, max=10), 5),
            (FloatValidator(min=0.0, max=1.0), 0.5),
            (FloatValidator(), 3),
            (BooleanValidator(), False),
            (EmailValidator(), "ada@example.com"),
            (UrlValidator(), "https://example.com"),
            (DateValidator(), "2024-05-01"),
            (DateTimeValidator(), "2024-05-01T10:00:00"),
            (EnumValidator(allowed_values=["red", "green"]), "green"),
        ],
    )
    def test_valid(self, validator, value) -> None:
        variable = ContextVariable(name="v", value=value, validator=validator)
        assert variable.check() is None
        assert variable.is_valid

    @pytest.mark.parametrize(
        ("validator", "value", "reason"),
        [
            (StringValidator(min_length=3), "ab", "less than minimum"),
            (StringValidator(max_length=2), "abc", "exceeds maximum"),
            (StringValidator(pattern=r"^\d+$"), "abc", "does not match pattern"),
            (StringValidator(), 1, "not a string"),
            (IntegerValidator(min=1), 0, "less than minimum"),
            (IntegerValidator(max=1), 2, "exceeds maximum"),
            (IntegerValidator(), True, "not an integer"),
            (FloatValidator(max=1.0), 1.5, "exceeds maximum"),
            (BooleanValidator(), "true", "not a boolean"),
            (EmailValidator(), "not-an-email", "Invalid email"),
            (UrlValidator(), "ftp://example.com", "Invalid URL"),
            (DateValidator(), "2024-13-45", "Invalid date"),
            (DateTimeValidator(), "yesterday", "Invalid datetime"),
            (EnumValidator(allowed_values=["red"]), "blue", "not in allowed values"),
        ],
    )
    def test_invalid(self, validator, value, reason: str) -> None:
        variable = ContextVariable(name="v", value=value, validator=validator)
        result = variable.check()
        assert result is not None
        assert reason in result
        assert not variable.is_valid

    def test_validator_from_dict(self) -> None:
        variable = ContextVariable.model_validate(
            {
                "name": "plan",
                "value": "pro",
                "validator": {"type": "enum", "allowed_values": ["pro"]},
            }
        )
        assert isinstance(variable.validator, EnumValidator)
        assert variable.is_valid
