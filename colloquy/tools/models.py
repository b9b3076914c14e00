"""Tool interface and data models."""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class ParameterSchema(BaseModel):
    """Declared parameter of a tool."""

    param_type: str = Field(
        default="string",
        description="string, number, boolean, object, array or null; other names accept anything",
    )
    required: bool = Field(default=False, description="Must be present in the call")
    description: str = Field(default="", description="Human description")
    default: Any | None = Field(default=None, description="Injected when the parameter is omitted")

    @property
    def has_default(self) -> bool:
        """True when a default was given explicitly, including null."""
        return "default" in self.model_fields_set


class ToolResult(BaseModel):
    """Outcome reported by a tool.

    ``error`` is a soft failure reported by the tool itself; hard failures
    are exceptions and never produce a ToolResult.
    """

    output: Any = Field(default=None, description="Structured output")
    error: str | None = Field(default=None, description="Soft error message")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Extra data")

    @property
    def succeeded(self) -> bool:
        return self.error is None


class Tool(ABC):
    """Externally implemented capability callable by the agent."""

    @property
    @abstractmethod
    def id(self) -> UUID:
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique name within a registry."""
        pass

    @property
    def description(self) -> str:
        return ""

    @property
    def parameters(self) -> dict[str, ParameterSchema]:
        return {}

    @abstractmethod
    async def execute(self, parameters: dict[str, Any]) -> ToolResult:
        """Run the tool with validated parameters."""
        pass


ToolFunction = Callable[[dict[str, Any]], Awaitable[Any]]


class FunctionTool(Tool):
    """Tool backed by an async function.

    The function receives the parameter dict. A returned ToolResult is
    passed through; any other value becomes its ``output``.

    Example:
        async def get_weather(params):
            return {"city": params["city"], "temperature": 21}

        tool = FunctionTool(
            "get_weather",
            get_weather,
            parameters={"city": ParameterSchema(param_type="string", required=True)},
        )
    """

    def __init__(
        self,
        name: str,
        func: ToolFunction,
        *,
        description: str = "",
        parameters: dict[str, ParameterSchema] | None = None,
        tool_id: UUID | None = None,
    ) -> None:
        self._id = tool_id or uuid4()
        self._name = name
        self._func = func
        self._description = description
        self._parameters = dict(parameters or {})

    @property
    def id(self) -> UUID:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return self._description

    @property
    def parameters(self) -> dict[str, ParameterSchema]:
        return self._parameters

    async def execute(self, parameters: dict[str, Any]) -> ToolResult:
        result = await self._func(parameters)
        if isinstance(result, ToolResult):
            return result
        return ToolResult(output=result)
