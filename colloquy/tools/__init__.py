"""Tools: external capabilities with declared parameter schemas."""

from colloquy.tools.models import FunctionTool, ParameterSchema, Tool, ToolResult
from colloquy.tools.registry import ToolRegistry
from colloquy.tools.validation import apply_defaults, validate_parameters, validate_type

__all__ = [
    "FunctionTool",
    "ParameterSchema",
    "Tool",
    "ToolRegistry",
    "ToolResult",
    "apply_defaults",
    "validate_parameters",
    "validate_type",
]
