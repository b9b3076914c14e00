"""Parameter defaults and type checks for tool calls."""

from collections.abc import Mapping
from typing import Any

from colloquy.exceptions import InvalidToolParametersError
from colloquy.observability.logging import get_logger
from colloquy.tools.models import ParameterSchema

logger = get_logger(__name__)


def validate_type(value: Any, expected_type: str) -> bool:
    """Check a JSON-like value against a JSON type name.

    Unknown type names accept any value. ``number`` accepts int and float
    but not bool.
    """
    if expected_type == "string":
        return isinstance(value, str)
    if expected_type == "number":
        return isinstance(value, int | float) and not isinstance(value, bool)
    if expected_type == "boolean":
        return isinstance(value, bool)
    if expected_type == "object":
        return isinstance(value, dict)
    if expected_type == "array":
        return isinstance(value, list | tuple)
    if expected_type == "null":
        return value is None
    return True


def apply_defaults(
    schema: Mapping[str, ParameterSchema],
    parameters: Mapping[str, Any] | None,
) -> dict[str, Any]:
    """Return a copy of ``parameters`` with declared defaults filled in."""
    merged = dict(parameters or {})
    for name, param in schema.items():
        if name not in merged and param.has_default:
            merged[name] = param.default
    return merged


def validate_parameters(
    tool_name: str,
    schema: Mapping[str, ParameterSchema],
    parameters: Mapping[str, Any],
) -> None:
    """Check required presence and declared types.

    Parameters not in the schema are passed through unchecked.

    Raises:
        InvalidToolParametersError: On a missing required parameter or a
            type mismatch
    """
    for name, param in schema.items():
        if param.required and name not in parameters:
            logger.warning("tool_parameter_missing", tool_name=tool_name, param_name=name)
            raise InvalidToolParametersError(tool_name, f"Missing required parameter: {name}")

    for name, value in parameters.items():
        param = schema.get(name)
        if param is not None and not validate_type(value, param.param_type):
            logger.warning(
                "tool_parameter_type_mismatch",
                tool_name=tool_name,
                param_name=name,
                expected_type=param.param_type,
            )
            raise InvalidToolParametersError(
                tool_name,
                f"Parameter '{name}' has wrong type, expected {param.param_type}",
            )
