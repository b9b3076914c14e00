"""Exception hierarchy for the orchestration core.

Every error raised by colloquy inherits from ColloquyError, which carries
a human-readable message. Subclasses add the identifiers callers need to
react programmatically (tool name, journey id, ...).

LLM provider failures live in colloquy.providers.llm.base (ProviderError)
and propagate unchanged through the engine.
"""

from typing import Any
from uuid import UUID


class ColloquyError(Exception):
    """Base exception for all colloquy errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigurationError(ColloquyError):
    """Raised when an agent or provider is assembled incorrectly."""


# ============================================================================
# Sessions
# ============================================================================


class SessionNotFoundError(ColloquyError):
    """Raised when a session id is unknown to the session store."""

    def __init__(self, session_id: UUID) -> None:
        super().__init__(f"Session not found: {session_id}")
        self.session_id = session_id


class SessionAlreadyExistsError(ColloquyError):
    """Raised when creating a session whose id is already taken."""

    def __init__(self, session_id: UUID) -> None:
        super().__init__(f"Session already exists: {session_id}")
        self.session_id = session_id


class StoreError(ColloquyError):
    """Base exception for session store failures.

    Store implementations wrap backend-specific errors in one of the
    StoreError subclasses and keep the original exception as ``cause``.
    """

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class NotFoundError(StoreError):
    """Raised when a specific stored entity does not exist."""


class ConflictError(StoreError):
    """Raised on unique key violation (e.g. duplicate session id)."""


# ============================================================================
# Guidelines
# ============================================================================


class GuidelineError(ColloquyError):
    """Base exception for guideline errors."""


class GuidelineNotFoundError(GuidelineError):
    """Raised when a guideline id is unknown."""

    def __init__(self, guideline_id: UUID) -> None:
        super().__init__(f"Guideline not found: {guideline_id}")
        self.guideline_id = guideline_id


class GuidelineCompilationError(GuidelineError):
    """Raised when a guideline's regex condition does not compile."""

    def __init__(self, guideline_id: UUID, pattern: str, reason: str) -> None:
        super().__init__(
            f"Guideline {guideline_id} has invalid regex {pattern!r}: {reason}"
        )
        self.guideline_id = guideline_id
        self.pattern = pattern


# ============================================================================
# Tools
# ============================================================================


class ToolError(ColloquyError):
    """Base exception for tool registry and execution errors."""


class ToolNotFoundError(ToolError):
    """Raised when a tool id is not registered."""

    def __init__(self, tool_id: UUID) -> None:
        super().__init__(f"Tool not found: {tool_id}")
        self.tool_id = tool_id


class ToolAlreadyRegisteredError(ToolError):
    """Raised when a tool name is already taken in the registry."""

    def __init__(self, tool_name: str) -> None:
        super().__init__(f"Tool already registered: {tool_name}")
        self.tool_name = tool_name


class InvalidToolParametersError(ToolError):
    """Raised when call parameters do not satisfy the tool's schema."""

    def __init__(self, tool_name: str, reason: str) -> None:
        super().__init__(f"Invalid tool parameters for {tool_name}: {reason}")
        self.tool_name = tool_name
        self.reason = reason


class ToolTimeoutError(ToolError):
    """Raised when the caller stops waiting for a tool.

    The tool itself is not cancelled and may still finish later.
    """

    def __init__(self, tool_name: str, timeout: float) -> None:
        super().__init__(
            f"Tool execution timeout for {tool_name} after {timeout:g}s"
        )
        self.tool_name = tool_name
        self.timeout = timeout


class ToolExecutionFailedError(ToolError):
    """Raised when a tool's execute function raises."""

    def __init__(self, tool_name: str, reason: str) -> None:
        super().__init__(f"Tool execution failed for {tool_name}: {reason}")
        self.tool_name = tool_name
        self.reason = reason


# ============================================================================
# Journeys
# ============================================================================


class JourneyError(ColloquyError):
    """Base exception for journey definition and execution errors."""


class JourneyNotFoundError(JourneyError):
    """Raised when a journey id is not registered."""

    def __init__(self, journey_id: UUID) -> None:
        super().__init__(f"Journey not found: {journey_id}")
        self.journey_id = journey_id


class JourneyStepNotFoundError(JourneyError):
    """Raised when a step id does not belong to the journey."""

    def __init__(self, journey_id: UUID, step_id: UUID) -> None:
        super().__init__(f"Journey step not found: {step_id} in journey {journey_id}")
        self.journey_id = journey_id
        self.step_id = step_id


class InvalidJourneyError(JourneyError):
    """Raised when a journey's structure is rejected at registration."""

    def __init__(self, journey_id: UUID, problems: list[str]) -> None:
        super().__init__(f"Invalid journey {journey_id}: {'; '.join(problems)}")
        self.journey_id = journey_id
        self.problems = problems


class CircularJourneyError(InvalidJourneyError):
    """Raised when a cycle is reachable from the journey's initial step."""

    def __init__(self, journey_id: UUID, cycle: list[UUID]) -> None:
        path = " -> ".join(str(step_id) for step_id in cycle)
        super().__init__(journey_id, [f"Circular dependency detected: {path}"])
        self.cycle = cycle


class InvalidTransitionPatternError(JourneyError):
    """Raised when a Match transition's regex fails to compile."""

    def __init__(self, journey_id: UUID, pattern: str, reason: str) -> None:
        super().__init__(f"Invalid regex pattern {pattern!r} in journey {journey_id}: {reason}")
        self.journey_id = journey_id
        self.pattern = pattern


class NoActiveJourneyError(JourneyError):
    """Raised when a journey operation targets a session with no journey."""

    def __init__(self, session_id: UUID) -> None:
        super().__init__(f"No active journey for session: {session_id}")
        self.session_id = session_id


def error_details(exc: BaseException) -> dict[str, Any]:
    """Flatten an exception into log-friendly fields."""
    details: dict[str, Any] = {"error_type": type(exc).__name__, "error": str(exc)}
    if isinstance(exc, StoreError) and exc.cause is not None:
        details["cause"] = repr(exc.cause)
    return details
