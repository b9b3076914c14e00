"""colloquy: conversational agent orchestration core.

Guideline matching with deterministic priority selection, multi-step
journeys, tool execution with timeout and retry, and LLM fallback.
"""

from colloquy.alignment import (
    Agent,
    AgentBuilder,
    AgentResponse,
    AlwaysCondition,
    ContextVariableCondition,
    Guideline,
    GuidelineAction,
    GuidelineMatch,
    Journey,
    JourneyState,
    JourneyStep,
    LiteralCondition,
    MatchCondition,
    RegexCondition,
    SemanticCondition,
    Transition,
)
from colloquy.config.models import AgentConfig
from colloquy.exceptions import ColloquyError
from colloquy.tools import FunctionTool, ParameterSchema, Tool, ToolResult

__version__ = "0.1.0"

__all__ = [
    "Agent",
    "AgentBuilder",
    "AgentConfig",
    "AgentResponse",
    "AlwaysCondition",
    "ColloquyError",
    "ContextVariableCondition",
    "FunctionTool",
    "Guideline",
    "GuidelineAction",
    "GuidelineMatch",
    "Journey",
    "JourneyState",
    "JourneyStep",
    "LiteralCondition",
    "MatchCondition",
    "ParameterSchema",
    "RegexCondition",
    "SemanticCondition",
    "Tool",
    "ToolResult",
    "Transition",
]
