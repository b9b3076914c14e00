"""Alignment core: guideline matching, journeys and the Agent orchestrator."""

from colloquy.alignment.models import (
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
    ParameterDef,
    RegexCondition,
    SemanticCondition,
    Transition,
)
from colloquy.alignment.matching import GuidelineMatcher, PatternIndex
from colloquy.alignment.journeys import JourneyManager
from colloquy.alignment.result import AgentResponse, ResponseExplanation, ToolExecution
from colloquy.alignment.engine import Agent, AgentBuilder

__all__ = [
    "Agent",
    "AgentBuilder",
    "AgentResponse",
    "AlwaysCondition",
    "ContextVariableCondition",
    "Guideline",
    "GuidelineAction",
    "GuidelineMatch",
    "GuidelineMatcher",
    "Journey",
    "JourneyManager",
    "JourneyState",
    "JourneyStep",
    "LiteralCondition",
    "MatchCondition",
    "ParameterDef",
    "PatternIndex",
    "RegexCondition",
    "ResponseExplanation",
    "SemanticCondition",
    "ToolExecution",
    "Transition",
]
