"""Alignment domain models.

Contains the Pydantic models for the orchestration core:
- Guidelines and their conditions, actions and match results
- Journeys, steps, transitions and per-session journey state
"""

from colloquy.alignment.models.base import DefinitionModel, utc_now
from colloquy.alignment.models.guideline import (
    Guideline,
    GuidelineAction,
    GuidelineCondition,
    GuidelineMatch,
    LiteralCondition,
    ParameterDef,
    RegexCondition,
    SemanticCondition,
)
from colloquy.alignment.models.journey import (
    AlwaysCondition,
    ContextVariableCondition,
    Journey,
    JourneyState,
    JourneyStep,
    MatchCondition,
    Transition,
    TransitionCondition,
)

__all__ = [
    "DefinitionModel",
    "utc_now",
    # Guidelines
    "Guideline",
    "GuidelineAction",
    "GuidelineCondition",
    "GuidelineMatch",
    "LiteralCondition",
    "ParameterDef",
    "RegexCondition",
    "SemanticCondition",
    # Journeys
    "AlwaysCondition",
    "ContextVariableCondition",
    "Journey",
    "JourneyState",
    "JourneyStep",
    "MatchCondition",
    "Transition",
    "TransitionCondition",
]
