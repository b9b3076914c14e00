"""Unit tests for alignment domain models."""

from uuid import uuid4

import pytest
from pydantic import ValidationError

from colloquy.alignment.models import (
    AlwaysCondition,
    ContextVariableCondition,
    Guideline,
    GuidelineMatch,
    JourneyStep,
    LiteralCondition,
    MatchCondition,
    RegexCondition,
    SemanticCondition,
    Transition,
)


class TestGuidelineModels:
    """Tests for Guideline and its conditions."""

    def test_condition_parsed_by_kind(self) -> None:
        guideline = Guideline.model_validate(
            {
                "condition": {"kind": "regex", "pattern": r"order (\d+)"},
                "action": {"response_template": "ok", "parameter_names": ["order_id"]},
                "priority": 3,
            }
        )

        assert isinstance(guideline.condition, RegexCondition)
        assert guideline.action.parameter_names == ["order_id"]
        assert guideline.tools == []

    def test_semantic_threshold_bounds(self) -> None:
        with pytest.raises(ValidationError):
            SemanticCondition(description="x", threshold=1.5)
        with pytest.raises(ValidationError):
            SemanticCondition(description="x", threshold=-0.1)

    def test_empty_regex_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RegexCondition(pattern="")

    def test_guidelines_are_immutable(self) -> None:
        guideline = Guideline.model_validate(
            {"condition": {"kind": "literal", "text": "hi"}, "action": {"response_template": "x"}}
        )

        with pytest.raises(ValidationError):
            guideline.priority = 10

    def test_describe(self) -> None:
        assert LiteralCondition(text="hi").describe() == "Literal('hi')"
        assert RegexCondition(pattern="a+").describe() == "Regex('a+')"
        assert "threshold=0.7" in SemanticCondition(description="d").describe()

    def test_match_scores_bounded(self) -> None:
        with pytest.raises(ValidationError):
            GuidelineMatch(guideline_id=uuid4(), relevance_score=1.2, matched_condition="x")


class TestJourneyModels:
    """Tests for journey definitions."""

    def test_transition_defaults_to_always(self) -> None:
        transition = Transition(next_step=uuid4())
        assert isinstance(transition.condition, AlwaysCondition)

    def test_transition_condition_parsed_by_kind(self) -> None:
        match = Transition.model_validate(
            {"condition": {"kind": "match", "pattern": "yes"}, "next_step": str(uuid4())}
        )
        variable = Transition.model_validate(
            {
                "condition": {"kind": "context_variable", "key": "plan", "value": "pro"},
                "next_step": str(uuid4()),
            }
        )

        assert isinstance(match.condition, MatchCondition)
        assert isinstance(variable.condition, ContextVariableCondition)

    def test_terminal_step(self) -> None:
        assert JourneyStep(name="End").is_terminal
        assert not JourneyStep(name="Go", transitions=[Transition(next_step=uuid4())]).is_terminal
