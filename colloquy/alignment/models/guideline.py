"""Guideline models: behavioral rules and their match results."""

from datetime import datetime
from typing import Annotated, Any, Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from colloquy.alignment.models.base import DefinitionModel, utc_now


class LiteralCondition(DefinitionModel):
    """Case-insensitive substring match."""

    kind: Literal["literal"] = "literal"
    text: str = Field(..., description="Substring to look for; empty matches every message")

    def describe(self) -> str:
        return f"Literal({self.text!r})"


class RegexCondition(DefinitionModel):
    """Regular expression search; capture groups feed parameters."""

    kind: Literal["regex"] = "regex"
    pattern: str = Field(..., min_length=1, description="Python regex pattern")

    def describe(self) -> str:
        return f"Regex({self.pattern!r})"


class SemanticCondition(DefinitionModel):
    """Embedding similarity against a natural-language description."""

    kind: Literal["semantic"] = "semantic"
    description: str = Field(..., min_length=1, description="What the message should be about")
    threshold: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Minimum cosine similarity to count as a match",
    )

    def describe(self) -> str:
        return f"Semantic({self.description!r}, threshold={self.threshold})"


GuidelineCondition = Annotated[
    LiteralCondition | RegexCondition | SemanticCondition,
    Field(discriminator="kind"),
]


class GuidelineAction(DefinitionModel):
    """What to do when a guideline fires."""

    response_template: str = Field(..., description="Jinja2 template for the reply")
    requires_llm: bool = Field(
        default=False,
        description="Generate the reply with the LLM instead of rendering the template",
    )
    parameter_names: list[str] = Field(
        default_factory=list,
        description="Names for regex capture groups 1..N, in order",
    )


class ParameterDef(DefinitionModel):
    """Declared parameter of a guideline."""

    name: str = Field(..., description="Parameter name")
    param_type: str = Field(default="string", description="JSON type name")
    required: bool = Field(default=False, description="Must be present")
    description: str = Field(default="", description="Human description")


class Guideline(DefinitionModel):
    """Behavioral rule: when the condition holds, apply the action.

    Higher priority wins when several guidelines match; among equal
    priorities the newer guideline wins.
    """

    id: UUID = Field(default_factory=uuid4, description="Unique identifier")
    condition: GuidelineCondition = Field(..., description="When this guideline applies")
    action: GuidelineAction = Field(..., description="What to do")
    priority: int = Field(default=0, description="Higher wins in conflicts")
    tools: list[UUID] = Field(default_factory=list, description="Tools to run when selected")
    parameters: dict[str, ParameterDef] = Field(
        default_factory=dict, description="Declared parameters"
    )
    created_at: datetime = Field(default_factory=utc_now, description="Creation timestamp")


class GuidelineMatch(BaseModel):
    """Scored result of evaluating one guideline against a message."""

    guideline_id: UUID = Field(..., description="Matched guideline")
    relevance_score: float = Field(..., ge=0.0, le=1.0, description="Overall match strength")
    semantic_score: float = Field(default=0.0, ge=0.0, le=1.0, description="Embedding similarity")
    matched_condition: str = Field(..., description="Condition that fired")
    extracted_parameters: dict[str, Any] = Field(
        default_factory=dict, description="Values captured from the message"
    )
    explanation: str | None = Field(default=None, description="Why this matched")
