"""Journey models: multi-step conversation flows and their runtime state."""

from datetime import datetime
from typing import Annotated, Any, Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from colloquy.alignment.models.base import DefinitionModel, utc_now


class AlwaysCondition(DefinitionModel):
    """Unconditional transition."""

    kind: Literal["always"] = "always"


class MatchCondition(DefinitionModel):
    """Transition when the user message matches a regex."""

    kind: Literal["match"] = "match"
    pattern: str = Field(..., description="Python regex searched in the message")


class ContextVariableCondition(DefinitionModel):
    """Transition when a context variable equals a value."""

    kind: Literal["context_variable"] = "context_variable"
    key: str = Field(..., description="Context variable name")
    value: str = Field(..., description="Expected string value")


TransitionCondition = Annotated[
    AlwaysCondition | MatchCondition | ContextVariableCondition,
    Field(discriminator="kind"),
]


class Transition(DefinitionModel):
    """Edge from one step to another."""

    condition: TransitionCondition = Field(
        default_factory=AlwaysCondition, description="When to take this edge"
    )
    next_step: UUID = Field(..., description="Target step")


class JourneyStep(DefinitionModel):
    """Individual step in a journey.

    Transitions are evaluated in declaration order and the first one whose
    condition holds wins. A step without transitions is terminal.
    """

    id: UUID = Field(default_factory=uuid4, description="Unique identifier")
    name: str = Field(..., description="Step name")
    prompt: str = Field(default="", description="What the agent says at this step")
    expected_response_pattern: str | None = Field(
        default=None, description="Regex describing an expected answer"
    )
    transitions: list[Transition] = Field(default_factory=list, description="Outgoing edges")
    actions: list[str] = Field(default_factory=list, description="Actions tied to the step")

    @property
    def is_terminal(self) -> bool:
        return not self.transitions


class Journey(DefinitionModel):
    """Multi-step conversation flow."""

    id: UUID = Field(default_factory=uuid4, description="Unique identifier")
    name: str = Field(..., description="Journey name")
    description: str = Field(default="", description="Human description")
    steps: list[JourneyStep] = Field(default_factory=list, description="All steps")
    initial_step: UUID = Field(..., description="Entry step")
    created_at: datetime = Field(default_factory=utc_now, description="Creation timestamp")

    def get_step(self, step_id: UUID) -> JourneyStep | None:
        """Find a step by id."""
        for step in self.steps:
            if step.id == step_id:
                return step
        return None


class JourneyState(BaseModel):
    """Runtime state of a journey within one session."""

    model_config = ConfigDict(frozen=False, validate_assignment=True)

    journey_id: UUID = Field(..., description="Journey being executed")
    current_step: UUID = Field(..., description="Current step")
    completed_steps: list[UUID] = Field(
        default_factory=list, description="Processed steps, in order, without duplicates"
    )
    is_complete: bool = Field(default=False, description="Reached a terminal condition")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Additional state data")
    started_at: datetime = Field(default_factory=utc_now, description="When started")
    completed_at: datetime | None = Field(default=None, description="When completed")

    def complete_step(self, step_id: UUID) -> None:
        """Record a processed step once."""
        if step_id not in self.completed_steps:
            self.completed_steps = [*self.completed_steps, step_id]

    def advance_to(self, step_id: UUID) -> None:
        self.current_step = step_id

    def mark_complete(self) -> None:
        """Mark the journey finished; the first completion time is kept."""
        if self.is_complete:
            return
        self.is_complete = True
        self.completed_at = utc_now()
