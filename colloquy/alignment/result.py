"""Result models returned by the Agent."""

from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from colloquy.alignment.models import GuidelineMatch


class ToolExecution(BaseModel):
    """Record of one tool run during a turn."""

    tool_id: UUID
    tool_name: str
    duration: float = Field(ge=0, description="Wall time in seconds, retries included")
    output: Any = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


class ResponseExplanation(BaseModel):
    """Why the agent answered the way it did."""

    guideline_matches: list[GuidelineMatch] = Field(
        default_factory=list, description="Every match considered this turn"
    )
    reasoning: str = Field(..., description="Human-readable selection summary")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Relevance of the chosen match")


class AgentResponse(BaseModel):
    """Outcome of processing one user message."""

    message: str = Field(..., description="Reply sent to the user")
    matched_guideline: GuidelineMatch | None = Field(
        default=None, description="Selected match (the fallback when nothing matched)"
    )
    tools_used: list[ToolExecution] = Field(default_factory=list)
    journey_step: UUID | None = Field(
        default=None, description="Current step of the session's journey, if any"
    )
    context_updates: dict[str, Any] = Field(
        default_factory=dict, description="Context variables set this turn"
    )
    explanation: ResponseExplanation | None = Field(default=None)
