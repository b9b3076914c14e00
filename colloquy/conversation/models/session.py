"""Session model for conversation domain."""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from colloquy.conversation.models.context import Context, utc_now
from colloquy.conversation.models.enums import SessionStatus


class Session(BaseModel):
    """Runtime conversation state for one user of one agent."""

    model_config = ConfigDict(frozen=False, validate_assignment=True)

    id: UUID = Field(default_factory=uuid4, description="Unique identifier")
    agent_id: UUID = Field(..., description="Serving agent")
    status: SessionStatus = Field(default=SessionStatus.ACTIVE, description="Current status")
    context: Context = Field(default_factory=Context, description="History and variables")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Extra data")
    created_at: datetime = Field(default_factory=utc_now, description="Creation time")
    updated_at: datetime = Field(default_factory=utc_now, description="Last update")
    expires_at: datetime | None = Field(default=None, description="Expiry, if any")

    def touch(self) -> None:
        self.updated_at = utc_now()

    @property
    def is_active(self) -> bool:
        return self.status == SessionStatus.ACTIVE

    @property
    def is_expired(self) -> bool:
        return self.expires_at is not None and utc_now() > self.expires_at

    def pause(self) -> None:
        self.status = SessionStatus.PAUSED
        self.touch()

    def resume(self) -> None:
        self.status = SessionStatus.ACTIVE
        self.touch()

    def complete(self) -> None:
        self.status = SessionStatus.COMPLETED
        self.touch()

    def terminate(self) -> None:
        self.status = SessionStatus.TERMINATED
        self.touch()
