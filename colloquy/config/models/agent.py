"""Agent-level configuration."""

from pydantic import BaseModel, Field


DEFAULT_FALLBACK_RESPONSE = (
    "I'm not sure how to help with that. Could you please rephrase your question?"
)


class AgentConfig(BaseModel):
    """Runtime behavior of an Agent."""

    max_context_messages: int = Field(
        default=100,
        gt=0,
        description="Messages kept in a session context before the oldest are dropped",
    )
    default_tool_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Per-attempt tool timeout in seconds",
    )
    enable_explainability: bool = Field(
        default=True,
        description="Attach an explanation to every response",
    )
    tool_max_retries: int = Field(
        default=0,
        ge=0,
        description="Extra attempts after a tool times out or fails",
    )
    tool_retry_backoff_ms: int = Field(
        default=100,
        ge=0,
        description="Initial retry backoff, doubled on every attempt",
    )
    fallback_response: str = Field(
        default=DEFAULT_FALLBACK_RESPONSE,
        description="Template of the fallback guideline used when nothing matches",
    )
