"""Test factories for alignment domain models."""

from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

from colloquy.alignment.models import (
    AlwaysCondition,
    Guideline,
    GuidelineAction,
    Journey,
    JourneyStep,
    LiteralCondition,
    RegexCondition,
    SemanticCondition,
    Transition,
    TransitionCondition,
)

BASE_TIME = datetime(2024, 1, 1, tzinfo=UTC)


class GuidelineFactory:
    """Factory for creating Guideline instances for testing."""

    @staticmethod
    def literal(
        text: str,
        response: str = "literal reply",
        *,
        priority: int = 0,
        created_at: datetime | None = None,
        tools: list[UUID] | None = None,
        requires_llm: bool = False,
    ) -> Guideline:
        return Guideline(
            condition=LiteralCondition(text=text),
            action=GuidelineAction(response_template=response, requires_llm=requires_llm),
            priority=priority,
            tools=tools or [],
            created_at=created_at or BASE_TIME,
        )

    @staticmethod
    def regex(
        pattern: str,
        response: str = "regex reply",
        *,
        parameter_names: list[str] | None = None,
        priority: int = 0,
        created_at: datetime | None = None,
        tools: list[UUID] | None = None,
    ) -> Guideline:
        return Guideline(
            condition=RegexCondition(pattern=pattern),
            action=GuidelineAction(
                response_template=response,
                parameter_names=parameter_names or [],
            ),
            priority=priority,
            tools=tools or [],
            created_at=created_at or BASE_TIME,
        )

    @staticmethod
    def semantic(
        description: str,
        response: str = "semantic reply",
        *,
        threshold: float = 0.7,
        priority: int = 0,
    ) -> Guideline:
        return Guideline(
            condition=SemanticCondition(description=description, threshold=threshold),
            action=GuidelineAction(response_template=response),
            priority=priority,
            created_at=BASE_TIME,
        )

    @staticmethod
    def at(offset_seconds: int) -> datetime:
        """Timestamp offset from the shared base time."""
        return BASE_TIME + timedelta(seconds=offset_seconds)


class JourneyFactory:
    """Factory for creating Journey instances for testing."""

    @staticmethod
    def step(
        name: str,
        *transitions: tuple[TransitionCondition, UUID],
        step_id: UUID | None = None,
    ) -> JourneyStep:
        return JourneyStep(
            id=step_id or uuid4(),
            name=name,
            prompt=f"{name} prompt",
            transitions=[
                Transition(condition=condition, next_step=target)
                for condition, target in transitions
            ],
        )

    @staticmethod
    def onboarding() -> Journey:
        """Welcome -> Goals -> Complete, every edge unconditional."""
        welcome_id, goals_id, complete_id = uuid4(), uuid4(), uuid4()
        steps = [
            JourneyFactory.step("Welcome", (AlwaysCondition(), goals_id), step_id=welcome_id),
            JourneyFactory.step("Goals", (AlwaysCondition(), complete_id), step_id=goals_id),
            JourneyFactory.step("Complete", step_id=complete_id),
        ]
        return Journey(name="Onboarding", steps=steps, initial_step=welcome_id)
