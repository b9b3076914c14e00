"""Journey registry and step transition evaluation.

The manager only holds immutable journey definitions. Per-session
JourneyState lives with the caller (the Agent), which applies the
bookkeeping after each ``process_step``.
"""

import re
from collections.abc import Mapping
from uuid import UUID

from colloquy.alignment.journeys.validation import validate_journey
from colloquy.alignment.models import (
    AlwaysCondition,
    ContextVariableCondition,
    Journey,
    JourneyState,
    JourneyStep,
    MatchCondition,
    TransitionCondition,
)
from colloquy.conversation.models import Context, ContextVariable
from colloquy.exceptions import (
    InvalidTransitionPatternError,
    JourneyNotFoundError,
    JourneyStepNotFoundError,
)
from colloquy.observability.logging import get_logger

logger = get_logger(__name__)


class JourneyManager:
    """Registry of validated journeys."""

    def __init__(self) -> None:
        self._journeys: dict[UUID, Journey] = {}

    async def add_journey(self, journey: Journey) -> UUID:
        """Validate and register a journey.

        Raises:
            InvalidJourneyError: On missing step references or a cycle
        """
        validate_journey(journey)
        self._journeys[journey.id] = journey
        logger.info(
            "journey_added",
            journey_id=str(journey.id),
            name=journey.name,
            steps=len(journey.steps),
        )
        return journey.id

    def get_journey(self, journey_id: UUID) -> Journey | None:
        return self._journeys.get(journey_id)

    def list_journeys(self) -> list[Journey]:
        return list(self._journeys.values())

    async def start_journey(self, session_id: UUID, journey_id: UUID) -> JourneyState:
        """Fresh state positioned at the journey's initial step.

        Raises:
            JourneyNotFoundError: If the journey is not registered
        """
        journey = self._require(journey_id)
        logger.info("journey_started", journey_id=str(journey_id), session_id=str(session_id))
        return JourneyState(journey_id=journey.id, current_step=journey.initial_step)

    async def process_step(
        self,
        journey_id: UUID,
        current_step_id: UUID,
        message: str,
        context: Context | None = None,
    ) -> JourneyStep:
        """Return the step reached from ``current_step_id`` for this message.

        Transitions are tried in declaration order and the first whose
        condition holds wins. When none holds, the current step itself is
        returned.

        Raises:
            JourneyNotFoundError: If the journey is not registered
            JourneyStepNotFoundError: If a step id does not belong to it
            InvalidTransitionPatternError: If a Match pattern does not compile
        """
        journey = self._require(journey_id)
        current = journey.get_step(current_step_id)
        if current is None:
            raise JourneyStepNotFoundError(journey_id, current_step_id)

        variables = context.variables if context is not None else {}
        for transition in current.transitions:
            if self._evaluate(journey_id, transition.condition, message, variables):
                next_step = journey.get_step(transition.next_step)
                if next_step is None:
                    raise JourneyStepNotFoundError(journey_id, transition.next_step)
                logger.debug(
                    "journey_transition",
                    journey_id=str(journey_id),
                    from_step=current.name,
                    to_step=next_step.name,
                    condition=transition.condition.kind,
                )
                return next_step

        return current

    def _require(self, journey_id: UUID) -> Journey:
        journey = self._journeys.get(journey_id)
        if journey is None:
            raise JourneyNotFoundError(journey_id)
        return journey

    @staticmethod
    def _evaluate(
        journey_id: UUID,
        condition: TransitionCondition,
        message: str,
        variables: Mapping[str, ContextVariable],
    ) -> bool:
        if isinstance(condition, AlwaysCondition):
            return True
        if isinstance(condition, MatchCondition):
            try:
                return re.search(condition.pattern, message) is not None
            except re.error as e:
                raise InvalidTransitionPatternError(journey_id, condition.pattern, str(e)) from e
        if isinstance(condition, ContextVariableCondition):
            variable = variables.get(condition.key)
            current = variable.as_text() if variable is not None else ""
            return current == condition.value
        return False


def advance_state(state: JourneyState, current_step_id: UUID, reached: JourneyStep) -> None:
    """Apply the caller-side bookkeeping for one processed step.

    The processed step is recorded once in ``completed_steps``. Staying on
    the same step marks the journey complete; otherwise the state moves on.
    """
    state.complete_step(current_step_id)
    if reached.id == current_step_id:
        state.mark_complete()
    else:
        state.advance_to(reached.id)
