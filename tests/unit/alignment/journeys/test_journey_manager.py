"""Unit tests for JourneyManager."""

from uuid import uuid4

import pytest

from colloquy.alignment.journeys import JourneyManager, advance_state
from colloquy.alignment.models import (
    AlwaysCondition,
    ContextVariableCondition,
    Journey,
    JourneyState,
    MatchCondition,
)
from colloquy.conversation.models import Context
from colloquy.exceptions import (
    CircularJourneyError,
    InvalidTransitionPatternError,
    JourneyNotFoundError,
    JourneyStepNotFoundError,
)
from tests.factories.alignment import JourneyFactory


@pytest.fixture
def manager() -> JourneyManager:
    return JourneyManager()


@pytest.fixture
def branching() -> Journey:
    """Start branches on the message, then on a context variable."""
    start, yes, no, premium, basic = uuid4(), uuid4(), uuid4(), uuid4(), uuid4()
    steps = [
        JourneyFactory.step(
            "Start",
            (MatchCondition(pattern=r"(?i)\byes\b"), yes),
            (MatchCondition(pattern=r"(?i)\bno\b"), no),
            step_id=start,
        ),
        JourneyFactory.step(
            "Yes",
            (ContextVariableCondition(key="plan", value="premium"), premium),
            (AlwaysCondition(), basic),
            step_id=yes,
        ),
        JourneyFactory.step("No", step_id=no),
        JourneyFactory.step("Premium", step_id=premium),
        JourneyFactory.step("Basic", step_id=basic),
    ]
    return Journey(name="Branching", steps=steps, initial_step=start)


class TestRegistration:
    """Tests for add_journey and lookups."""

    @pytest.mark.asyncio
    async def test_add_and_get(self, manager: JourneyManager) -> None:
        journey = JourneyFactory.onboarding()

        journey_id = await manager.add_journey(journey)

        assert journey_id == journey.id
        assert manager.get_journey(journey.id) == journey
        assert manager.list_journeys() == [journey]

    @pytest.mark.asyncio
    async def test_invalid_journey_not_registered(self, manager: JourneyManager) -> None:
        a_id, b_id = uuid4(), uuid4()
        journey = Journey(
            name="Loop",
            steps=[
                JourneyFactory.step("A", (AlwaysCondition(), b_id), step_id=a_id),
                JourneyFactory.step("B", (AlwaysCondition(), a_id), step_id=b_id),
            ],
            initial_step=a_id,
        )

        with pytest.raises(CircularJourneyError):
            await manager.add_journey(journey)

        assert manager.get_journey(journey.id) is None

    @pytest.mark.asyncio
    async def test_start_positions_at_initial_step(self, manager: JourneyManager) -> None:
        journey = JourneyFactory.onboarding()
        await manager.add_journey(journey)

        state = await manager.start_journey(uuid4(), journey.id)

        assert state.journey_id == journey.id
        assert state.current_step == journey.initial_step
        assert state.completed_steps == []
        assert state.is_complete is False

    @pytest.mark.asyncio
    async def test_start_unknown_journey(self, manager: JourneyManager) -> None:
        with pytest.raises(JourneyNotFoundError):
            await manager.start_journey(uuid4(), uuid4())


class TestProcessStep:
    """Tests for transition evaluation."""

    @pytest.mark.asyncio
    async def test_always_transition(self, manager: JourneyManager) -> None:
        journey = JourneyFactory.onboarding()
        await manager.add_journey(journey)

        step = await manager.process_step(journey.id, journey.initial_step, "Alice")

        assert step.name == "Goals"

    @pytest.mark.asyncio
    async def test_match_transitions_in_order(
        self, manager: JourneyManager, branching: Journey
    ) -> None:
        await manager.add_journey(branching)

        yes = await manager.process_step(branching.id, branching.initial_step, "Yes please")
        no = await manager.process_step(branching.id, branching.initial_step, "no thanks")
        both = await manager.process_step(branching.id, branching.initial_step, "yes and no")

        assert yes.name == "Yes"
        assert no.name == "No"
        assert both.name == "Yes"

    @pytest.mark.asyncio
    async def test_no_transition_returns_current_step(
        self, manager: JourneyManager, branching: Journey
    ) -> None:
        await manager.add_journey(branching)

        step = await manager.process_step(branching.id, branching.initial_step, "maybe")

        assert step.id == branching.initial_step

    @pytest.mark.asyncio
    async def test_terminal_step_returns_itself(self, manager: JourneyManager) -> None:
        journey = JourneyFactory.onboarding()
        await manager.add_journey(journey)
        terminal = journey.steps[-1]

        step = await manager.process_step(journey.id, terminal.id, "thanks")

        assert terminal.is_terminal
        assert step.id == terminal.id

    @pytest.mark.asyncio
    async def test_context_variable_transition(
        self, manager: JourneyManager, branching: Journey
    ) -> None:
        await manager.add_journey(branching)
        yes_step = branching.steps[1]
        context = Context()
        context.set_variable("plan", "premium")

        premium = await manager.process_step(branching.id, yes_step.id, "ok", context)
        basic = await manager.process_step(branching.id, yes_step.id, "ok", Context())

        assert premium.name == "Premium"
        assert basic.name == "Basic"

    @pytest.mark.asyncio
    async def test_non_string_variable_does_not_match(
        self, manager: JourneyManager, branching: Journey
    ) -> None:
        await manager.add_journey(branching)
        context = Context()
        context.set_variable("plan", 1)

        step = await manager.process_step(branching.id, branching.steps[1].id, "ok", context)

        assert step.name == "Basic"

    @pytest.mark.asyncio
    async def test_invalid_match_pattern_raises(self, manager: JourneyManager) -> None:
        end = JourneyFactory.step("End")
        start = JourneyFactory.step("Start", (MatchCondition(pattern="(bad"), end.id))
        journey = Journey(name="Bad regex", steps=[start, end], initial_step=start.id)
        await manager.add_journey(journey)

        with pytest.raises(InvalidTransitionPatternError) as exc_info:
            await manager.process_step(journey.id, start.id, "anything")

        assert exc_info.value.pattern == "(bad"

    @pytest.mark.asyncio
    async def test_unknown_journey(self, manager: JourneyManager) -> None:
        with pytest.raises(JourneyNotFoundError):
            await manager.process_step(uuid4(), uuid4(), "hi")

    @pytest.mark.asyncio
    async def test_unknown_step(self, manager: JourneyManager) -> None:
        journey = JourneyFactory.onboarding()
        await manager.add_journey(journey)

        with pytest.raises(JourneyStepNotFoundError):
            await manager.process_step(journey.id, uuid4(), "hi")


class TestAdvanceState:
    """Tests for the caller-side state bookkeeping."""

    def test_moving_on_records_completed_step(self) -> None:
        journey = JourneyFactory.onboarding()
        welcome, goals = journey.steps[0], journey.steps[1]
        state = JourneyState(journey_id=journey.id, current_step=welcome.id)

        advance_state(state, welcome.id, goals)

        assert state.current_step == goals.id
        assert state.completed_steps == [welcome.id]
        assert state.is_complete is False

    def test_staying_marks_complete_once(self) -> None:
        journey = JourneyFactory.onboarding()
        complete = journey.steps[-1]
        state = JourneyState(journey_id=journey.id, current_step=complete.id)

        advance_state(state, complete.id, complete)
        advance_state(state, complete.id, complete)

        assert state.current_step == complete.id
        assert state.completed_steps == [complete.id]
        assert state.is_complete is True
        assert state.completed_at is not None

    def test_completion_time_kept_on_later_calls(self) -> None:
        journey = JourneyFactory.onboarding()
        complete = journey.steps[-1]
        state = JourneyState(journey_id=journey.id, current_step=complete.id)

        advance_state(state, complete.id, complete)
        first_completed_at = state.completed_at
        advance_state(state, complete.id, complete)

        assert first_completed_at is not None
        assert state.completed_at == first_completed_at
