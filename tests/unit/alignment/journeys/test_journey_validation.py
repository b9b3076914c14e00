"""Unit tests for journey structural validation."""

from uuid import uuid4

import pytest

from colloquy.alignment.journeys import find_cycle, validate_journey
from colloquy.alignment.models import AlwaysCondition, Journey, MatchCondition
from colloquy.exceptions import CircularJourneyError, InvalidJourneyError
from tests.factories.alignment import JourneyFactory


class TestValidateJourney:
    """Tests for validate_journey."""

    def test_linear_journey_is_valid(self) -> None:
        validate_journey(JourneyFactory.onboarding())

    def test_missing_initial_step_rejected(self) -> None:
        step = JourneyFactory.step("Only")
        journey = Journey(name="Broken", steps=[step], initial_step=uuid4())

        with pytest.raises(InvalidJourneyError) as exc_info:
            validate_journey(journey)

        assert not isinstance(exc_info.value, CircularJourneyError)
        assert "Initial step" in exc_info.value.message

    def test_missing_transition_target_rejected(self) -> None:
        step = JourneyFactory.step("Start", (AlwaysCondition(), uuid4()))
        journey = Journey(name="Dangling", steps=[step], initial_step=step.id)

        with pytest.raises(InvalidJourneyError) as exc_info:
            validate_journey(journey)

        assert "Transition target" in exc_info.value.message

    def test_duplicate_step_ids_rejected(self) -> None:
        step_id = uuid4()
        journey = Journey(
            name="Twins",
            steps=[
                JourneyFactory.step("One", step_id=step_id),
                JourneyFactory.step("Two", step_id=step_id),
            ],
            initial_step=step_id,
        )

        with pytest.raises(InvalidJourneyError):
            validate_journey(journey)

    def test_two_step_cycle_rejected(self) -> None:
        a_id, b_id = uuid4(), uuid4()
        journey = Journey(
            name="Loop",
            steps=[
                JourneyFactory.step("A", (AlwaysCondition(), b_id), step_id=a_id),
                JourneyFactory.step("B", (AlwaysCondition(), a_id), step_id=b_id),
            ],
            initial_step=a_id,
        )

        with pytest.raises(CircularJourneyError) as exc_info:
            validate_journey(journey)

        assert exc_info.value.cycle == [a_id, b_id, a_id]

    def test_self_loop_rejected(self) -> None:
        step_id = uuid4()
        journey = Journey(
            name="Spin",
            steps=[
                JourneyFactory.step(
                    "Again", (MatchCondition(pattern="again"), step_id), step_id=step_id
                )
            ],
            initial_step=step_id,
        )

        with pytest.raises(CircularJourneyError):
            validate_journey(journey)


class TestFindCycle:
    """Tests for find_cycle."""

    def test_diamond_has_no_cycle(self) -> None:
        a, b, c, d = uuid4(), uuid4(), uuid4(), uuid4()
        journey = Journey(
            name="Diamond",
            steps=[
                JourneyFactory.step(
                    "A",
                    (MatchCondition(pattern="left"), b),
                    (AlwaysCondition(), c),
                    step_id=a,
                ),
                JourneyFactory.step("B", (AlwaysCondition(), d), step_id=b),
                JourneyFactory.step("C", (AlwaysCondition(), d), step_id=c),
                JourneyFactory.step("D", step_id=d),
            ],
            initial_step=a,
        )

        assert find_cycle(journey) is None

    def test_cycle_deep_in_graph(self) -> None:
        a, b, c, d = uuid4(), uuid4(), uuid4(), uuid4()
        journey = Journey(
            name="Late loop",
            steps=[
                JourneyFactory.step("A", (AlwaysCondition(), b), step_id=a),
                JourneyFactory.step("B", (AlwaysCondition(), c), step_id=b),
                JourneyFactory.step("C", (AlwaysCondition(), d), step_id=c),
                JourneyFactory.step("D", (AlwaysCondition(), b), step_id=d),
            ],
            initial_step=a,
        )

        assert find_cycle(journey) == [b, c, d, b]

    def test_long_chain_does_not_recurse(self) -> None:
        ids = [uuid4() for _ in range(3000)]
        steps = [
            JourneyFactory.step(f"S{i}", (AlwaysCondition(), ids[i + 1]), step_id=ids[i])
            for i in range(len(ids) - 1)
        ]
        steps.append(JourneyFactory.step("End", step_id=ids[-1]))
        journey = Journey(name="Long", steps=steps, initial_step=ids[0])

        assert find_cycle(journey) is None
