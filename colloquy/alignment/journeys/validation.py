"""Structural checks run when a journey is registered."""

from collections.abc import Iterator
from uuid import UUID

from colloquy.alignment.models import Journey
from colloquy.exceptions import CircularJourneyError, InvalidJourneyError


def find_cycle(journey: Journey) -> list[UUID] | None:
    """Return a cycle reachable from the initial step, or None.

    Depth-first walk with an explicit stack. The returned path starts and
    ends with the step that closes the cycle.
    """
    successors: dict[UUID, list[UUID]] = {
        step.id: [t.next_step for t in step.transitions] for step in journey.steps
    }

    visited: set[UUID] = set()
    on_path: set[UUID] = set()
    path: list[UUID] = []
    stack: list[tuple[UUID, Iterator[UUID]]] = []

    def enter(step_id: UUID) -> None:
        visited.add(step_id)
        on_path.add(step_id)
        path.append(step_id)
        stack.append((step_id, iter(successors.get(step_id, []))))

    enter(journey.initial_step)
    while stack:
        step_id, children = stack[-1]
        child = next(children, None)
        if child is None:
            stack.pop()
            path.pop()
            on_path.discard(step_id)
            continue
        if child in on_path:
            return path[path.index(child) :] + [child]
        if child not in visited:
            enter(child)
    return None


def validate_journey(journey: Journey) -> None:
    """Check references and acyclicity.

    Raises:
        InvalidJourneyError: If the initial step or a transition target is
            not among the journey's steps, or step ids repeat
        CircularJourneyError: If a cycle is reachable from the initial step
    """
    step_ids = [step.id for step in journey.steps]
    known = set(step_ids)
    problems: list[str] = []

    if len(known) != len(step_ids):
        problems.append("Duplicate step ids")

    if journey.initial_step not in known:
        problems.append(f"Initial step {journey.initial_step} not found in journey steps")

    for step in journey.steps:
        for transition in step.transitions:
            if transition.next_step not in known:
                problems.append(
                    f"Transition target {transition.next_step} from step {step.name!r} "
                    "not found in journey steps"
                )

    if problems:
        raise InvalidJourneyError(journey.id, problems)

    cycle = find_cycle(journey)
    if cycle is not None:
        raise CircularJourneyError(journey.id, cycle)
