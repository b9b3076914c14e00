"""Journeys: multi-step conversation state machines."""

from colloquy.alignment.journeys.manager import JourneyManager, advance_state
from colloquy.alignment.journeys.validation import find_cycle, validate_journey

__all__ = ["JourneyManager", "advance_state", "find_cycle", "validate_journey"]
