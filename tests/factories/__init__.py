"""Test factories for creating domain objects."""

from tests.factories.alignment import GuidelineFactory, JourneyFactory

__all__ = ["GuidelineFactory", "JourneyFactory"]
