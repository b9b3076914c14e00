"""Base helpers for alignment domain models."""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


class DefinitionModel(BaseModel):
    """Base for registered definitions (guidelines, journeys).

    Definitions are immutable once handed to the matcher or journey
    manager; changing one means removing it and adding a new version.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
    )
