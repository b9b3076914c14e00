"""Observability: structured logging via structlog."""

from colloquy.observability.logging import (
    PIIRedactor,
    bound_context,
    get_logger,
    setup_logging,
)

__all__ = ["PIIRedactor", "bound_context", "get_logger", "setup_logging"]
