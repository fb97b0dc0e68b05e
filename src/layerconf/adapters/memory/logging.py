"""In-memory logging adapter for testing."""

from __future__ import annotations

from ...application.config import Config


def init_logging_in_memory(config: Config) -> None:
    """No-op -- satisfies the InitLogging protocol without side effects."""


__all__ = ["init_logging_in_memory"]
