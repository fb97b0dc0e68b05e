"""Adapters layer - infrastructure and framework integrations.

Contents:
    * :mod:`.config` - File parsing, parameter discovery, overrides and display
    * :mod:`.logging` - Logging setup with lib_log_rich
    * :mod:`.memory` - In-memory port implementations for tests
    * :mod:`.cli` - Click CLI framework integration
"""

from __future__ import annotations

__all__: list[str] = []
