"""CLI command implementations.

Contents:
    * Info command from :mod:`.info`
    * Config display from :mod:`.config`
    * Value lookups from :mod:`.values`
    * Source inspection from :mod:`.sources`
"""

from __future__ import annotations

from .config import cli_config
from .info import cli_info
from .sources import cli_diff, cli_sources
from .values import cli_get, cli_has

__all__ = [
    "cli_config",
    "cli_diff",
    "cli_get",
    "cli_has",
    "cli_info",
    "cli_sources",
]
