"""Configuration adapter - file parsing, parameter discovery, display and overrides.

Contents:
    * :mod:`.parsers` - JSON, TOML, YAML and Python file parsing
    * :mod:`.settings` - Parameter discovery from arguments and environment
    * :mod:`.loader` - Production wiring of the configuration loader
    * :mod:`.display` - Configuration display in human/JSON formats
    * :mod:`.overrides` - CLI ``--set`` override parsing and application
"""

from __future__ import annotations

from .display import display_config
from .loader import get_config, load_directory, load_settings
from .overrides import apply_overrides
from .parsers import parse_file
from .settings import LoaderSettings

__all__ = [
    "LoaderSettings",
    "apply_overrides",
    "display_config",
    "get_config",
    "load_directory",
    "load_settings",
    "parse_file",
]
