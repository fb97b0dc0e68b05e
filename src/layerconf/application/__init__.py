"""Application layer - use cases and port definitions.

Orchestrates the domain engine into loadable configurations and defines the
interfaces adapter implementations must satisfy.

Contents:
    * :mod:`.config` - Public ``Config`` facade
    * :mod:`.context` - ``LoadContext`` construction context
    * :mod:`.loading` - File discovery and layering use case
    * :mod:`.precedence` - Base-name and candidate-file ordering
    * :mod:`.strictness` - Post-load discriminator checks
    * :mod:`.ports` - Callable Protocol definitions for adapter functions
"""

from __future__ import annotations

from .config import MODULE_DEFAULTS_SOURCE, Config
from .context import DEFAULT_ENVIRONMENT, LoadContext
from .loading import LoadResult, load_file_configs
from .ports import DisplayConfig, GetConfig, InitLogging, ParseSource
from .precedence import EXTENSIONS, base_names, candidate_files
from .strictness import find_violations, run_strictness_checks, warn_if_empty

__all__ = [
    # Facade
    "MODULE_DEFAULTS_SOURCE",
    "Config",
    # Loading
    "DEFAULT_ENVIRONMENT",
    "EXTENSIONS",
    "LoadContext",
    "LoadResult",
    "base_names",
    "candidate_files",
    "find_violations",
    "load_file_configs",
    "run_strictness_checks",
    "warn_if_empty",
    # Ports
    "DisplayConfig",
    "GetConfig",
    "InitLogging",
    "ParseSource",
]
