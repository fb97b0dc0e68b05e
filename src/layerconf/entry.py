"""``layerconf`` console script.

Inspects a layered configuration directory from the shell: print the merged
result, look up single values, list the contributing files or diff two
directories. Production adapters (file parsers, lib_log_rich logging) are
wired here, outside the adapters layer.
"""

from __future__ import annotations

from .adapters.cli.main import main as cli_main
from .composition import build_production


def main() -> int:
    """Run the CLI against the real filesystem and process environment.

    Returns:
        Exit code from CLI execution.
    """
    return cli_main(services_factory=build_production)


__all__ = ["main"]
