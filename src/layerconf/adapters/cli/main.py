"""CLI entry point shared by the console script and ``python -m layerconf``.

Contents:
    * :func:`main` - run the CLI and translate every outcome into an exit code.
"""

from __future__ import annotations

import sys
import threading
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

import lib_cli_exit_tools
import lib_log_rich.runtime
import rich_click as click

from layerconf import __init__conf__

from .constants import TRACEBACK_SUMMARY_LIMIT, TRACEBACK_VERBOSE_LIMIT
from .context import apply_traceback_preferences, restore_traceback_state, snapshot_traceback_state

if TYPE_CHECKING:
    from layerconf.composition import AppServices


def _invoke(argv: Sequence[str] | None, services_factory: Callable[[], AppServices]) -> int:
    from .root import cli

    args = list(sys.argv[1:] if argv is None else argv)
    try:
        cli.main(args=args, prog_name=__init__conf__.shell_command, obj=services_factory, standalone_mode=False)
    except click.exceptions.Exit as exc:
        return exc.exit_code
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except BaseException as exc:
        # CLI boundary: SystemExit and KeyboardInterrupt are reported the same way.
        verbose = bool(getattr(lib_cli_exit_tools.config, "traceback", False))
        apply_traceback_preferences(verbose)
        limit = TRACEBACK_VERBOSE_LIMIT if verbose else TRACEBACK_SUMMARY_LIMIT
        if not isinstance(exc, SystemExit):
            lib_cli_exit_tools.print_exception_message(trace_back=verbose, length_limit=limit)
        return lib_cli_exit_tools.get_system_exit_code(exc)
    return 0


def main(
    argv: Sequence[str] | None = None,
    *,
    restore_traceback: bool = True,
    services_factory: Callable[[], AppServices] | None = None,
) -> int:
    """Run the CLI and return its exit code.

    Args:
        argv: CLI arguments; None reads ``sys.argv``.
        restore_traceback: Restore the traceback flags afterwards.
        services_factory: Returns the wired AppServices; pass
            ``build_production`` or ``build_testing``.

    Raises:
        ValueError: If services_factory is missing.

    Example:
        >>> from layerconf.composition import build_testing
        >>> main(["info"], services_factory=build_testing)  # doctest: +ELLIPSIS
        Info for layerconf:
        ...
        0
    """
    if services_factory is None:
        raise ValueError("services_factory is required. Pass build_production from composition layer.")

    previous_state = snapshot_traceback_state()
    try:
        return _invoke(argv, services_factory)
    finally:
        if restore_traceback:
            restore_traceback_state(previous_state)
        # Logging is process-global; only the main thread shuts it down.
        if threading.current_thread() is threading.main_thread() and lib_log_rich.runtime.is_initialised():
            lib_log_rich.runtime.shutdown()


__all__ = ["main"]
