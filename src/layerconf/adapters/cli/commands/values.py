"""Single-value lookup commands.

Contents:
    * :func:`cli_get` - Print the value stored at a dotted path.
    * :func:`cli_has` - Report whether a dotted path is defined.
"""

from __future__ import annotations

import logging
from typing import Any

import lib_log_rich.runtime
import orjson
import rich_click as click

from layerconf.domain.errors import NotDefinedError

from ..constants import CLICK_CONTEXT_SETTINGS
from ..context import get_cli_context
from ..exit_codes import ExitCode

logger = logging.getLogger(__name__)


def format_value(value: Any) -> str:
    """Render strings verbatim and everything else as JSON.

    Examples:
        >>> format_value("db.internal")
        'db.internal'
        >>> format_value({"port": 5432})
        '{"port":5432}'
        >>> format_value(None)
        'null'
    """
    if isinstance(value, str):
        return value
    return orjson.dumps(value).decode("utf-8")


@click.command("get", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("path")
@click.pass_context
def cli_get(ctx: click.Context, path: str) -> None:
    """Print the value at PATH (e.g. ``db.port``); exit 1 when it is not defined."""
    cli_ctx = get_cli_context(ctx)
    with lib_log_rich.runtime.bind(job_id="cli-get", extra={"command": "get", "path": path}):
        try:
            value = cli_ctx.config.get(path)
        except NotDefinedError as exc:
            logger.info("Configuration path not defined", extra={"path": path})
            click.echo(f"Error: {exc}", err=True)
            raise SystemExit(ExitCode.NOT_DEFINED) from exc
        click.echo(format_value(None if value is None else cli_ctx.config.to_object(value)))


@click.command("has", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("path")
@click.pass_context
def cli_has(ctx: click.Context, path: str) -> None:
    """Print ``true`` or ``false``; exit 1 when PATH is not defined."""
    cli_ctx = get_cli_context(ctx)
    with lib_log_rich.runtime.bind(job_id="cli-has", extra={"command": "has", "path": path}):
        present = cli_ctx.config.has(path)
        click.echo("true" if present else "false")
        if not present:
            raise SystemExit(ExitCode.NOT_DEFINED)


__all__ = ["cli_get", "cli_has", "format_value"]
