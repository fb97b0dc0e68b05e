"""Configuration display command.

Contents:
    * :func:`cli_config` - Display the merged configuration.
"""

from __future__ import annotations

import logging

import lib_log_rich.runtime
import rich_click as click

from layerconf.domain.enums import OutputFormat

from ..constants import CLICK_CONTEXT_SETTINGS
from ..context import get_cli_context
from ..exit_codes import ExitCode

logger = logging.getLogger(__name__)


@click.command("config", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option(
    "--format",
    "output_format",
    type=click.Choice([f.value for f in OutputFormat], case_sensitive=False),
    default=OutputFormat.HUMAN.value,
    help="Output format (human-readable or JSON)",
)
@click.option(
    "--section",
    type=str,
    default=None,
    help="Show only one top-level section (e.g., 'db')",
)
@click.pass_context
def cli_config(ctx: click.Context, output_format: str, section: str | None) -> None:
    """Display the merged configuration from all sources.

    Precedence: module defaults -> default -> environment -> host -> local
    -> instance variants -> $LAYERCONF -> --set
    """
    cli_ctx = get_cli_context(ctx)
    fmt = OutputFormat(output_format.lower())

    extra = {"command": "config", "format": fmt.value, "environment": cli_ctx.config.context.environment}
    with lib_log_rich.runtime.bind(job_id="cli-config", extra=extra):
        logger.info("Displaying configuration", extra={"format": fmt.value, "section": section})
        try:
            cli_ctx.services.display_config(cli_ctx.config, output_format=fmt, section=section)
        except ValueError as exc:
            click.echo(f"Error: {exc}", err=True)
            raise SystemExit(ExitCode.INVALID_ARGUMENT) from exc


__all__ = ["cli_config"]
