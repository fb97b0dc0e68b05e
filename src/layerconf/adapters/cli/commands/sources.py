"""Source inspection commands.

Contents:
    * :func:`cli_sources` - List the contributing sources in merge order.
    * :func:`cli_diff` - Show what another configuration directory changes.
"""

from __future__ import annotations

import logging
from pathlib import Path

import lib_log_rich.runtime
import rich_click as click

from layerconf.adapters.config.display import render_json
from layerconf.application.loading import load_file_configs
from layerconf.domain.enums import OutputFormat
from layerconf.domain.structural import diff_deep

from ..constants import CLICK_CONTEXT_SETTINGS
from ..context import get_cli_context
from ..exit_codes import ExitCode

logger = logging.getLogger(__name__)


@click.command("sources", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option(
    "--format",
    "output_format",
    type=click.Choice([f.value for f in OutputFormat], case_sensitive=False),
    default=OutputFormat.HUMAN.value,
    help="Output format (human-readable or JSON)",
)
@click.pass_context
def cli_sources(ctx: click.Context, output_format: str) -> None:
    """List every source that contributed to the configuration, lowest precedence first."""
    cli_ctx = get_cli_context(ctx)
    sources = cli_ctx.config.get_config_sources()
    with lib_log_rich.runtime.bind(job_id="cli-sources", extra={"command": "sources", "count": len(sources)}):
        if OutputFormat(output_format.lower()) == OutputFormat.JSON:
            listing = [{"name": source.name, "keys": sorted(source.parsed)} for source in sources]
            click.echo(render_json(listing))
            return
        if not sources:
            click.echo("No configuration sources found.")
            return
        for position, source in enumerate(sources, start=1):
            click.echo(f"{position:>3}. {source.name}")


@click.command("diff", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("other_dir", type=click.Path(file_okay=False, path_type=Path))
@click.pass_context
def cli_diff(ctx: click.Context, other_dir: Path) -> None:
    """Print, as JSON, the values OTHER_DIR adds or changes relative to the current configuration.

    OTHER_DIR is loaded with the same environment, host and instance but
    without environment or ``--set`` overrides. Removed keys are not shown.
    """
    cli_ctx = get_cli_context(ctx)
    with lib_log_rich.runtime.bind(job_id="cli-diff", extra={"command": "diff", "other_dir": str(other_dir)}):
        if not other_dir.is_dir():
            click.echo(f"Error: directory {other_dir} does not exist", err=True)
            raise SystemExit(ExitCode.FILE_NOT_FOUND)
        other = load_file_configs(cli_ctx.config.context, cli_ctx.services.parse_source, config_dir=other_dir)
        config = cli_ctx.config
        delta = diff_deep(config.to_object(), config.to_object(other.root))
        logger.info("Computed configuration diff", extra={"changed_keys": len(delta)})
        click.echo(render_json(config.to_object(delta)))


__all__ = ["cli_diff", "cli_sources"]
