"""Root CLI command group and global option handling.

The root group loads the configuration once, layers ``--set`` overrides on
top, initialises logging and hands everything to the subcommands through
the Click context.

Contents:
    * :func:`cli` - Root command group with global options.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import rich_click as click

from layerconf import __init__conf__
from layerconf.adapters.config.overrides import apply_overrides
from layerconf.application.config import Config
from layerconf.domain.errors import ConfigError

from .constants import CLICK_CONTEXT_SETTINGS
from .context import apply_traceback_preferences, store_cli_context
from .exit_codes import ExitCode

if TYPE_CHECKING:
    from layerconf.composition import AppServices


def _apply_cli_overrides(config: Config, set_overrides: tuple[str, ...]) -> Config:
    """Apply ``--set`` overrides, turning malformed input into a usage error.

    Raises:
        click.UsageError: If an override string is malformed or walks through
            a non-mapping value.
    """
    try:
        return apply_overrides(config, set_overrides)
    except (ValueError, TypeError) as exc:
        raise click.UsageError(str(exc)) from exc


@click.group(
    help=__init__conf__.title,
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=True,
)
@click.version_option(
    version=__init__conf__.version,
    prog_name=__init__conf__.shell_command,
    message=f"{__init__conf__.shell_command} version {__init__conf__.version}",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding the configuration files (default: $LAYERCONF_DIR or ./config)",
)
@click.option(
    "--env",
    "environment",
    type=str,
    default=None,
    help="Deployment environment (default: $LAYERCONF_ENV, $APP_ENV or 'development')",
)
@click.option(
    "--instance",
    type=str,
    default=None,
    help="Instance discriminator (default: $LAYERCONF_INSTANCE)",
)
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Fail when the environment or instance matches no configuration file",
)
@click.option(
    "--set",
    "set_overrides",
    multiple=True,
    default=(),
    metavar="SECTION.KEY=VALUE",
    help="Override a configuration setting (repeatable).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    traceback: bool,
    config_dir: Path | None,
    environment: str | None,
    instance: str | None,
    strict: bool,
    set_overrides: tuple[str, ...],
) -> None:
    """Root command storing global flags and the loaded configuration.

    Example:
        >>> from click.testing import CliRunner
        >>> from layerconf.composition import build_testing
        >>> result = CliRunner().invoke(cli, ["info"], obj=build_testing)
        >>> result.exit_code
        0
    """
    # ctx.obj is always the services factory (production or test)
    if not callable(ctx.obj):
        raise RuntimeError("Services factory not provided. This is a bug.")
    services: AppServices = ctx.obj()  # type: ignore[assignment]  # Click's obj is typed as Any
    apply_traceback_preferences(traceback)

    try:
        config = services.get_config(
            config_dir=config_dir,
            environment=environment,
            instance=instance,
            strict=True if strict else None,
            argv=(),
        )
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(ExitCode.CONFIG_ERROR) from exc

    config = _apply_cli_overrides(config, set_overrides)
    services.init_logging(config)
    store_cli_context(ctx, traceback=traceback, config=config, services=services, set_overrides=set_overrides)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Deferred import: command modules import helpers from this package, and this
# module defines the group they register onto.
def _register_commands() -> None:
    from .commands import cli_config, cli_diff, cli_get, cli_has, cli_info, cli_sources

    for cmd in (cli_info, cli_config, cli_get, cli_has, cli_sources, cli_diff):
        cli.add_command(cmd)


_register_commands()


__all__ = ["cli"]
