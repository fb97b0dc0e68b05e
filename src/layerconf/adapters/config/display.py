"""Render a loaded configuration as TOML-like text or JSON.

Flushes pending log output before writing so log lines and configuration
output do not interleave.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import lib_log_rich.runtime
import orjson
from rich.console import Console
from rich.markup import escape

from ...application.config import Config
from ...domain.enums import OutputFormat


def _format_scalar(value: Any) -> str:
    """Render a leaf the way it would be written in a TOML file.

    Examples:
        >>> _format_scalar("db.local"), _format_scalar(True), _format_scalar(None)
        ('"db.local"', 'true', 'null')
        >>> _format_scalar([1, "a"])
        '[1,"a"]'
    """
    return orjson.dumps(value).decode("utf-8")


def _render_table(console: Console, name: str, table: Mapping[str, Any]) -> None:
    leaves = [(key, value) for key, value in table.items() if not isinstance(value, Mapping)]
    children = [(key, value) for key, value in table.items() if isinstance(value, Mapping)]
    if name:
        console.print(f"[bold cyan]\\[{escape(name)}][/bold cyan]")
    for key, value in leaves:
        console.print(f"[green]{escape(key)}[/green] = {escape(_format_scalar(value))}")
    if leaves:
        console.print()
    for key, value in children:
        _render_table(console, f"{name}.{key}" if name else key, value)


def render_json(data: Any) -> str:
    """Serialise *data* as indented JSON text.

    Example:
        >>> print(render_json({"db": {"port": 5432}}))
        {
          "db": {
            "port": 5432
          }
        }
    """
    return orjson.dumps(data, option=orjson.OPT_INDENT_2).decode("utf-8")


def display_config(
    config: Config,
    *,
    output_format: OutputFormat = OutputFormat.HUMAN,
    section: str | None = None,
    console: Console | None = None,
) -> None:
    """Write *config* (or one section of it) to the console.

    Args:
        config: Loaded configuration.
        output_format: HUMAN for TOML-like tables, JSON for machine output.
        section: Optional top-level section to show on its own.
        console: Optional Rich Console, mainly for tests.

    Raises:
        ValueError: If *section* does not exist.
    """
    if lib_log_rich.runtime.is_initialised():
        lib_log_rich.runtime.flush()

    data = config.to_object()
    if section is not None:
        if section not in data:
            raise ValueError(f"Section {section!r} not found in configuration")
        data = {section: data[section]}

    out = console if console is not None else Console()
    if output_format == OutputFormat.JSON:
        out.print_json(render_json(data))
        return
    if not data:
        out.print("[dim]# no configuration values[/dim]")
        return
    top_leaves = {key: value for key, value in data.items() if not isinstance(value, Mapping)}
    if top_leaves:
        _render_table(out, "", top_leaves)
    for key, value in data.items():
        if isinstance(value, Mapping):
            _render_table(out, key, value)


__all__ = [
    "display_config",
    "render_json",
]
