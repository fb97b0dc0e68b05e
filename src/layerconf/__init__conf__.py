"""Static package metadata surfaced to CLI commands and documentation.

Keep these values in sync with ``pyproject.toml``.
"""

from __future__ import annotations

#: Distribution name declared in ``pyproject.toml``.
name = "layerconf"
#: Human-readable summary shown in CLI help output.
title = "Layered configuration with deferred values and freeze-on-first-read"
#: Current release version pulled from ``pyproject.toml``.
version = "0.1.0"
#: Repository homepage presented to users.
homepage = "https://github.com/layerconf/layerconf"
#: Author attribution surfaced in CLI output.
author = "layerconf contributors"
#: Contact email surfaced in CLI output.
author_email = "layerconf@users.noreply.github.com"
#: Console-script name published by the package.
shell_command = "layerconf"


def print_info() -> None:
    """Print the summarised metadata block used by the CLI ``info`` command.

    Example:
        >>> print_info()  # doctest: +ELLIPSIS
        Info for layerconf:
        ...
    """
    fields = [
        ("name", name),
        ("title", title),
        ("version", version),
        ("homepage", homepage),
        ("author", author),
        ("author_email", author_email),
        ("shell_command", shell_command),
    ]
    pad = max(len(label) for label, _ in fields)
    lines = [f"Info for {name}:", ""]
    lines.extend(f"    {label.ljust(pad)} = {value}" for label, value in fields)
    print("\n".join(lines))
