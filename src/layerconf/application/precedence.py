"""Ordering of configuration files by precedence.

Files are merged in the order returned here, so later entries win.
"""

from __future__ import annotations

from pathlib import Path
from typing import Final

EXTENSIONS: Final[tuple[str, ...]] = ("py", "json", "toml", "yaml", "yml")
"""Recognised file extensions, in the order they are tried for each base name."""


def base_names(environment: str, hostname: str = "") -> list[str]:
    """Return file base names from lowest to highest precedence.

    The short host name is the part before the first dot. The full host name
    is added only when it differs from the short one.

    Example:
        >>> base_names("production", "web1.example.com")
        ['default', 'production', 'web1', 'web1-production', 'web1.example.com', 'web1.example.com-production', 'local', 'local-production']
        >>> base_names("development")
        ['default', 'development', 'local', 'local-development']
    """
    names = ["default", environment]
    if hostname:
        short = hostname.split(".")[0]
        names.extend([short, f"{short}-{environment}"])
        if hostname != short:
            names.extend([hostname, f"{hostname}-{environment}"])
    names.extend(["local", f"local-{environment}"])
    return names


def candidate_files(
    config_dir: Path,
    environment: str,
    *,
    instance: str | None = None,
    hostname: str = "",
    extensions: tuple[str, ...] = EXTENSIONS,
) -> list[Path]:
    """Return every file path the loader tries, in merge order.

    For each base name and each extension the plain file comes first, then
    its instance variant when an instance is set.

    Example:
        >>> [p.name for p in candidate_files(Path("cfg"), "qa", instance="2", extensions=("json",))][:4]
        ['default.json', 'default-2.json', 'qa.json', 'qa-2.json']
    """
    paths: list[Path] = []
    for base in base_names(environment, hostname):
        for extension in extensions:
            paths.append(config_dir / f"{base}.{extension}")
            if instance:
                paths.append(config_dir / f"{base}-{instance}.{extension}")
    return paths


__all__ = [
    "EXTENSIONS",
    "base_names",
    "candidate_files",
]
