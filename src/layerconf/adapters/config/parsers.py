"""Format-specific parsing of configuration files.

Supported formats, chosen by file extension:

* ``.json`` - parsed with orjson
* ``.toml`` - parsed with rtoml
* ``.yaml`` / ``.yml`` - parsed with PyYAML's safe loader
* ``.py`` - executed as a module that must expose a ``config`` mapping;
  such modules may use :func:`layerconf.defer_config` and
  :class:`layerconf.Accessor`
"""

from __future__ import annotations

import importlib.util
import logging
import re
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, Final

import orjson
import rtoml
import yaml

from ...domain.errors import MalformedSourceError, SourceReadError
from ...domain.values import ConfigSource

logger = logging.getLogger(__name__)

GITCRYPT_PATTERN: Final = re.compile(rb"^.GITCRYPT")
"""Header git-crypt writes in front of encrypted files."""

BOM: Final = "\ufeff"


def _parse_json(path: Path, text: str) -> Any:
    return orjson.loads(text)


def _parse_toml(path: Path, text: str) -> Any:
    return rtoml.loads(text)


def _parse_yaml(path: Path, text: str) -> Any:
    return yaml.safe_load(text)


def _parse_python(path: Path, text: str) -> Any:
    spec = importlib.util.spec_from_file_location(f"layerconf_source_{path.stem.replace('-', '_')}", path)
    if spec is None or spec.loader is None:
        raise ImportError(f"cannot import {path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    if not hasattr(module, "config"):
        raise AttributeError("module does not define a 'config' mapping")
    return module.config


PARSERS: Final[dict[str, Callable[[Path, str], Any]]] = {
    "py": _parse_python,
    "json": _parse_json,
    "toml": _parse_toml,
    "yaml": _parse_yaml,
    "yml": _parse_yaml,
}


def parse_file(path: Path, *, skip_gitcrypt: bool = False) -> ConfigSource | None:
    """Read and parse one configuration file.

    Args:
        path: File to load. Its extension selects the parser.
        skip_gitcrypt: Skip git-crypt encrypted files with a warning instead
            of failing on them.

    Returns:
        The parsed source, or None when the file is missing, empty, an
        encrypted file being skipped, or does not hold a mapping.

    Raises:
        SourceReadError: The file exists but cannot be read.
        MalformedSourceError: The content cannot be parsed.

    Example:
        >>> parse_file(Path("does-not-exist.json")) is None
        True
    """
    try:
        if path.stat().st_size < 1:
            return None
    except OSError:
        return None

    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise SourceReadError(str(path)) from exc

    encrypted = GITCRYPT_PATTERN.match(raw) is not None
    if encrypted and skip_gitcrypt:
        logger.warning("%s is a git-crypt file and LAYERCONF_SKIP_GITCRYPT is set. skipping.", path, extra={"source": str(path)})
        return None

    parser = PARSERS.get(path.suffix.lstrip(".").lower())
    if parser is None:
        raise MalformedSourceError(str(path), f"unsupported file extension {path.suffix!r}")

    try:
        text = raw.decode("utf-8").removeprefix(BOM)
        parsed = parser(path, text)
    except Exception as exc:
        if encrypted:
            logger.error("%s is a git-crypt file and LAYERCONF_SKIP_GITCRYPT is not set.", path, extra={"source": str(path)})
        raise MalformedSourceError(str(path), str(exc)) from exc

    if parsed is None:
        parsed = {}
    if not isinstance(parsed, Mapping):
        logger.warning(
            "Ignoring configuration file without a top-level mapping",
            extra={"source": str(path), "type": type(parsed).__name__},
        )
        return None
    return ConfigSource(name=str(path), parsed=parsed, original_text=text)


__all__ = [
    "GITCRYPT_PATTERN",
    "PARSERS",
    "parse_file",
]
