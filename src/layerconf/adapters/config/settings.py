"""Discovery of loader parameters from command-line arguments and the environment.

Every parameter is looked up as ``--NAME=value`` in the arguments first,
then as ``NAME`` in the environment, then falls back to its default. The
winning value of each lookup is recorded so ``Config.get_env`` can report
what the loader actually used.
"""

from __future__ import annotations

import logging
import os
import socket
import sys
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import orjson
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ...application.context import DEFAULT_ENVIRONMENT, LoadContext

logger = logging.getLogger(__name__)

OVERRIDE_NAME = "LAYERCONF"
_TRUTHY = frozenset({"1", "true", "yes", "on"})


def get_cmd_line_arg(name: str, argv: Sequence[str]) -> str | None:
    """Return the value of the first ``--NAME=value`` argument, or None.

    Example:
        >>> get_cmd_line_arg("APP_ENV", ["serve", "--APP_ENV=qa"])
        'qa'
        >>> get_cmd_line_arg("APP_ENV", ["--APP_ENVIRONMENT=qa"]) is None
        True
    """
    prefix = f"--{name}="
    for arg in argv:
        if arg.startswith(prefix):
            return arg[len(prefix) :]
    return None


def init_param(
    name: str,
    default: Any = None,
    *,
    argv: Sequence[str],
    environ: Mapping[str, str],
    recorded: dict[str, Any],
) -> Any:
    """Resolve one parameter and record the winning value in *recorded*.

    Empty strings count as unset, matching how shells export blank variables.

    Example:
        >>> seen: dict[str, object] = {}
        >>> init_param("APP_ENV", "development", argv=[], environ={"APP_ENV": "qa"}, recorded=seen)
        'qa'
        >>> seen
        {'APP_ENV': 'qa'}
    """
    value = get_cmd_line_arg(name, argv) or environ.get(name) or default
    recorded[name] = value
    return value


def discover_hostname(environ: Mapping[str, str]) -> str:
    """Return ``$HOST``, ``$HOSTNAME`` or the operating system host name."""
    hostname = environ.get("HOST") or environ.get("HOSTNAME")
    if hostname:
        return hostname
    try:
        return socket.gethostname()
    except OSError:
        return ""


def parse_json_override(raw: str | None, *, origin: str) -> dict[str, Any] | None:
    """Parse a JSON override; malformed input is logged and treated as empty.

    Example:
        >>> parse_json_override('{"db": {"port": 1}}', origin="$LAYERCONF")
        {'db': {'port': 1}}
        >>> parse_json_override(None, origin="$LAYERCONF") is None
        True
    """
    if raw is None:
        return None
    try:
        parsed = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        logger.error("The %s override is malformed JSON", origin, extra={"origin": origin, "error": str(exc)})
        return {}
    if not isinstance(parsed, dict):
        logger.error("The %s override is not a JSON object", origin, extra={"origin": origin})
        return {}
    return parsed


class LoaderSettings(BaseModel):
    """Validated snapshot of every loader parameter.

    Boolean flags accept ``1``/``true``/``yes``/``on`` (any case); any other
    non-empty text counts as off.

    Example:
        >>> settings = LoaderSettings.from_process(argv=[], environ={"APP_ENV": "qa", "LAYERCONF_STRICT_MODE": "true"}, cwd=Path("/srv/app"))
        >>> settings.environment, settings.strict_mode
        ('qa', True)
        >>> settings.config_dir.as_posix()
        '/srv/app/config'
    """

    model_config = ConfigDict(frozen=True)

    config_dir: Path
    environment: str = DEFAULT_ENVIRONMENT
    instance: str | None = None
    hostname: str = ""
    skip_gitcrypt: bool = False
    strict_mode: bool = False
    allow_mutations: bool = False
    suppress_no_config_warning: bool = False
    env_override: dict[str, Any] | None = None
    argv_override: dict[str, Any] | None = None
    parameters: dict[str, Any] = Field(default_factory=dict)

    @field_validator("skip_gitcrypt", "strict_mode", "allow_mutations", "suppress_no_config_warning", mode="before")
    @classmethod
    def _coerce_flag(cls, value: object) -> bool:
        if isinstance(value, str):
            return value.strip().lower() in _TRUTHY
        return bool(value)

    @field_validator("instance", mode="before")
    @classmethod
    def _blank_instance(cls, value: object) -> object:
        return value or None

    @classmethod
    def from_process(
        cls,
        *,
        argv: Sequence[str] | None = None,
        environ: Mapping[str, str] | None = None,
        cwd: Path | None = None,
    ) -> LoaderSettings:
        """Discover every parameter from *argv* and *environ*.

        Args:
            argv: Command-line arguments. Defaults to ``sys.argv[1:]``.
            environ: Environment mapping. Defaults to ``os.environ``.
            cwd: Base for relative configuration directories. Defaults to
                the current working directory.
        """
        args = list(sys.argv[1:] if argv is None else argv)
        env = os.environ if environ is None else environ
        base = Path.cwd() if cwd is None else cwd
        recorded: dict[str, Any] = {}

        def param(name: str, default: Any = None) -> Any:
            return init_param(name, default, argv=args, environ=env, recorded=recorded)

        environment = param("APP_ENV", DEFAULT_ENVIRONMENT)
        environment = param("LAYERCONF_ENV", environment)

        config_dir = Path(param("LAYERCONF_DIR", str(base / "config")))
        if not config_dir.is_absolute():
            config_dir = base / config_dir

        hostname = discover_hostname(env)
        recorded["HOSTNAME"] = hostname

        return cls(
            config_dir=config_dir,
            environment=environment,
            instance=param("LAYERCONF_INSTANCE"),
            hostname=hostname,
            skip_gitcrypt=param("LAYERCONF_SKIP_GITCRYPT", False),
            strict_mode=param("LAYERCONF_STRICT_MODE", False),
            allow_mutations=param("LAYERCONF_ALLOW_MUTATIONS", False),
            suppress_no_config_warning=param("LAYERCONF_SUPPRESS_NO_CONFIG_WARNING", False),
            env_override=parse_json_override(env.get(OVERRIDE_NAME) or None, origin=f"${OVERRIDE_NAME}"),
            argv_override=parse_json_override(get_cmd_line_arg(OVERRIDE_NAME, args), origin=f"--{OVERRIDE_NAME}"),
            parameters=recorded,
        )

    def to_context(self) -> LoadContext:
        """Convert into the application-layer construction context."""
        return LoadContext(
            config_dir=self.config_dir,
            environment=self.environment,
            instance=self.instance,
            hostname=self.hostname,
            skip_gitcrypt=self.skip_gitcrypt,
            strict_mode=self.strict_mode,
            allow_mutations=self.allow_mutations,
            suppress_no_config_warning=self.suppress_no_config_warning,
            env_override=self.env_override,
            argv_override=self.argv_override,
            override_name=OVERRIDE_NAME,
            parameters=dict(self.parameters),
        )


__all__ = [
    "OVERRIDE_NAME",
    "LoaderSettings",
    "discover_hostname",
    "get_cmd_line_arg",
    "init_param",
    "parse_json_override",
]
