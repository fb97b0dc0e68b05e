"""Shared pytest fixtures for engine, adapter and CLI tests.

Centralizes test infrastructure following clean architecture principles:
- All shared fixtures live here
- Tests import fixtures implicitly via pytest's conftest discovery
- Fixtures use descriptive names that read as plain English
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator
from dataclasses import fields
from pathlib import Path
from typing import TYPE_CHECKING, Any

import lib_cli_exit_tools
import orjson
import pytest
from click.testing import CliRunner

from layerconf.application.config import Config
from layerconf.application.context import LoadContext

if TYPE_CHECKING:
    from layerconf.composition import AppServices

ANSI_ESCAPE_PATTERN = re.compile(r"\x1B\[[0-?]*[ -/]*[@-~]")
CONFIG_FIELDS: tuple[str, ...] = tuple(field.name for field in fields(type(lib_cli_exit_tools.config)))

#: Environment that keeps loader tests independent of the developer machine.
QUIET_ENVIRON: dict[str, str] = {"HOST": "testhost", "LAYERCONF_SUPPRESS_NO_CONFIG_WARNING": "1"}


def _remove_ansi_codes(text: str) -> str:
    """Return *text* stripped of ANSI escape sequences."""
    return ANSI_ESCAPE_PATTERN.sub("", text)


def _snapshot_cli_config() -> dict[str, object]:
    """Capture every attribute from ``lib_cli_exit_tools.config``."""
    return {name: getattr(lib_cli_exit_tools.config, name) for name in CONFIG_FIELDS}


def _restore_cli_config(snapshot: dict[str, object]) -> None:
    """Reapply a configuration snapshot captured by ``_snapshot_cli_config``."""
    for name, value in snapshot.items():
        setattr(lib_cli_exit_tools.config, name, value)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a fresh CliRunner per test.

    Use ``result.stdout`` for clean output (e.g., JSON parsing) so log lines
    written to stderr do not contaminate it.
    """
    return CliRunner()


@pytest.fixture
def strip_ansi() -> Callable[[str], str]:
    """Return a helper that strips ANSI escape sequences from a string."""

    def _strip(value: str) -> str:
        return _remove_ansi_codes(value)

    return _strip


@pytest.fixture
def managed_traceback_state() -> Iterator[None]:
    """Reset traceback flags to a known baseline and restore after the test."""
    lib_cli_exit_tools.reset_config()
    lib_cli_exit_tools.config.traceback = False
    lib_cli_exit_tools.config.traceback_force_color = False
    snapshot = _snapshot_cli_config()
    try:
        yield
    finally:
        _restore_cli_config(snapshot)


@pytest.fixture
def isolated_environ(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Remove every loader variable from ``os.environ`` for the test.

    The CLI discovers parameters from the real process environment, so tests
    that go through ``build_production`` must not see the developer's own
    ``APP_ENV`` or ``LAYERCONF`` values.
    """
    for name in (
        "APP_ENV",
        "LAYERCONF",
        "LAYERCONF_ENV",
        "LAYERCONF_DIR",
        "LAYERCONF_INSTANCE",
        "LAYERCONF_SKIP_GITCRYPT",
        "LAYERCONF_STRICT_MODE",
        "LAYERCONF_ALLOW_MUTATIONS",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOST", "testhost")
    monkeypatch.setenv("LAYERCONF_SUPPRESS_NO_CONFIG_WARNING", "1")
    yield


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[[str, Any], Path]:
    """Write configuration files into ``tmp_path`` and return their path.

    Mappings are serialised as JSON; strings are written verbatim, so the
    file name decides how they are parsed.

    Example:
        def test_load(write_config) -> None:
            write_config("default.json", {"db": {"port": 5432}})
            write_config("production.yaml", "db:\\n  port: 5433\\n")
    """

    def _write(name: str, content: Any) -> Path:
        path = tmp_path / name
        if isinstance(content, (bytes, bytearray)):
            path.write_bytes(bytes(content))
        elif isinstance(content, str):
            path.write_text(content, encoding="utf-8")
        else:
            path.write_bytes(orjson.dumps(content))
        return path

    return _write


@pytest.fixture
def config_factory() -> Callable[..., Config]:
    """Create real Config instances from in-memory layers without filesystem I/O.

    Example:
        def test_port(config_factory) -> None:
            config = config_factory({"db": {"port": 5432}}, {"db": {"port": 5433}})
            assert config.get("db.port") == 5433
    """

    def _factory(*layers: dict[str, Any], context: LoadContext | None = None) -> Config:
        return Config.from_layers(layers, context=context)

    return _factory


@pytest.fixture
def inject_config() -> Callable[[Config], Callable[[], AppServices]]:
    """Return a factory that provides CLI services with an injected Config.

    Only the loading boundary (``get_config``) is replaced; display and
    logging are the production adapters.
    """
    from layerconf.composition import AppServices, build_production

    def _inject(config: Config) -> Callable[[], AppServices]:
        def _fake_get_config(**_kwargs: Any) -> Config:
            return config

        prod = build_production()
        test_services = AppServices(
            get_config=_fake_get_config,
            display_config=prod.display_config,
            parse_source=prod.parse_source,
            init_logging=prod.init_logging,
        )
        return lambda: test_services

    return _inject


@pytest.fixture
def inject_config_with_capture() -> Callable[[Config, list[dict[str, Any]]], Callable[[], AppServices]]:
    """Return a factory whose ``get_config`` records the keyword arguments it receives."""
    from layerconf.composition import AppServices, build_testing

    def _inject(config: Config, captured: list[dict[str, Any]]) -> Callable[[], AppServices]:
        def _capturing_get_config(**kwargs: Any) -> Config:
            captured.append(kwargs)
            return config

        memory = build_testing()
        test_services = AppServices(
            get_config=_capturing_get_config,
            display_config=memory.display_config,
            parse_source=memory.parse_source,
            init_logging=memory.init_logging,
        )
        return lambda: test_services

    return _inject


@pytest.fixture
def production_factory(isolated_environ: None) -> Callable[[], AppServices]:
    """Provide the production services factory with a scrubbed environment."""
    from layerconf.composition import build_production

    return build_production
