"""Production loader wiring: real files on disk, discovered parameters and explicit arguments."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from layerconf.adapters.config.loader import get_config, load_directory, load_settings
from layerconf.domain.errors import ImmutableConfigError, MalformedSourceError, StrictnessViolationError

WriteConfig = Callable[[str, Any], Path]
ENVIRON = {"HOST": "web1", "LAYERCONF_SUPPRESS_NO_CONFIG_WARNING": "1"}


@pytest.mark.os_agnostic
def test_mixed_formats_merge_in_precedence_order(tmp_path: Path, write_config: WriteConfig) -> None:
    write_config("default.json", {"db": {"host": "localhost", "port": 5432}, "debug": True})
    write_config("production.yaml", "db:\n  host: db.internal\ndebug: false\n")
    write_config("web1-production.toml", "[db]\nport = 6543\n")

    config = get_config(config_dir=tmp_path, environment="production", argv=[], environ=ENVIRON)

    assert config.to_object() == {"db": {"host": "db.internal", "port": 6543}, "debug": False}
    assert [Path(source.name).name for source in config.get_config_sources()] == [
        "default.json",
        "production.yaml",
        "web1-production.toml",
    ]


@pytest.mark.os_agnostic
def test_environment_variables_choose_directory_and_environment(tmp_path: Path, write_config: WriteConfig) -> None:
    write_config("default.json", {"port": 1})
    write_config("qa.json", {"port": 2})

    config = get_config(argv=[], environ={**ENVIRON, "LAYERCONF_DIR": str(tmp_path), "APP_ENV": "qa"})

    assert config.get("port") == 2
    assert config.get_env("APP_ENV") == "qa"
    assert config.context.config_dir == tmp_path


@pytest.mark.os_agnostic
def test_json_overrides_beat_every_file(tmp_path: Path, write_config: WriteConfig) -> None:
    write_config("local.json", {"db": {"port": 1, "host": "a"}})
    environ = {**ENVIRON, "LAYERCONF": '{"db": {"port": 2}}'}

    config = get_config(config_dir=tmp_path, argv=['--LAYERCONF={"db": {"host": "b"}}'], environ=environ)

    assert config.to_object() == {"db": {"port": 2, "host": "b"}}
    assert [source.name for source in config.get_config_sources()][-2:] == ["$LAYERCONF", "--LAYERCONF argument"]
    assert config.get_env("LAYERCONF") == {"db": {"port": 2, "host": "b"}}


@pytest.mark.os_agnostic
def test_python_config_with_deferred_value(tmp_path: Path, write_config: WriteConfig) -> None:
    write_config(
        "default.py",
        "from layerconf import defer_config\n"
        "config = {\n"
        "    'site': {'title': 'Default'},\n"
        "    'header': defer_config(lambda cfg, original: 'Welcome to ' + cfg['site']['title']),\n"
        "}\n",
    )
    write_config("production.json", {"site": {"title": "Production"}})

    config = get_config(config_dir=tmp_path, environment="production", argv=[], environ=ENVIRON)

    assert config.get("header") == "Welcome to Production"


@pytest.mark.os_agnostic
def test_loaded_configuration_freezes_on_first_read(tmp_path: Path, write_config: WriteConfig) -> None:
    write_config("default.json", {"db": {"port": 5432}})

    config = get_config(config_dir=tmp_path, argv=[], environ=ENVIRON)
    db = config.get("db")

    with pytest.raises(ImmutableConfigError):
        db["port"] = 1


@pytest.mark.os_agnostic
def test_allow_mutations_parameter_keeps_the_tree_writable(tmp_path: Path, write_config: WriteConfig) -> None:
    write_config("default.json", {"db": {"port": 5432}})

    config = get_config(config_dir=tmp_path, argv=[], environ={**ENVIRON, "LAYERCONF_ALLOW_MUTATIONS": "true"})
    config.get("db")["port"] = 1

    assert config.get("db.port") == 1


@pytest.mark.os_agnostic
def test_explicit_strict_flag_raises(tmp_path: Path, write_config: WriteConfig) -> None:
    write_config("default.json", {"a": 1})

    with pytest.raises(StrictnessViolationError):
        get_config(config_dir=tmp_path, environment="staging", strict=True, argv=[], environ=ENVIRON)


@pytest.mark.os_agnostic
def test_malformed_file_aborts_loading(tmp_path: Path, write_config: WriteConfig) -> None:
    write_config("default.json", "{broken")

    with pytest.raises(MalformedSourceError):
        get_config(config_dir=tmp_path, argv=[], environ=ENVIRON)


@pytest.mark.os_agnostic
def test_each_call_returns_an_independent_instance(tmp_path: Path, write_config: WriteConfig) -> None:
    write_config("default.json", {"a": 1})

    first = get_config(config_dir=tmp_path, argv=[], environ=ENVIRON)
    second = get_config(config_dir=tmp_path, argv=[], environ=ENVIRON)

    assert first is not second
    assert first.root is not second.root


@pytest.mark.os_agnostic
def test_load_settings_applies_explicit_arguments_last() -> None:
    settings = load_settings(environment="qa", instance="3", strict=False, argv=["--APP_ENV=prod"], environ={"LAYERCONF_STRICT_MODE": "1"})

    assert settings.environment == "qa"
    assert settings.instance == "3"
    assert settings.strict_mode is False


@pytest.mark.os_agnostic
def test_load_directory_uses_the_same_discriminators(tmp_path: Path, write_config: WriteConfig) -> None:
    other = tmp_path / "other"
    other.mkdir()
    (other / "qa.json").write_text('{"port": 9}', encoding="utf-8")
    write_config("qa.json", {"port": 2})

    config = get_config(config_dir=tmp_path, environment="qa", argv=[], environ={**ENVIRON, "LAYERCONF": '{"x": 1}'})
    result = load_directory(config, other)

    assert result.root == {"port": 9}
