"""Loader orchestration over an in-memory file table: order, overrides and deferred values."""

from __future__ import annotations

from pathlib import Path

import pytest

from layerconf.adapters.memory import InMemorySources
from layerconf.application.context import LoadContext
from layerconf.application.loading import load_file_configs
from layerconf.domain.values import defer_config


@pytest.mark.os_agnostic
def test_files_merge_in_precedence_order() -> None:
    sources = InMemorySources(
        {
            "default.json": {"db": {"host": "localhost", "port": 5432}, "debug": True},
            "production.yaml": {"db": {"host": "db.internal"}, "debug": False},
            "local.toml": {"db": {"port": 6543}},
        }
    )

    result = load_file_configs(LoadContext(environment="production"), sources)

    assert result.root == {"db": {"host": "db.internal", "port": 6543}, "debug": False}
    assert [Path(source.name).name for source in result.sources] == ["default.json", "production.yaml", "local.toml"]


@pytest.mark.os_agnostic
def test_host_and_instance_files_override_environment_files() -> None:
    sources = InMemorySources(
        {
            "default.json": {"port": 1},
            "qa.json": {"port": 2},
            "web1-qa.json": {"port": 3},
            "web1-qa-2.json": {"port": 4},
        }
    )
    context = LoadContext(environment="qa", hostname="web1.example.com", instance="2")

    result = load_file_configs(context, sources)

    assert result.root["port"] == 4


@pytest.mark.os_agnostic
def test_every_candidate_is_requested_from_the_configured_directory() -> None:
    sources = InMemorySources()

    load_file_configs(LoadContext(config_dir=Path("/etc/svc")), sources)

    assert sources.requested[0] == Path("/etc/svc/default.py")
    assert all(path.parent == Path("/etc/svc") for path in sources.requested)


@pytest.mark.os_agnostic
def test_environment_and_argument_overrides_come_last() -> None:
    sources = InMemorySources({"local.json": {"db": {"port": 1, "host": "a"}}})
    context = LoadContext(env_override={"db": {"port": 2}}, argv_override={"db": {"host": "b"}})

    result = load_file_configs(context, sources)

    assert result.root == {"db": {"port": 2, "host": "b"}}
    assert [source.name for source in result.sources][-2:] == ["$LAYERCONF", "--LAYERCONF argument"]
    assert result.parameters["LAYERCONF"] == {"db": {"port": 2, "host": "b"}}


@pytest.mark.os_agnostic
def test_override_parameter_is_recorded_even_when_empty() -> None:
    result = load_file_configs(LoadContext(), InMemorySources())

    assert result.parameters["LAYERCONF"] == {}
    assert result.sources == []


@pytest.mark.os_agnostic
def test_explicit_directory_skips_overrides() -> None:
    sources = InMemorySources({"default.json": {"a": 1}})
    context = LoadContext(env_override={"a": 2})

    result = load_file_configs(context, sources, config_dir="/other")

    assert result.root == {"a": 1}
    assert sources.requested[0].parent == Path("/other")
    assert "LAYERCONF" not in result.parameters


@pytest.mark.os_agnostic
def test_deferred_values_resolve_after_overrides() -> None:
    sources = InMemorySources(
        {
            "default.py": {
                "site": {"title": "Default"},
                "header": defer_config(lambda cfg, original: f"Welcome to {cfg['site']['title']}"),
            },
        }
    )
    context = LoadContext(env_override={"site": {"title": "Override"}})

    result = load_file_configs(context, sources)

    assert result.root["header"] == "Welcome to Override"


@pytest.mark.os_agnostic
def test_sources_keep_the_parsed_layers_untouched() -> None:
    layer = {"db": {"port": 1}}
    sources = InMemorySources({"default.json": layer, "local.json": {"db": {"port": 2}}})

    result = load_file_configs(LoadContext(), sources)

    assert layer == {"db": {"port": 1}}
    assert result.sources[0].parsed is layer
