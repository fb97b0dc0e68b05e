"""Config facade: lookups, freeze on first read, module defaults, watchers and serialisation."""

from __future__ import annotations

import datetime as dt
import re
from collections.abc import Callable
from typing import Any

import pytest

from layerconf.adapters.memory import InMemorySources
from layerconf.application.config import MODULE_DEFAULTS_SOURCE, Config
from layerconf.application.context import LoadContext
from layerconf.domain.errors import (
    ConfigError,
    ImmutableConfigError,
    NotDefinedError,
    RecursionLimitExceededError,
    StrictnessViolationError,
)
from layerconf.domain.values import Accessor, ConfigNode, RawValue, defer_config, raw

ConfigFactory = Callable[..., Config]

# ======================== get / has ========================


@pytest.mark.os_agnostic
def test_get_returns_the_highest_precedence_value(config_factory: ConfigFactory) -> None:
    config = config_factory({"db": {"port": 5432, "host": "a"}}, {"db": {"port": 5433}})

    assert config.get("db.port") == 5433
    assert config.get(["db", "host"]) == "a"
    assert config["db.port"] == 5433


@pytest.mark.os_agnostic
def test_get_raises_for_missing_paths(config_factory: ConfigFactory) -> None:
    config = config_factory({"db": {"port": 5432}})

    with pytest.raises(NotDefinedError, match='"db.replica" is not defined'):
        config.get("db.replica")
    with pytest.raises(NotDefinedError):
        config.get("db.port.value")


@pytest.mark.os_agnostic
def test_get_rejects_a_missing_argument(config_factory: ConfigFactory) -> None:
    with pytest.raises(ValueError, match="null or undefined"):
        config_factory({}).get(None)


@pytest.mark.os_agnostic
def test_get_returns_explicit_none_values(config_factory: ConfigFactory) -> None:
    config = config_factory({"feature": {"flag": None}})

    assert config.get("feature.flag") is None
    assert config.has("feature.flag") is True


@pytest.mark.os_agnostic
def test_digit_segments_index_into_lists(config_factory: ConfigFactory) -> None:
    config = config_factory({"hosts": [{"name": "a"}, {"name": "b"}]})

    assert config.get("hosts.1.name") == "b"
    assert config.has("hosts.2") is False


@pytest.mark.os_agnostic
def test_has_never_raises(config_factory: ConfigFactory) -> None:
    config = config_factory({"a": 1})

    assert config.has("a") is True
    assert config.has("b.c") is False
    assert config.has(None) is False
    assert "a" in config
    assert 42 not in config


# ======================== freezing ========================


@pytest.mark.os_agnostic
def test_first_read_freezes_the_whole_tree(config_factory: ConfigFactory) -> None:
    config = config_factory({"db": {"port": 5432}, "hosts": ["a"]})
    db = config.get("db")

    with pytest.raises(ImmutableConfigError):
        db["port"] = 1
    with pytest.raises(ImmutableConfigError):
        config.get("hosts").append("b")
    with pytest.raises(ImmutableConfigError):
        config.set("db.port", 1)


@pytest.mark.os_agnostic
def test_has_does_not_freeze(config_factory: ConfigFactory) -> None:
    config = config_factory({"db": {"port": 5432}})

    config.has("db.port")
    config.set("db.port", 5433)

    assert config.get("db.port") == 5433


@pytest.mark.os_agnostic
def test_allow_mutations_keeps_the_tree_writable(config_factory: ConfigFactory) -> None:
    config = config_factory({"db": {"port": 5432}}, context=LoadContext(allow_mutations=True))

    config.get("db.port")
    config.get("db")["port"] = 1

    assert config.get("db.port") == 1


@pytest.mark.os_agnostic
def test_failed_read_does_not_freeze(config_factory: ConfigFactory) -> None:
    config = config_factory({"a": 1})

    with pytest.raises(NotDefinedError):
        config.get("missing")
    config.set("a", 2)

    assert config.get("a") == 2


@pytest.mark.os_agnostic
def test_make_immutable_freezes_without_reading(config_factory: ConfigFactory) -> None:
    config = config_factory({"a": {"b": 1}})

    config.make_immutable()

    with pytest.raises(ImmutableConfigError):
        config.root["a"]["b"] = 2


@pytest.mark.os_agnostic
def test_accessor_values_are_captured_on_freeze(config_factory: ConfigFactory) -> None:
    counter = {"value": 1}
    config = config_factory({"live": Accessor(lambda: counter["value"])})

    counter["value"] = 2
    assert config.get("live") == 2
    counter["value"] = 3
    assert config.get("live") == 2


# ======================== set / watch ========================


@pytest.mark.os_agnostic
def test_set_notifies_watchers(config_factory: ConfigFactory) -> None:
    seen: list[tuple[str, Any, Any]] = []
    config = config_factory({"db": {"port": 5432}})
    config.watch("db.port", lambda path, old, new: seen.append((path, old, new)))

    assert config.set("db.port", 5433) is None
    assert config.set(["db", "port"], 5433) is None

    assert seen == [("db.port", 5432, 5433)]


@pytest.mark.os_agnostic
def test_set_creates_missing_intermediate_nodes(config_factory: ConfigFactory) -> None:
    seen: list[Any] = []
    config = config_factory({})
    config.watch("cache.ttl", lambda path, old, new: seen.append((old, new)))

    config.set("cache.ttl", 30)

    assert config.get("cache.ttl") == 30
    assert seen == [(None, 30)]


@pytest.mark.os_agnostic
def test_runaway_watcher_is_reported_not_raised(config_factory: ConfigFactory) -> None:
    config = config_factory({"n": 0})
    config.watch("n", lambda path, old, new: config.set(path, new + 1))

    result = config.set("n", 1)

    assert isinstance(result, RecursionLimitExceededError)


@pytest.mark.os_agnostic
def test_unwatch_stops_notifications(config_factory: ConfigFactory) -> None:
    seen: list[Any] = []
    config = config_factory({"a": 1})
    unwatch = config.watch("a", lambda path, old, new: seen.append(new))

    unwatch()
    config.set("a", 2)

    assert seen == []


# ======================== module defaults ========================


@pytest.mark.os_agnostic
def test_module_defaults_have_the_lowest_precedence(config_factory: ConfigFactory) -> None:
    config = config_factory({"mailer": {"host": "smtp.internal"}})

    node = config.set_module_defaults("mailer", {"host": "localhost", "port": 25})

    assert node is config.root["mailer"]
    assert config.get("mailer") == {"host": "smtp.internal", "port": 25}


@pytest.mark.os_agnostic
def test_module_defaults_are_recorded_as_the_first_source(config_factory: ConfigFactory) -> None:
    config = config_factory({"a": 1})

    config.set_module_defaults("mailer", {"port": 25})
    config.set_module_defaults("cache", {"ttl": 60})

    sources = config.get_config_sources()
    assert sources[0].name == MODULE_DEFAULTS_SOURCE
    assert sources[0].parsed == {"mailer": {"port": 25}, "cache": {"ttl": 60}}
    assert [source.name for source in sources].count(MODULE_DEFAULTS_SOURCE) == 1


@pytest.mark.os_agnostic
def test_module_defaults_after_freezing_graft_missing_keys(config_factory: ConfigFactory) -> None:
    config = config_factory({"mailer": {"host": "smtp.internal"}})
    config.get("mailer.host")

    config.set_module_defaults("mailer", {"host": "localhost", "port": 25})
    config.set_module_defaults("cache", {"ttl": 60})

    assert config.get("mailer.host") == "smtp.internal"
    assert config.get("mailer.port") == 25
    assert config.get("cache.ttl") == 60
    with pytest.raises(ImmutableConfigError):
        config.get("cache")["ttl"] = 1


@pytest.mark.os_agnostic
def test_module_defaults_reject_a_scalar_section(config_factory: ConfigFactory) -> None:
    config = config_factory({"mailer": "disabled"})

    with pytest.raises(ConfigError, match="not a mapping"):
        config.set_module_defaults("mailer", {"port": 25})


@pytest.mark.os_agnostic
def test_module_defaults_are_copied(config_factory: ConfigFactory) -> None:
    defaults: dict[str, Any] = {"retry": {"count": 3}}
    config = config_factory({})

    config.set_module_defaults("client", defaults)
    defaults["retry"]["count"] = 99

    assert config.get("client.retry.count") == 3


# ======================== sources / parameters ========================


@pytest.mark.os_agnostic
def test_get_config_sources_returns_a_copy(config_factory: ConfigFactory) -> None:
    config = config_factory({"a": 1}, None, {"b": 2})

    sources = config.get_config_sources()
    sources.clear()

    assert [source.name for source in config.get_config_sources()] == ["layer[0]", "layer[2]"]


@pytest.mark.os_agnostic
def test_get_env_reports_recorded_parameters() -> None:
    config = Config(context=LoadContext(parameters={"APP_ENV": "qa"}))

    assert config.get_env("APP_ENV") == "qa"
    assert config.get_env("UNKNOWN") is None


# ======================== to_object / with_overrides ========================


@pytest.mark.os_agnostic
def test_to_object_produces_plain_json_data(config_factory: ConfigFactory) -> None:
    config = config_factory(
        {
            "when": dt.date(2024, 1, 2),
            "pattern": re.compile("a+"),
            "callback": print,
            "items": [1, b"raw", "x"],
            "nested": {"n": 1},
        }
    )

    plain = config.to_object()

    assert plain == {"when": "2024-01-02", "pattern": {}, "items": [1, None, "x"], "nested": {"n": 1}}
    assert type(plain["nested"]) is dict


@pytest.mark.os_agnostic
def test_to_object_of_a_subtree(config_factory: ConfigFactory) -> None:
    config = config_factory({"db": {"hosts": ["a"]}})

    assert config.to_object(config.get("db")) == {"hosts": ["a"]}


@pytest.mark.os_agnostic
def test_with_overrides_returns_a_new_instance(config_factory: ConfigFactory) -> None:
    config = config_factory({"db": {"port": 5432, "host": "a"}})
    config.get("db.port")

    overridden = config.with_overrides({"db": {"port": 5433}})

    assert overridden.get("db.port") == 5433
    assert overridden.get("db.host") == "a"
    assert config.get("db.port") == 5432
    assert overridden.get_config_sources()[-1].name == "--set overrides"


# ======================== load ========================


@pytest.mark.os_agnostic
def test_load_builds_a_frozen_configuration_from_sources() -> None:
    sources = InMemorySources(
        {
            "default.py": {
                "site": {"title": "Default"},
                "header": defer_config(lambda cfg, original: f"Welcome to {cfg['site']['title']}"),
            },
            "production.json": {"site": {"title": "Production"}},
        }
    )

    config = Config.load(LoadContext(environment="production"), sources)

    assert config.get("header") == "Welcome to Production"
    assert config.get_env("LAYERCONF") == {}
    assert isinstance(config.root, ConfigNode)
    with pytest.raises(ImmutableConfigError):
        config.root["site"]["title"] = "changed"


@pytest.mark.os_agnostic
def test_load_in_strict_mode_rejects_an_unmatched_environment() -> None:
    sources = InMemorySources({"default.json": {"a": 1}})

    with pytest.raises(StrictnessViolationError):
        Config.load(LoadContext(environment="staging", strict_mode=True), sources)


@pytest.mark.os_agnostic
def test_instances_are_independent() -> None:
    sources = InMemorySources({"default.json": {"a": 1}})

    first = Config.load(LoadContext(allow_mutations=True), sources)
    second = Config.load(LoadContext(allow_mutations=True), sources)
    first.set("a", 2)

    assert second.get("a") == 1


@pytest.mark.os_agnostic
def test_a_layer_reused_by_two_configs_does_not_leak_originals() -> None:
    layer = {"port": defer_config(lambda cfg, original: original)}

    first = Config.from_layers([{"port": 80}, layer])
    second = Config.from_layers([layer])

    assert first.get("port") == 80
    assert second.get("port") is None


# ======================== raw values ========================


class _Client:
    def __init__(self) -> None:
        self.settings = {"timeout": 5}


@pytest.mark.os_agnostic
def test_get_hands_out_the_wrapped_live_object(config_factory: ConfigFactory) -> None:
    client = _Client()
    config = config_factory({"db": {"client": raw(client), "port": 5432}})

    assert config.get("db.client") is client
    assert config.has("db.client") is True
    assert isinstance(config.root["db"].raw("client"), RawValue)


@pytest.mark.os_agnostic
def test_freezing_leaves_the_live_object_alone(config_factory: ConfigFactory) -> None:
    client = _Client()
    config = config_factory({"db": {"client": raw(client), "port": 5432}})

    config.get("db.port")
    client.settings["timeout"] = 10

    assert config.get("db.client").settings == {"timeout": 10}
    with pytest.raises(ImmutableConfigError):
        config.root["db"]["port"] = 1


@pytest.mark.os_agnostic
def test_lookups_walk_into_wrapped_mappings(config_factory: ConfigFactory) -> None:
    config = config_factory({"cache": raw({"backend": "memory"})})

    assert config.get("cache.backend") == "memory"


@pytest.mark.os_agnostic
def test_to_object_serialises_the_wrapped_value_when_possible(config_factory: ConfigFactory) -> None:
    config = config_factory({"cache": raw({"backend": "memory"}), "client": raw(_Client())})

    assert config.to_object() == {"cache": {"backend": "memory"}}
