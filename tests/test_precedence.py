"""File precedence: base names, host variants, instance variants and extension order."""

from __future__ import annotations

from pathlib import Path

import pytest

from layerconf.application.precedence import EXTENSIONS, base_names, candidate_files


@pytest.mark.os_agnostic
def test_base_names_without_host() -> None:
    assert base_names("production") == ["default", "production", "local", "local-production"]


@pytest.mark.os_agnostic
def test_short_host_name_is_used_once_when_it_has_no_domain() -> None:
    assert base_names("qa", "web1") == ["default", "qa", "web1", "web1-qa", "local", "local-qa"]


@pytest.mark.os_agnostic
def test_full_host_name_follows_short_host_name() -> None:
    names = base_names("qa", "web1.example.com")

    assert names.index("web1") < names.index("web1.example.com") < names.index("local")
    assert "web1.example.com-qa" in names


@pytest.mark.os_agnostic
def test_extensions_are_tried_in_a_fixed_order() -> None:
    assert EXTENSIONS == ("py", "json", "toml", "yaml", "yml")


@pytest.mark.os_agnostic
def test_candidate_files_interleave_instance_variants() -> None:
    paths = candidate_files(Path("cfg"), "qa", instance="2", extensions=("json", "yaml"))

    assert [path.name for path in paths[:4]] == ["default.json", "default-2.json", "default.yaml", "default-2.yaml"]
    assert all(path.parent == Path("cfg") for path in paths)


@pytest.mark.os_agnostic
def test_candidate_files_end_with_local_environment_instance() -> None:
    paths = candidate_files(Path("cfg"), "qa", instance="2")

    assert paths[-1].name == "local-qa-2.yml"
    assert len(paths) == len(base_names("qa")) * len(EXTENSIONS) * 2


@pytest.mark.os_agnostic
def test_candidate_files_without_instance_have_no_variants() -> None:
    paths = candidate_files(Path("cfg"), "development")

    assert len(paths) == len(base_names("development")) * len(EXTENSIONS)
