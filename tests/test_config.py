"""Tests for the Config settings accessor."""

from __future__ import annotations

from pathlib import Path

import pytest

from propconfig.config import Config
from propconfig.errors import ConfigError, SourceNotFoundError


class TestConfigGet:
    def test_dot_path(self) -> None:
        config = Config({"sources": {"encoding": "latin-1"}})
        assert config.get("sources.encoding") == "latin-1"

    def test_missing_returns_default(self) -> None:
        assert Config().get("a.b", "fallback") == "fallback"

    def test_non_mapping_intermediate(self) -> None:
        assert Config({"a": 1}).get("a.b") is None


class TestConfigProperties:
    def test_defaults(self) -> None:
        config = Config()
        assert config.search_paths == []
        assert config.encoding == "utf-8"
        assert config.env_separator == "_"

    def test_search_paths_single_string(self) -> None:
        assert Config({"sources": {"search_paths": "conf"}}).search_paths == [Path("conf")]

    def test_search_paths_invalid(self) -> None:
        with pytest.raises(ConfigError):
            _ = Config({"sources": {"search_paths": 5}}).search_paths

    def test_with_search_paths_empty_sources_section(self) -> None:
        updated = Config({"sources": None}).with_search_paths([Path("conf")])
        assert updated.search_paths == [Path("conf")]
        assert updated.encoding == "utf-8"

    def test_with_search_paths_non_mapping_sources(self) -> None:
        with pytest.raises(ConfigError):
            Config({"sources": ["conf"]}).with_search_paths([Path("conf")])

    def test_with_search_paths_copies(self) -> None:
        original = Config({"sources": {"search_paths": ["a"], "encoding": "ascii"}})
        updated = original.with_search_paths([Path("b"), Path("a")])
        assert updated.search_paths == [Path("b"), Path("a")]
        assert updated.encoding == "ascii"
        assert original.search_paths == [Path("a")]


class TestConfigLoad:
    def test_load_yaml(self, tmp_path: Path) -> None:
        f = tmp_path / "propconfig.yaml"
        f.write_text("sources:\n  search_paths: [conf, /etc/app]\n  encoding: utf-16\n")
        config = Config.load(f)
        assert config.search_paths == [Path("conf"), Path("/etc/app")]
        assert config.encoding == "utf-16"

    def test_empty_yaml(self, tmp_path: Path) -> None:
        f = tmp_path / "empty.yaml"
        f.write_text("")
        assert Config.load(f).encoding == "utf-8"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(SourceNotFoundError):
            Config.load(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        f = tmp_path / "bad.yaml"
        f.write_text("sources: {\n")
        with pytest.raises(ConfigError):
            Config.load(f)

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        f = tmp_path / "list.yaml"
        f.write_text("- a\n- b\n")
        with pytest.raises(ConfigError):
            Config.load(f)
