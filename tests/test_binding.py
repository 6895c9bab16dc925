"""Tests for bind(), load_manifest() and registry_from_manifest()."""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

import pytest
from pydantic import BaseModel, Field

from propconfig.binding import bind, load_manifest, registry_from_manifest
from propconfig.config import Config
from propconfig.errors import ConfigError, ConversionError, MissingKeyError, SourceNotFoundError
from propconfig.registry import ConfigurationRegistry
from propconfig.sources.types import ConfigurationSource


class DatabaseSettings(BaseModel):
    host: str
    port: int
    database: str = "test"
    timeout_ms: Optional[int] = None


class PoolSettings(BaseModel):
    size: int = Field(gt=0)
    mode: Literal["lifo", "fifo"] = "fifo"


class AliasedSettings(BaseModel):
    max_connections: int = Field(alias="max-connections")


def _registry(text: str) -> ConfigurationRegistry:
    return ConfigurationRegistry().load([ConfigurationSource.from_string(text, name="s")])


# ---------------------------------------------------------------------------
# bind()
# ---------------------------------------------------------------------------


class TestBind:
    def test_binds_typed_fields(self, loaded_registry: ConfigurationRegistry) -> None:
        settings = bind(loaded_registry, DatabaseSettings)
        assert settings == DatabaseSettings(host="localhost", port=27017)

    def test_defaults_used_for_absent_keys(self, loaded_registry: ConfigurationRegistry) -> None:
        settings = bind(loaded_registry, DatabaseSettings)
        assert settings.database == "test"
        assert settings.timeout_ms is None

    def test_optional_field_converted(self) -> None:
        settings = bind(_registry("host = h\nport = 1\ntimeout_ms = 250"), DatabaseSettings)
        assert settings.timeout_ms == 250

    def test_prefix(self) -> None:
        registry = _registry("db.host = h\ndb.port = 2\nhost = other")
        settings = bind(registry, DatabaseSettings, prefix="db")
        assert (settings.host, settings.port) == ("h", 2)

    def test_prefix_with_trailing_dot(self) -> None:
        registry = _registry("db.host = h\ndb.port = 2")
        assert bind(registry, DatabaseSettings, prefix="db.").port == 2

    def test_alias_used_as_key(self) -> None:
        settings = bind(_registry("max-connections = 12"), AliasedSettings)
        assert settings.max_connections == 12

    def test_missing_required_field(self) -> None:
        with pytest.raises(MissingKeyError) as exc_info:
            bind(_registry("host = h"), DatabaseSettings)
        assert exc_info.value.key == "port"

    def test_missing_required_field_reports_prefixed_key(self) -> None:
        with pytest.raises(MissingKeyError) as exc_info:
            bind(_registry("db.host = h"), DatabaseSettings, prefix="db")
        assert exc_info.value.key == "db.port"

    def test_conversion_error(self) -> None:
        with pytest.raises(ConversionError) as exc_info:
            bind(_registry("host = h\nport = localhost"), DatabaseSettings)
        assert exc_info.value.key == "port"

    def test_model_constraint_violation(self) -> None:
        with pytest.raises(ConversionError) as exc_info:
            bind(_registry("pool.size = 0"), PoolSettings, prefix="pool")
        err = exc_info.value
        assert err.key == "pool.size"
        assert err.details["value"] == "0"
        assert err.target == "PoolSettings"

    def test_literal_field(self) -> None:
        settings = bind(_registry("size = 3\nmode = lifo"), PoolSettings)
        assert settings.mode == "lifo"

    def test_before_load(self) -> None:
        from propconfig.errors import NotInitializedError

        with pytest.raises(NotInitializedError):
            bind(ConfigurationRegistry(), DatabaseSettings)


# ---------------------------------------------------------------------------
# Manifests
# ---------------------------------------------------------------------------


@pytest.fixture
def manifest_dir(tmp_path: Path) -> Path:
    (tmp_path / "base.properties").write_text("host = base\nport = 1\n")
    (tmp_path / "override.properties").write_text("host = override\n")
    (tmp_path / "app.yaml").write_text("sources:\n  - base.properties\n  - override.properties\n")
    return tmp_path


class TestLoadManifest:
    def test_sources_in_order(self, manifest_dir: Path) -> None:
        assert load_manifest(manifest_dir / "app.yaml") == ["base.properties", "override.properties"]

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(SourceNotFoundError):
            load_manifest(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        f = tmp_path / "bad.yaml"
        f.write_text("sources: [\n")
        with pytest.raises(ConfigError):
            load_manifest(f)

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        f = tmp_path / "list.yaml"
        f.write_text("- a.properties\n")
        with pytest.raises(ConfigError):
            load_manifest(f)

    def test_empty_file(self, tmp_path: Path) -> None:
        f = tmp_path / "empty.yaml"
        f.write_text("")
        with pytest.raises(ConfigError):
            load_manifest(f)

    def test_missing_sources_key(self, tmp_path: Path) -> None:
        f = tmp_path / "nokey.yaml"
        f.write_text("files: []\n")
        with pytest.raises(ConfigError):
            load_manifest(f)

    def test_sources_not_list(self, tmp_path: Path) -> None:
        f = tmp_path / "scalar.yaml"
        f.write_text("sources: a.properties\n")
        with pytest.raises(ConfigError):
            load_manifest(f)

    def test_non_string_source(self, tmp_path: Path) -> None:
        f = tmp_path / "int.yaml"
        f.write_text("sources:\n  - 42\n")
        with pytest.raises(ConfigError):
            load_manifest(f)


class TestRegistryFromManifest:
    def test_relative_sources_resolve_against_manifest(
        self, manifest_dir: Path, monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory
    ) -> None:
        monkeypatch.chdir(tmp_path_factory.mktemp("elsewhere"))
        registry = registry_from_manifest(manifest_dir / "app.yaml")
        assert registry.get("host") == "override"
        assert registry.get("port", int) == 1
        assert registry.source_of("host") == "override.properties"

    def test_configured_search_paths_kept(self, manifest_dir: Path, tmp_path_factory: pytest.TempPathFactory) -> None:
        shared = tmp_path_factory.mktemp("shared")
        (shared / "shared.properties").write_text("region = eu\n")
        (manifest_dir / "with_shared.yaml").write_text("sources:\n  - base.properties\n  - shared.properties\n")
        config = Config({"sources": {"search_paths": [str(shared)]}})
        registry = registry_from_manifest(manifest_dir / "with_shared.yaml", config=config)
        assert registry.get("region") == "eu"

    def test_missing_source_in_manifest(self, manifest_dir: Path) -> None:
        (manifest_dir / "broken.yaml").write_text("sources:\n  - nowhere.properties\n")
        with pytest.raises(SourceNotFoundError):
            registry_from_manifest(manifest_dir / "broken.yaml")

    def test_empty_sources_section_in_settings(self, manifest_dir: Path) -> None:
        registry = registry_from_manifest(manifest_dir / "app.yaml", config=Config({"sources": None}))
        assert registry.get("host") == "override"

    def test_non_mapping_sources_section_in_settings(self, manifest_dir: Path) -> None:
        with pytest.raises(ConfigError):
            registry_from_manifest(manifest_dir / "app.yaml", config=Config({"sources": "conf"}))
