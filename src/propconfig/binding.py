"""Constructor injection of registry values and YAML source manifests."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, TypeVar

import pydantic
import yaml
from pydantic import BaseModel

from propconfig.config import Config
from propconfig.converter import type_name
from propconfig.errors import ConfigError, ConversionError, MissingKeyError, SourceNotFoundError
from propconfig.registry import ConfigurationRegistry

logger = logging.getLogger(__name__)

__all__ = ["bind", "load_manifest", "registry_from_manifest"]

M = TypeVar("M", bound=BaseModel)


def bind(registry: ConfigurationRegistry, model: type[M], *, prefix: str | None = None) -> M:
    """Construct ``model`` from registry values.

    Each field reads the key named by its alias (or its name), under
    ``prefix.`` when a prefix is given, converted to the field's annotation.
    Absent keys fall back to the field default.

    Raises:
        MissingKeyError: If a required field has no key in the registry.
        ConversionError: If a value does not convert or the model rejects it.
    """
    data: dict[str, Any] = {}
    keys: dict[str, str] = {}
    for name, field_info in model.model_fields.items():
        attr = field_info.alias or name
        key = f"{prefix.rstrip('.')}.{attr}" if prefix else attr
        keys[attr] = key
        if registry.has(key):
            data[attr] = registry.get(key, field_info.annotation)
        elif field_info.is_required():
            raise MissingKeyError(key=key)

    try:
        return model.model_validate(data)
    except pydantic.ValidationError as e:
        first = e.errors()[0]
        loc = str(first["loc"][0]) if first["loc"] else None
        key = keys.get(loc, loc) if loc is not None else None
        raw = registry.entry(key).raw_value if key is not None and registry.has(key) else ""
        raise ConversionError(key=key, value=raw, target=type_name(model), reason=first["msg"], cause=e) from e


def load_manifest(manifest_path: str | Path) -> list[str]:
    """Read the ordered source identifiers declared in a YAML manifest.

    The manifest is a mapping with a ``sources`` list::

        sources:
          - classpath:myapp/defaults.properties
          - conf/database.properties
          - env:MYAPP_

    Raises:
        SourceNotFoundError: If the manifest file does not exist.
        ConfigError: If the YAML is invalid or has the wrong shape.
    """
    path = Path(manifest_path)
    if not path.is_file():
        raise SourceNotFoundError(source=str(path))

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(message=f"Invalid YAML in manifest {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(message=f"Manifest {path} must be a mapping")
    if "sources" not in data:
        raise ConfigError(message=f"Manifest {path} missing required 'sources' key")

    sources = data["sources"]
    if not isinstance(sources, list):
        raise ConfigError(message=f"'sources' must be a list, got {type(sources).__name__}")
    for i, item in enumerate(sources):
        if not isinstance(item, str) or not item:
            raise ConfigError(message=f"Source {i} in {path} must be a non-empty string")

    logger.debug("Manifest %s declares %d sources", path, len(sources))
    return list(sources)


def registry_from_manifest(manifest_path: str | Path, config: Config | None = None) -> ConfigurationRegistry:
    """Build and load a registry from a manifest.

    Relative file identifiers are tried against the manifest's directory
    before the configured search paths.
    """
    path = Path(manifest_path)
    identifiers = load_manifest(path)
    base = config if config is not None else Config()
    effective = base.with_search_paths([path.resolve().parent, *base.search_paths])
    return ConfigurationRegistry(config=effective).load(identifiers)
