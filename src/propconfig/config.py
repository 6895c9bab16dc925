"""Library settings with dot-path key support."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import yaml

from propconfig.errors import ConfigError, SourceNotFoundError

__all__ = ["Config"]


class Config:
    """Settings accessor with dot-path key support.

    Keys read by propconfig:

    - ``sources.search_paths``: directories tried for relative file identifiers.
    - ``sources.encoding``: text encoding used to open sources.
    - ``env.separator``: separator replaced by ``.`` in environment variable names.
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}

    @classmethod
    def load(cls, yaml_path: str | Path) -> Config:
        """Load settings from a YAML mapping.

        Raises:
            SourceNotFoundError: If the file does not exist.
            ConfigError: If the YAML is invalid or not a mapping.
        """
        path = Path(yaml_path)
        if not path.is_file():
            raise SourceNotFoundError(source=str(path))

        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ConfigError(message=f"Invalid YAML in settings file {path}: {e}") from e

        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigError(message=f"Settings file must be a YAML mapping, got {type(data).__name__}")
        return cls(data)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a setting by dot-path key."""
        parts = key.split(".")
        current: Any = self._data
        for part in parts:
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default
        return current

    def with_search_paths(self, paths: list[Path]) -> Config:
        """Return a copy whose ``sources.search_paths`` is replaced by ``paths``.

        Raises:
            ConfigError: If the ``sources`` section is not a mapping.
        """
        data = copy.deepcopy(self._data)
        section = data.get("sources")
        if section is None:
            section = data["sources"] = {}
        elif not isinstance(section, dict):
            raise ConfigError(message=f"sources must be a mapping, got {type(section).__name__}")
        section["search_paths"] = [str(p) for p in paths]
        return Config(data)

    @property
    def search_paths(self) -> list[Path]:
        raw = self.get("sources.search_paths", []) or []
        if isinstance(raw, str):
            raw = [raw]
        if not isinstance(raw, list):
            raise ConfigError(message="sources.search_paths must be a list of directories")
        return [Path(p) for p in raw]

    @property
    def encoding(self) -> str:
        return self.get("sources.encoding", "utf-8")

    @property
    def env_separator(self) -> str:
        return self.get("env.separator", "_")
