"""Configuration registry: merge sources once, answer typed lookups many times."""

from __future__ import annotations

import logging
import threading
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from propconfig.config import Config
from propconfig.converter import convert
from propconfig.errors import (
    AlreadyLoadedError,
    ConfigError,
    ConfigurationError,
    DuplicateSourceError,
    MissingKeyError,
    NotInitializedError,
)
from propconfig.sources.loader import load_source
from propconfig.sources.locator import source_name
from propconfig.sources.types import ConfigurationEntry, ConfigurationSource

logger = logging.getLogger(__name__)

__all__ = ["ConfigurationRegistry", "MISSING", "REDACTED_VALUE", "from_sources"]

REDACTED_VALUE = "***REDACTED***"

_SENSITIVE_MARKERS = ("password", "secret", "token", "credential")


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


class ConfigurationRegistry:
    """Merged, read-only view of one or more configuration sources.

    The registry starts unloaded. ``load()`` merges the given sources in order,
    later sources overriding earlier ones, and moves it to the loaded state
    for good. Lookups before that raise ``NotInitializedError``.

    Thread safety:
        ``load()`` is serialized by a lock. After loading, the mapping is
        immutable and lookups take no lock.
    """

    def __init__(self, config: Config | None = None) -> None:
        self._config = config if config is not None else Config()
        self._entries: Mapping[str, ConfigurationEntry] | None = None
        self._source_names: tuple[str, ...] = ()
        self._load_lock = threading.Lock()

    # ----- Loading -----

    def load(self, sources: Iterable[ConfigurationSource | str]) -> ConfigurationRegistry:
        """Merge ``sources`` in precedence order and freeze the result.

        Items are ``ConfigurationSource`` objects or identifiers resolved
        through the locator. Returns ``self`` so construction can be chained.

        Raises:
            AlreadyLoadedError: If the registry was loaded before.
            ConfigError: If ``sources`` is a single string instead of a sequence.
            DuplicateSourceError: If a source name appears twice.
            SourceNotFoundError: If an identifier cannot be resolved.
            SourceReadError: If a located source cannot be opened or decoded.
            MalformedEntryError: If a source holds an unparseable line.
        """
        with self._load_lock:
            if self._entries is not None:
                raise AlreadyLoadedError()

            if isinstance(sources, str):
                raise ConfigError(message=f"load() expects a sequence of sources, got the string {sources!r}")
            sources = list(sources)
            seen: set[str] = set()
            for item in sources:
                name = item.name if isinstance(item, ConfigurationSource) else source_name(item)
                if name in seen:
                    raise DuplicateSourceError(source=name)
                seen.add(name)

            resolved = [self._resolve(item) for item in sources]

            merged: dict[str, ConfigurationEntry] = {}
            for source in resolved:
                for key, raw_value in source.entries:
                    previous = merged.get(key)
                    if previous is not None:
                        logger.debug("Key '%s' from %s overrides %s", key, source.name, previous.source)
                    merged[key] = ConfigurationEntry(key=key, raw_value=raw_value, source=source.name)

            self._source_names = tuple(s.name for s in resolved)
            self._entries = MappingProxyType(merged)

        logger.info("Configuration loaded: %d keys from %d sources", len(merged), len(resolved))
        return self

    def _resolve(self, item: ConfigurationSource | str) -> ConfigurationSource:
        if isinstance(item, ConfigurationSource):
            return item
        try:
            return load_source(
                item,
                search_paths=self._config.search_paths,
                encoding=self._config.encoding,
                env_separator=self._config.env_separator,
            )
        except ConfigurationError as e:
            logger.error("Failed to load configuration source %s: %s", source_name(item), e)
            raise

    # ----- Lookup -----

    def get(self, key: str, type: Any = str, default: Any = MISSING) -> Any:
        """Look up ``key`` and convert it to ``type``.

        An absent key returns ``default`` unchanged when one is given.

        Raises:
            NotInitializedError: If called before ``load()``.
            MissingKeyError: If the key is absent and no default was given.
            ConversionError: If the value cannot be converted.
        """
        entries = self._loaded("get")
        entry = entries.get(key)
        if entry is None:
            if default is MISSING:
                raise MissingKeyError(key=key)
            return default
        return convert(entry.raw_value, type, key=key)

    def has(self, key: str) -> bool:
        """Check whether a key is present."""
        return key in self._loaded("has")

    def entry(self, key: str) -> ConfigurationEntry:
        """Return the resolved entry for ``key``, including its source."""
        entries = self._loaded("entry")
        if key not in entries:
            raise MissingKeyError(key=key)
        return entries[key]

    def source_of(self, key: str) -> str:
        """Name of the source whose value won for ``key``."""
        return self.entry(key).source

    def keys(self) -> list[str]:
        """Sorted list of all keys."""
        return sorted(self._loaded("keys"))

    def subset(self, prefix: str) -> dict[str, str]:
        """Raw values under ``prefix.``, with the prefix stripped from the keys."""
        entries = self._loaded("subset")
        head = prefix.rstrip(".") + "."
        return {key[len(head) :]: e.raw_value for key, e in entries.items() if key.startswith(head)}

    def as_dict(self, redact_sensitive: bool = True) -> dict[str, str]:
        """Return the raw key to value mapping.

        With ``redact_sensitive``, values of keys whose last segment mentions a
        password, secret, token or credential are replaced by ``REDACTED_VALUE``.
        """
        entries = self._loaded("as_dict")
        result: dict[str, str] = {}
        for key, e in entries.items():
            if redact_sensitive and _is_sensitive(key):
                result[key] = REDACTED_VALUE
            else:
                result[key] = e.raw_value
        return result

    @property
    def source_names(self) -> list[str]:
        """Loaded source names in precedence order, lowest first."""
        self._loaded("source_names")
        return list(self._source_names)

    @property
    def is_loaded(self) -> bool:
        return self._entries is not None

    @property
    def count(self) -> int:
        """Number of keys."""
        return len(self._loaded("count"))

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    def __len__(self) -> int:
        return self.count

    def __repr__(self) -> str:
        if self._entries is None:
            return "ConfigurationRegistry(unloaded)"
        return f"ConfigurationRegistry(keys={len(self._entries)}, sources={list(self._source_names)!r})"

    def _loaded(self, operation: str) -> Mapping[str, ConfigurationEntry]:
        entries = self._entries
        if entries is None:
            raise NotInitializedError(operation=operation)
        return entries


def _is_sensitive(key: str) -> bool:
    last = key.rsplit(".", 1)[-1].lower()
    return any(marker in last for marker in _SENSITIVE_MARKERS)


def from_sources(sources: Iterable[ConfigurationSource | str], config: Config | None = None) -> ConfigurationRegistry:
    """Build and load a registry in one call."""
    return ConfigurationRegistry(config=config).load(sources)
