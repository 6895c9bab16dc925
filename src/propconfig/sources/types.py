"""Source types: ConfigurationSource, ConfigurationEntry."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from typing import Any, Mapping

from propconfig.sources.parser import parse_entries

__all__ = [
    "ConfigurationSource",
    "ConfigurationEntry",
]


@dataclass(frozen=True)
class ConfigurationSource:
    """One origin of raw key-value pairs, immutable once loaded.

    Sources built without a ``name`` are named by a digest of their content,
    so two different unnamed sources never collide while the same content
    registered twice is still one source.
    """

    name: str
    entries: tuple[tuple[str, str], ...] = field(default_factory=tuple)

    @classmethod
    def from_string(cls, text: str, name: str | None = None) -> ConfigurationSource:
        """Parse ``key = value`` text into a source."""
        if name is None:
            name = _content_name("string", text)
        return cls(name=name, entries=tuple(parse_entries(text, source_name=name)))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], name: str | None = None) -> ConfigurationSource:
        """Build a source from an in-memory mapping; values are stored as strings."""
        entries = tuple((str(k), _to_raw(v)) for k, v in data.items())
        if name is None:
            name = _content_name("mapping", "\n".join(f"{k}={v}" for k, v in entries))
        return cls(name=name, entries=entries)

    @property
    def keys(self) -> list[str]:
        return [key for key, _ in self.entries]

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class ConfigurationEntry:
    """A resolved key with its raw value and the name of the source that supplied it."""

    key: str
    raw_value: str
    source: str


def _to_raw(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _content_name(kind: str, text: str) -> str:
    digest = hashlib.sha1(text.encode("utf-8", "surrogatepass")).hexdigest()[:12]
    return f"<{kind}:{digest}>"
