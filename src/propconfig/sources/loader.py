"""Turn source identifiers into ConfigurationSource objects."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from propconfig.errors import SourceReadError
from propconfig.sources.locator import (
    ENV_PREFIX,
    environment_entries,
    open_source,
    source_name,
)
from propconfig.sources.parser import parse_entries
from propconfig.sources.types import ConfigurationSource

logger = logging.getLogger(__name__)

__all__ = ["load_source"]


def load_source(
    identifier: str,
    *,
    search_paths: Iterable[str | Path] = (),
    encoding: str = "utf-8",
    env_separator: str = "_",
) -> ConfigurationSource:
    """Locate and parse one source.

    Raises:
        SourceNotFoundError: If the identifier cannot be resolved.
        SourceReadError: If the resource cannot be opened or decoded with ``encoding``.
        MalformedEntryError: If the resource contains an unparseable line.
    """
    name = source_name(identifier)

    if identifier.startswith(ENV_PREFIX):
        entries = environment_entries(identifier[len(ENV_PREFIX) :], separator=env_separator)
        logger.debug("Read %d environment entries for %s", len(entries), name)
        return ConfigurationSource(name=name, entries=tuple(entries))

    try:
        with open_source(identifier, search_paths=search_paths, encoding=encoding) as stream:
            entries = parse_entries(stream, source_name=name)
    except (UnicodeError, LookupError, OSError) as e:
        raise SourceReadError(source=name, reason=str(e), cause=e) from e
    logger.debug("Parsed %d entries from %s", len(entries), name)
    return ConfigurationSource(name=name, entries=tuple(entries))
