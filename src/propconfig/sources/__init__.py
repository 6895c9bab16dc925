"""Configuration sources: locating, parsing and representing raw key-value data.

Usage::

    from propconfig.sources import load_source

    source = load_source("classpath:myapp/database.properties")
"""

from __future__ import annotations

from propconfig.sources.loader import load_source
from propconfig.sources.locator import environment_entries, open_source, source_name
from propconfig.sources.parser import parse_entries
from propconfig.sources.types import ConfigurationEntry, ConfigurationSource

__all__ = [
    "ConfigurationEntry",
    "ConfigurationSource",
    "environment_entries",
    "load_source",
    "open_source",
    "parse_entries",
    "source_name",
]
