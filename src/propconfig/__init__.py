"""propconfig - Typed configuration resolver for properties-style sources."""

from __future__ import annotations

# Core
from propconfig.registry import MISSING, REDACTED_VALUE, ConfigurationRegistry, from_sources

# Sources
from propconfig.sources import (
    ConfigurationEntry,
    ConfigurationSource,
    environment_entries,
    load_source,
    open_source,
    parse_entries,
)

# Conversion
from propconfig.converter import KINDS, convert

# Binding
from propconfig.binding import bind, load_manifest, registry_from_manifest

# Settings
from propconfig.config import Config

# Errors
from propconfig.errors import (
    AlreadyLoadedError,
    ConfigError,
    ConfigurationError,
    ConversionError,
    DuplicateSourceError,
    ErrorCodes,
    MalformedEntryError,
    MissingKeyError,
    NotInitializedError,
    SourceNotFoundError,
    SourceReadError,
)

__version__ = "0.1.0"

__all__ = [
    # Core
    "ConfigurationRegistry",
    "from_sources",
    "MISSING",
    "REDACTED_VALUE",
    # Sources
    "ConfigurationSource",
    "ConfigurationEntry",
    "load_source",
    "open_source",
    "parse_entries",
    "environment_entries",
    # Conversion
    "convert",
    "KINDS",
    # Binding
    "bind",
    "load_manifest",
    "registry_from_manifest",
    # Settings
    "Config",
    # Errors
    "ErrorCodes",
    "ConfigurationError",
    "ConfigError",
    "SourceNotFoundError",
    "SourceReadError",
    "MalformedEntryError",
    "DuplicateSourceError",
    "MissingKeyError",
    "ConversionError",
    "NotInitializedError",
    "AlreadyLoadedError",
]
