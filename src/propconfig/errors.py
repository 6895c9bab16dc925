"""Error hierarchy for propconfig."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

__all__ = [
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
    "ErrorCodes",
]


class ConfigurationError(Exception):
    """Base error for all propconfig errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details: dict[str, Any] = details or {}
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc).isoformat()

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ConfigError(ConfigurationError):
    """Raised when library settings or a source manifest are invalid."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(code="CONFIG_INVALID", message=message, **kwargs)


class SourceNotFoundError(ConfigurationError):
    """Raised when a source identifier cannot be resolved to a readable resource."""

    def __init__(self, source: str, reason: str | None = None, **kwargs: Any) -> None:
        message = f"Configuration source not found: {source}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(
            code="SOURCE_NOT_FOUND",
            message=message,
            details={"source": source, "reason": reason},
            **kwargs,
        )

    @property
    def source(self) -> str:
        """The identifier that could not be resolved."""
        return self.details["source"]


class SourceReadError(ConfigurationError):
    """Raised when a located source cannot be opened or decoded."""

    def __init__(self, source: str, reason: str | None = None, **kwargs: Any) -> None:
        message = f"Cannot read configuration source: {source}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(
            code="SOURCE_UNREADABLE",
            message=message,
            details={"source": source, "reason": reason},
            **kwargs,
        )

    @property
    def source(self) -> str:
        """Name of the source that failed to read."""
        return self.details["source"]


class MalformedEntryError(ConfigurationError):
    """Raised when a source line cannot be split into key and value."""

    def __init__(self, source: str, line_number: int, line: str, **kwargs: Any) -> None:
        super().__init__(
            code="MALFORMED_ENTRY",
            message=f"Malformed entry in {source} at line {line_number}: {line!r}",
            details={"source": source, "line_number": line_number, "line": line},
            **kwargs,
        )

    @property
    def source(self) -> str:
        """Name of the source holding the bad line."""
        return self.details["source"]

    @property
    def line_number(self) -> int:
        """1-based line number of the bad line."""
        return self.details["line_number"]


class DuplicateSourceError(ConfigurationError):
    """Raised when the same source is registered twice in one load."""

    def __init__(self, source: str, **kwargs: Any) -> None:
        super().__init__(
            code="DUPLICATE_SOURCE",
            message=f"Source registered more than once: {source}",
            details={"source": source},
            **kwargs,
        )

    @property
    def source(self) -> str:
        """The repeated source name."""
        return self.details["source"]


class MissingKeyError(ConfigurationError):
    """Raised on lookup of an absent key when no default was supplied."""

    def __init__(self, key: str, **kwargs: Any) -> None:
        super().__init__(
            code="MISSING_KEY",
            message=f"Configuration key not found: {key}",
            details={"key": key},
            **kwargs,
        )

    @property
    def key(self) -> str:
        """The key that was looked up."""
        return self.details["key"]


class ConversionError(ConfigurationError):
    """Raised when a raw value cannot be converted to the requested type."""

    def __init__(
        self,
        key: str | None,
        value: str,
        target: str,
        reason: str | None = None,
        **kwargs: Any,
    ) -> None:
        label = key if key is not None else "<value>"
        message = f"Cannot convert {label}={value!r} to {target}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(
            code="CONVERSION_ERROR",
            message=message,
            details={"key": key, "value": value, "target": target, "reason": reason},
            **kwargs,
        )

    @property
    def key(self) -> str | None:
        """The key whose value failed to convert, if known."""
        return self.details["key"]

    @property
    def target(self) -> str:
        """Name of the attempted target type."""
        return self.details["target"]


class NotInitializedError(ConfigurationError):
    """Raised when the registry is queried before load() completed."""

    def __init__(self, operation: str = "get", **kwargs: Any) -> None:
        super().__init__(
            code="NOT_INITIALIZED",
            message=f"Registry is not loaded; cannot {operation}",
            details={"operation": operation},
            **kwargs,
        )


class AlreadyLoadedError(ConfigurationError):
    """Raised when load() is called on a registry that is already loaded."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(
            code="ALREADY_LOADED",
            message="Registry is already loaded and cannot be loaded again",
            **kwargs,
        )


class ErrorCodes:
    """All propconfig error codes as constants.

    Example:
        if error.code == ErrorCodes.MISSING_KEY:
            use_fallback()
    """

    CONFIG_INVALID = "CONFIG_INVALID"
    SOURCE_NOT_FOUND = "SOURCE_NOT_FOUND"
    SOURCE_UNREADABLE = "SOURCE_UNREADABLE"
    MALFORMED_ENTRY = "MALFORMED_ENTRY"
    DUPLICATE_SOURCE = "DUPLICATE_SOURCE"
    MISSING_KEY = "MISSING_KEY"
    CONVERSION_ERROR = "CONVERSION_ERROR"
    NOT_INITIALIZED = "NOT_INITIALIZED"
    ALREADY_LOADED = "ALREADY_LOADED"

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("ErrorCodes is immutable")
