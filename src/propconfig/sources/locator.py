"""Resolve source identifiers to readable text streams."""

from __future__ import annotations

import hashlib
import importlib.util
import io
import logging
import os
from importlib import resources
from pathlib import Path
from typing import Iterable, Mapping, TextIO

from propconfig.errors import SourceNotFoundError

logger = logging.getLogger(__name__)

__all__ = [
    "CLASSPATH_PREFIX",
    "ENV_PREFIX",
    "FILE_PREFIX",
    "MEMORY_PREFIX",
    "environment_entries",
    "open_source",
    "source_name",
]

CLASSPATH_PREFIX = "classpath:"
FILE_PREFIX = "file:"
MEMORY_PREFIX = "memory:"
ENV_PREFIX = "env:"


def open_source(
    identifier: str,
    *,
    search_paths: Iterable[str | Path] = (),
    encoding: str = "utf-8",
) -> TextIO:
    """Open the resource named by ``identifier`` for reading.

    The caller owns the returned stream and must close it.

    Raises:
        SourceNotFoundError: If the identifier cannot be resolved.
    """
    if identifier.startswith(MEMORY_PREFIX):
        return io.StringIO(identifier[len(MEMORY_PREFIX) :])
    if identifier.startswith(CLASSPATH_PREFIX):
        return _open_resource(identifier, identifier[len(CLASSPATH_PREFIX) :], encoding)
    if identifier.startswith(ENV_PREFIX):
        raise SourceNotFoundError(
            source=identifier,
            reason="environment sources have no stream; read them with environment_entries()",
        )

    path = identifier[len(FILE_PREFIX) :] if identifier.startswith(FILE_PREFIX) else identifier
    if not path:
        raise SourceNotFoundError(source=identifier, reason="empty path")
    return _open_file(identifier, Path(path), [Path(p) for p in search_paths], encoding)


def environment_entries(
    prefix: str,
    *,
    separator: str = "_",
    environ: Mapping[str, str] | None = None,
) -> list[tuple[str, str]]:
    """Collect environment variables starting with ``prefix`` as ``(key, value)`` pairs.

    ``APP_DB_HOST`` with prefix ``APP_`` becomes ``db.host``. Pairs are sorted by
    variable name. Variables that leave an empty key after stripping are
    skipped.
    """
    env = os.environ if environ is None else environ
    entries: list[tuple[str, str]] = []
    for name in sorted(env):
        if not name.startswith(prefix) or name == prefix:
            continue
        rest = name[len(prefix) :]
        key = rest.lower().replace(separator, ".") if separator else rest.lower()
        key = key.strip(".")
        if not key:
            continue
        entries.append((key, env[name]))
    return entries


def source_name(identifier: str) -> str:
    """Stable display name for an identifier.

    In-memory identifiers are named by a digest of their text so logs and
    errors never carry the text itself.
    """
    if identifier.startswith(MEMORY_PREFIX):
        digest = hashlib.sha1(identifier.encode("utf-8")).hexdigest()[:12]
        return f"{MEMORY_PREFIX}{digest}"
    return identifier


def _open_file(identifier: str, path: Path, search_paths: list[Path], encoding: str) -> TextIO:
    if path.is_absolute():
        candidates = [path]
    else:
        candidates = [root / path for root in search_paths] + [path]

    for candidate in candidates:
        if candidate.is_file():
            try:
                return open(candidate, encoding=encoding)
            except OSError as e:
                raise SourceNotFoundError(source=identifier, reason=str(e)) from e

    tried = ", ".join(str(c) for c in candidates)
    raise SourceNotFoundError(source=identifier, reason=f"tried {tried}")


def _open_resource(identifier: str, resource_path: str, encoding: str) -> TextIO:
    """Open a resource bundled in an importable package.

    ``pkg/sub/app.properties`` and ``pkg.sub/app.properties`` both name
    ``app.properties`` inside ``pkg.sub``. The longest importable package
    prefix wins.
    """
    segments = [s for s in resource_path.strip("/").split("/") if s]
    if len(segments) < 2:
        raise SourceNotFoundError(source=identifier, reason="expected '<package>/<resource>'")
    segments = segments[0].split(".") + segments[1:]

    for split in range(len(segments) - 1, 0, -1):
        package = ".".join(segments[:split])
        try:
            spec = importlib.util.find_spec(package)
        except (ImportError, ValueError):
            continue
        if spec is None or spec.submodule_search_locations is None:
            continue

        resource = resources.files(package)
        for segment in segments[split:]:
            resource = resource.joinpath(segment)
        if resource.is_file():
            logger.debug("Resolved %s in package %s", identifier, package)
            try:
                return resource.open("r", encoding=encoding)
            except OSError as e:
                raise SourceNotFoundError(source=identifier, reason=str(e)) from e

    raise SourceNotFoundError(source=identifier)
