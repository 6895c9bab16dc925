"""Shared fixtures for the propconfig test suite."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterator

import pytest

from propconfig.registry import ConfigurationRegistry
from propconfig.sources.types import ConfigurationSource

RESOURCE_PACKAGE = "propconfig_fixture_pkg"

DATABASE_PROPERTIES = """\
# database connection
host = localhost
port = 27017
"""


@pytest.fixture
def database_source() -> ConfigurationSource:
    """The two-line host/port source used throughout the suite."""
    return ConfigurationSource.from_string(DATABASE_PROPERTIES, name="database.properties")


@pytest.fixture
def loaded_registry(database_source: ConfigurationSource) -> ConfigurationRegistry:
    """Registry loaded from the host/port source."""
    return ConfigurationRegistry().load([database_source])


@pytest.fixture
def properties_file(tmp_path: Path) -> Path:
    """Write database.properties to a temp dir and return its path."""
    path = tmp_path / "database.properties"
    path.write_text(DATABASE_PROPERTIES, encoding="utf-8")
    return path


@pytest.fixture
def resource_package(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[str]:
    """Create an importable package holding bundled .properties resources.

    Layout::

        propconfig_fixture_pkg/
            __init__.py
            app.properties
            conf/
                __init__.py
                database.properties
    """
    root = tmp_path / "site"
    pkg = root / RESOURCE_PACKAGE
    (pkg / "conf").mkdir(parents=True)
    (pkg / "__init__.py").write_text("")
    (pkg / "conf" / "__init__.py").write_text("")
    (pkg / "app.properties").write_text("app.name = demo\n")
    (pkg / "conf" / "database.properties").write_text(DATABASE_PROPERTIES)

    monkeypatch.syspath_prepend(str(root))
    yield RESOURCE_PACKAGE
    for name in [m for m in sys.modules if m == RESOURCE_PACKAGE or m.startswith(RESOURCE_PACKAGE + ".")]:
        sys.modules.pop(name, None)
