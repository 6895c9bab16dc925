"""Example: build a database client from a properties file.

The client receives its settings through its constructor; nothing scans or
assigns fields behind its back.
"""

from __future__ import annotations

import pathlib

from pydantic import BaseModel, Field

from propconfig import ConfigurationRegistry, bind, registry_from_manifest

HERE = pathlib.Path(__file__).resolve().parent


class DatabaseSettings(BaseModel):
    """Settings read from ``database.properties``."""

    host: str
    port: int = Field(gt=0, lt=65536)
    database: str = "test"


class DatabaseClient:
    """Stand-in for a document-store driver client."""

    def __init__(self, host: str, port: int, database: str = "test") -> None:
        self.host = host
        self.port = port
        self.database = database

    @classmethod
    def from_registry(cls, registry: ConfigurationRegistry) -> DatabaseClient:
        """Explicit constructor injection: values are requested by name."""
        return cls(
            host=registry.get("host", str),
            port=registry.get("port", int),
            database=registry.get("database", str, default="test"),
        )

    @classmethod
    def from_settings(cls, settings: DatabaseSettings) -> DatabaseClient:
        return cls(host=settings.host, port=settings.port, database=settings.database)

    @property
    def uri(self) -> str:
        return f"mongodb://{self.host}:{self.port}/{self.database}"


def default_client() -> DatabaseClient:
    """Client configured from ``database.properties`` alone."""
    registry = ConfigurationRegistry().load([str(HERE / "database.properties")])
    return DatabaseClient.from_registry(registry)


def local_client() -> DatabaseClient:
    """Client configured from the manifest, with local overrides applied."""
    registry = registry_from_manifest(HERE / "manifest.yaml")
    return DatabaseClient.from_settings(bind(registry, DatabaseSettings))


if __name__ == "__main__":
    print(default_client().uri)
    print(local_client().uri)
