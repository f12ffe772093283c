"""In-memory discovery service and credential store.

NOT for production secrets; values live in plain memory. Useful for tests
and for small deployments that keep endpoints in configuration::

    discovery = MemoryDiscovery(ConfigParams.from_tuples(
        "orders-db", "host=db1;port=3306;database=orders",
    ))
"""

from __future__ import annotations

from spine_mysql.config import ConfigParams

from .params import ConnectionParams, CredentialParams


class MemoryDiscovery:
    """Discovery service backed by a dict of ``key -> [ConnectionParams]``."""

    def __init__(self, config: ConfigParams | None = None):
        self._items: dict[str, list[ConnectionParams]] = {}
        if config is not None:
            self.configure(config)

    def configure(self, config: ConfigParams) -> None:
        """Register ``key=host=...;port=...`` entries."""
        for key in config.get_keys():
            value = config.get_as_nullable_string(key)
            if value is not None:
                self.register(key, ConnectionParams.from_string(value))

    def register(self, key: str, connection: ConnectionParams) -> None:
        self._items.setdefault(key, []).append(connection)

    async def resolve_one(self, correlation_id: str | None, key: str) -> ConnectionParams | None:
        connections = self._items.get(key)
        return connections[0] if connections else None

    async def resolve_all(self, correlation_id: str | None, key: str) -> list[ConnectionParams]:
        return list(self._items.get(key, []))


class MemoryCredentialStore:
    """Credential store backed by a dict of ``key -> CredentialParams``."""

    def __init__(self, config: ConfigParams | None = None):
        self._items: dict[str, CredentialParams] = {}
        if config is not None:
            self.configure(config)

    def configure(self, config: ConfigParams) -> None:
        """Register ``key=username=...;password=...`` entries."""
        for key in config.get_keys():
            value = config.get_as_nullable_string(key)
            if value is not None:
                self.store(key, CredentialParams.from_string(value))

    def store(self, key: str, credential: CredentialParams | None) -> None:
        if credential is None:
            self._items.pop(key, None)
        else:
            self._items[key] = credential

    async def lookup(self, correlation_id: str | None, key: str) -> CredentialParams | None:
        return self._items.get(key)


__all__ = [
    "MemoryDiscovery",
    "MemoryCredentialStore",
]
