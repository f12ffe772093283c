"""Generic connection and credential resolution.

Both resolvers read fragments from configuration and, when a fragment
only names a key (``discovery_key`` / ``store_key``), look the real
fragment up through collaborators registered in
:class:`~spine_mysql.references.References`:

- discovery services under ``*:discovery:*:*:*``
- credential stores under ``*:credential-store:*:*:*``
"""

from __future__ import annotations

from spine_mysql.config import ConfigParams
from spine_mysql.errors import ConfigError
from spine_mysql.logging import get_logger
from spine_mysql.references import Descriptor, References

from .params import ConnectionParams, CredentialParams

logger = get_logger(__name__)

DISCOVERY_LOCATOR = Descriptor("*", "discovery", "*", "*", "*")
CREDENTIAL_STORE_LOCATOR = Descriptor("*", "credential-store", "*", "*", "*")


class ConnectionResolver:
    """Resolves every configured connection fragment."""

    def __init__(self, config: ConfigParams | None = None, references: References | None = None):
        self._connections: list[ConnectionParams] = []
        self._references = references
        if config is not None:
            self.configure(config)

    def configure(self, config: ConfigParams) -> None:
        self._connections.extend(ConnectionParams.many_from_config(config))

    def set_references(self, references: References) -> None:
        self._references = references

    def get_all(self) -> list[ConnectionParams]:
        return list(self._connections)

    def add(self, connection: ConnectionParams) -> None:
        self._connections.append(connection)

    async def _discover(self, correlation_id: str | None, connection: ConnectionParams) -> list[ConnectionParams]:
        key = connection.get_discovery_key()
        services = self._references.get_optional(DISCOVERY_LOCATOR) if self._references else []
        if not services:
            raise ConfigError(
                "NO_DISCOVERY",
                f"Discovery wasn't found to resolve connection with key {key}",
                correlation_id=correlation_id,
            )

        found: list[ConnectionParams] = []
        for service in services:
            found.extend(await service.resolve_all(correlation_id, key))

        logger.debug("connection.discovered", correlation_id=correlation_id, key=key, count=len(found))
        return found

    async def resolve_all(self, correlation_id: str | None) -> list[ConnectionParams]:
        """Return configured fragments with discovery keys expanded."""
        resolved: list[ConnectionParams] = []
        for connection in self._connections:
            if connection.use_discovery():
                resolved.extend(await self._discover(correlation_id, connection))
            else:
                resolved.append(connection)
        return resolved

    async def resolve(self, correlation_id: str | None) -> ConnectionParams | None:
        connections = await self.resolve_all(correlation_id)
        return connections[0] if connections else None


class CredentialResolver:
    """Resolves the credential fragment to use for a connection."""

    def __init__(self, config: ConfigParams | None = None, references: References | None = None):
        self._credentials: list[CredentialParams] = []
        self._references = references
        if config is not None:
            self.configure(config)

    def configure(self, config: ConfigParams) -> None:
        self._credentials.extend(CredentialParams.many_from_config(config))

    def set_references(self, references: References) -> None:
        self._references = references

    def get_all(self) -> list[CredentialParams]:
        return list(self._credentials)

    def add(self, credential: CredentialParams) -> None:
        self._credentials.append(credential)

    async def _lookup_in_stores(self, correlation_id: str | None, credential: CredentialParams) -> CredentialParams | None:
        key = credential.get_store_key()
        stores = self._references.get_optional(CREDENTIAL_STORE_LOCATOR) if self._references else []
        if not stores:
            raise ConfigError(
                "NO_CREDENTIAL_STORE",
                f"Credential store wasn't found to lookup credential with key {key}",
                correlation_id=correlation_id,
            )

        for store in stores:
            found = await store.lookup(correlation_id, key)
            if found is not None:
                return found
        return None

    async def lookup(self, correlation_id: str | None) -> CredentialParams | None:
        """Return the first usable credential, or ``None`` when none is configured."""
        if not self._credentials:
            return None

        for credential in self._credentials:
            if not credential.use_credential_store():
                return credential

        for credential in self._credentials:
            found = await self._lookup_in_stores(correlation_id, credential)
            if found is not None:
                return found

        return None


__all__ = [
    "ConnectionResolver",
    "CredentialResolver",
    "DISCOVERY_LOCATOR",
    "CREDENTIAL_STORE_LOCATOR",
]
