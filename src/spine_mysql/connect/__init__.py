"""Connection resolution and the shared MySQL connection."""

from .memory import MemoryCredentialStore, MemoryDiscovery
from .mysql_connection import MySqlConnection
from .mysql_connection_resolver import MySqlConnectionResolver
from .params import ConnectionParams, CredentialParams
from .resolvers import (
    CREDENTIAL_STORE_LOCATOR,
    DISCOVERY_LOCATOR,
    ConnectionResolver,
    CredentialResolver,
)

__all__ = [
    "ConnectionParams",
    "CredentialParams",
    "ConnectionResolver",
    "CredentialResolver",
    "DISCOVERY_LOCATOR",
    "CREDENTIAL_STORE_LOCATOR",
    "MemoryDiscovery",
    "MemoryCredentialStore",
    "MySqlConnectionResolver",
    "MySqlConnection",
]
