"""spine-mysql -- Asynchronous MySQL persistence components.

Manifesto:
    Services that keep their entities in MySQL repeat the same plumbing:
    resolve connection settings, hold one pool, create the table on first
    start, and write the same SELECT/INSERT/UPDATE/DELETE for every entity.
    ``spine_mysql`` does that plumbing once, driven by each entity's
    ``to_json()`` / ``from_json()`` map conversion.

Architecture::

    Layer 1 -- Foundations
        errors.py          Typed error hierarchy (MySqlError and subclasses)
        logging.py         structlog configuration + get_logger
        config.py          ConfigParams (dotted-key configuration)
        settings.py        MySqlSettings (MYSQL_* environment variables)
        references.py      Descriptor, References, DependencyResolver
        protocols.py       Structural contracts
        data.py            PagingParams, DataPage, FilterParams
        keys.py            ULID / sequence id generators

    Layer 2 -- Connection
        connect/           Connection fragments, resolvers, in-memory
                           discovery/credential store, MySqlConnection

    Layer 3 -- Persistence
        persistence/       MySqlPersistence, IdentifiableMySqlPersistence,
                           IdentifiableJsonMySqlPersistence

    Layer 4 -- Wiring
        build/             DefaultMySqlFactory

Examples:
    >>> from spine_mysql import ConfigParams, IdentifiableMySqlPersistence
    >>> persistence = DummyMySqlPersistence()
    >>> persistence.configure(MySqlSettings().to_config())
    >>> await persistence.open(None)

Tags:
    spine-mysql, persistence, mysql, asyncio
"""

from spine_mysql.build import MYSQL_CONNECTION_DESCRIPTOR, DefaultMySqlFactory
from spine_mysql.config import ConfigParams
from spine_mysql.connect import (
    ConnectionParams,
    CredentialParams,
    MemoryCredentialStore,
    MemoryDiscovery,
    MySqlConnection,
    MySqlConnectionResolver,
)
from spine_mysql.data import DataPage, FilterParams, PagingParams
from spine_mysql.errors import (
    ConfigError,
    DatabaseConnectionError,
    ErrorCategory,
    InvalidStateError,
    MySqlError,
    ReferenceNotFoundError,
    SchemaError,
)
from spine_mysql.keys import SequenceIdGenerator, UlidGenerator, generate_ulid
from spine_mysql.logging import configure_logging, get_logger
from spine_mysql.persistence import (
    ConnectionOwnership,
    IdentifiableJsonMySqlPersistence,
    IdentifiableMySqlPersistence,
    MySqlPersistence,
)
from spine_mysql.references import DependencyResolver, Descriptor, References
from spine_mysql.settings import MySqlSettings

__version__ = "0.1.0"

__all__ = [
    # Config
    "ConfigParams",
    "MySqlSettings",
    # References
    "Descriptor",
    "References",
    "DependencyResolver",
    # Errors
    "ErrorCategory",
    "MySqlError",
    "ConfigError",
    "ReferenceNotFoundError",
    "DatabaseConnectionError",
    "SchemaError",
    "InvalidStateError",
    # Logging
    "configure_logging",
    "get_logger",
    # Data
    "PagingParams",
    "DataPage",
    "FilterParams",
    # Keys
    "generate_ulid",
    "UlidGenerator",
    "SequenceIdGenerator",
    # Connection
    "ConnectionParams",
    "CredentialParams",
    "MemoryDiscovery",
    "MemoryCredentialStore",
    "MySqlConnectionResolver",
    "MySqlConnection",
    # Persistence
    "ConnectionOwnership",
    "MySqlPersistence",
    "IdentifiableMySqlPersistence",
    "IdentifiableJsonMySqlPersistence",
    # Build
    "MYSQL_CONNECTION_DESCRIPTOR",
    "DefaultMySqlFactory",
]
