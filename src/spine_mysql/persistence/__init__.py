"""Generic MySQL persistence components."""

from .identifiable_json_mysql_persistence import IdentifiableJsonMySqlPersistence
from .identifiable_mysql_persistence import IdentifiableMySqlPersistence
from .mysql_persistence import ConnectionOwnership, MySqlPersistence

__all__ = [
    "ConnectionOwnership",
    "MySqlPersistence",
    "IdentifiableMySqlPersistence",
    "IdentifiableJsonMySqlPersistence",
]
