"""Factories that create spine-mysql components by descriptor."""

from .factory import MYSQL_CONNECTION_DESCRIPTOR, DefaultMySqlFactory

__all__ = [
    "MYSQL_CONNECTION_DESCRIPTOR",
    "DefaultMySqlFactory",
]
