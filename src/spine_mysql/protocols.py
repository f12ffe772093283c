"""
Canonical protocol definitions for spine-mysql.

Structural contracts shared by the connection and persistence
components. Anything matching the shape satisfies the protocol, so tests
and applications can plug in their own discovery services, credential
stores, entity classes and id generators without inheriting from
spine-mysql classes.

Architecture:
    ::

        protocols.py
        ├── Configurable       : configure(config)
        ├── Referenceable      : set_references(references)
        ├── Openable           : async open/close, is_open
        ├── Cleanable          : async clear
        ├── DiscoveryService   : connection fragments by key
        ├── CredentialStore    : credential fragment by key
        ├── JsonConvertible    : to_json()/from_json() map conversion
        ├── Cloneable          : clone()
        └── IdGenerator        : next_id()

Guardrails:
    ❌ DON'T: Add implementation logic to protocol classes
    ✅ DO: Keep protocols pure contracts

Tags:
    protocol, contracts, spine-mysql
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from spine_mysql.config import ConfigParams
    from spine_mysql.connect.params import ConnectionParams, CredentialParams
    from spine_mysql.references import References


# ---------------------------------------------------------------------------
# Component lifecycle
# ---------------------------------------------------------------------------


@runtime_checkable
class Configurable(Protocol):
    def configure(self, config: ConfigParams) -> None: ...


@runtime_checkable
class Referenceable(Protocol):
    def set_references(self, references: References) -> None: ...


@runtime_checkable
class Unreferenceable(Protocol):
    def unset_references(self) -> None: ...


@runtime_checkable
class Openable(Protocol):
    def is_open(self) -> bool: ...

    async def open(self, correlation_id: str | None) -> None: ...

    async def close(self, correlation_id: str | None) -> None: ...


@runtime_checkable
class Cleanable(Protocol):
    async def clear(self, correlation_id: str | None) -> None: ...


# ---------------------------------------------------------------------------
# Lookup collaborators
# ---------------------------------------------------------------------------


@runtime_checkable
class DiscoveryService(Protocol):
    """Resolves connection fragments registered under a discovery key."""

    async def resolve_one(self, correlation_id: str | None, key: str) -> ConnectionParams | None: ...

    async def resolve_all(self, correlation_id: str | None, key: str) -> list[ConnectionParams]: ...


@runtime_checkable
class CredentialStore(Protocol):
    """Looks up a credential fragment by store key."""

    async def lookup(self, correlation_id: str | None, key: str) -> CredentialParams | None: ...


# ---------------------------------------------------------------------------
# Entity contracts
# ---------------------------------------------------------------------------


@runtime_checkable
class JsonConvertible(Protocol):
    """Canonical map conversion every persisted entity must implement."""

    def to_json(self) -> dict[str, Any]: ...

    def from_json(self, value: dict[str, Any]) -> None: ...


@runtime_checkable
class Cloneable(Protocol):
    def clone(self) -> Any: ...


@runtime_checkable
class IdGenerator(Protocol):
    """Produces unique, string-representable ids for new entities."""

    def next_id(self) -> Any: ...


__all__ = [
    "Configurable",
    "Referenceable",
    "Unreferenceable",
    "Openable",
    "Cleanable",
    "DiscoveryService",
    "CredentialStore",
    "JsonConvertible",
    "Cloneable",
    "IdGenerator",
]
