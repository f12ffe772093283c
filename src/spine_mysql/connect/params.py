"""Connection and credential fragments.

A fragment is an immutable :class:`~spine_mysql.config.ConfigParams`
holding the settings of one endpoint (``host``, ``port``, ``database``,
``uri``, ``discovery_key``, plus free-form options such as ``ssl``) or of
one credential (``username``, ``password``, ``store_key``).

Fragments are built from configuration sections::

    connection.host=localhost        -> one ConnectionParams
    connections.node1.host=db1       -> many ConnectionParams
    connections.node2.host=db2
    credential.username=app          -> one CredentialParams
"""

from __future__ import annotations

from typing import Any, NoReturn

from spine_mysql.config import ConfigParams


class _FrozenParams(ConfigParams):
    """ConfigParams that cannot be modified after construction."""

    def _readonly(self, *args: Any, **kwargs: Any) -> NoReturn:
        raise TypeError(f"{type(self).__name__} is immutable")

    __setitem__ = _readonly
    __delitem__ = _readonly
    update = _readonly
    pop = _readonly
    popitem = _readonly
    clear = _readonly
    setdefault = _readonly
    add_section = _readonly

    def __hash__(self) -> int:  # type: ignore[override]
        return hash(tuple(self.items()))

    def __ior__(self, other: Any) -> NoReturn:  # type: ignore[override]
        self._readonly()

    @classmethod
    def _many_from_config(cls, config: ConfigParams, single: str, plural: str) -> list[Any]:
        result = []

        section = config.get_section(single)
        if len(section) > 0:
            result.append(cls(section))

        many = config.get_section(plural)
        for name in many.get_section_names():
            result.append(cls(many.get_section(name)))

        return result


class ConnectionParams(_FrozenParams):
    """Settings of one database endpoint."""

    def get_host(self) -> str | None:
        return self.get_as_nullable_string("host") or self.get_as_nullable_string("ip")

    def get_port(self) -> int:
        return self.get_as_integer_with_default("port", 0)

    def get_port_with_default(self, default: int) -> int:
        return self.get_as_integer_with_default("port", default)

    def get_uri(self) -> str | None:
        return self.get_as_nullable_string("uri")

    def get_database(self) -> str | None:
        return self.get_as_nullable_string("database")

    def get_discovery_key(self) -> str | None:
        return self.get_as_nullable_string("discovery_key")

    def use_discovery(self) -> bool:
        return self.get_discovery_key() is not None

    @classmethod
    def many_from_config(cls, config: ConfigParams) -> list[ConnectionParams]:
        return cls._many_from_config(config, "connection", "connections")


class CredentialParams(_FrozenParams):
    """A username/password pair, or a key into a credential store."""

    def get_username(self) -> str | None:
        return self.get_as_nullable_string("username") or self.get_as_nullable_string("user")

    def get_password(self) -> str | None:
        return self.get_as_nullable_string("password") or self.get_as_nullable_string("pass")

    def get_store_key(self) -> str | None:
        return self.get_as_nullable_string("store_key")

    def use_credential_store(self) -> bool:
        return self.get_store_key() is not None

    @classmethod
    def many_from_config(cls, config: ConfigParams) -> list[CredentialParams]:
        return cls._many_from_config(config, "credential", "credentials")

    def __repr__(self) -> str:
        redacted = {key: ("[REDACTED]" if key in ("password", "pass") else value) for key, value in self.items()}
        return f"CredentialParams({redacted!r})"


__all__ = [
    "ConnectionParams",
    "CredentialParams",
]
