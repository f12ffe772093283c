"""Component references and dependency lookup.

Components find their collaborators (loggers aside) through a
:class:`References` registry instead of importing each other. A locator is
either a plain name or a :class:`Descriptor` such as
``pip-services:connection:mysql:default:1.0``; descriptors support ``*``
wildcards so a persistence can ask for "any MySQL connection".

:class:`DependencyResolver` maps logical dependency names to locators
from ``dependencies.<name>`` config keys::

    resolver = DependencyResolver({"dependencies.connection": "*:connection:mysql:*:1.0"})
    resolver.set_references(references)
    connection = resolver.get_one_optional("connection")

Tags:
    references, dependency-lookup, descriptor, registry, spine-mysql
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from spine_mysql.config import ConfigParams
from spine_mysql.errors import ConfigError, ReferenceNotFoundError


@dataclass(frozen=True)
class Descriptor:
    """Five-part component locator; ``*`` (or ``None``) matches anything."""

    group: str | None
    type: str | None
    kind: str | None
    name: str | None
    version: str | None

    @staticmethod
    def _field_matches(mine: str | None, other: str | None) -> bool:
        if mine in (None, "*") or other in (None, "*"):
            return True
        return mine == other

    def match(self, other: Any) -> bool:
        if not isinstance(other, Descriptor):
            return False
        return (
            self._field_matches(self.group, other.group)
            and self._field_matches(self.type, other.type)
            and self._field_matches(self.kind, other.kind)
            and self._field_matches(self.name, other.name)
            and self._field_matches(self.version, other.version)
        )

    @classmethod
    def from_string(cls, value: str | None, correlation_id: str | None = None) -> Descriptor | None:
        """Parse ``group:type:kind:name:version``."""
        if not value:
            return None
        tokens = value.split(":")
        if len(tokens) != 5:
            raise ConfigError(
                "BAD_DESCRIPTOR",
                f"Descriptor {value!r} must have 5 parts separated by ':'",
                correlation_id=correlation_id,
            )
        return cls(*(token.strip() for token in tokens))

    def __str__(self) -> str:
        return ":".join(part or "*" for part in (self.group, self.type, self.kind, self.name, self.version))


def locator_matches(wanted: Any, registered: Any) -> bool:
    if isinstance(wanted, Descriptor):
        return wanted.match(registered)
    return wanted == registered


class References:
    """Ordered registry of ``(locator, component)`` pairs."""

    def __init__(self, pairs: list[tuple[Any, Any]] | None = None):
        self._references: list[tuple[Any, Any]] = []
        for locator, component in pairs or []:
            self.put(locator, component)

    @classmethod
    def from_tuples(cls, *tuples: Any) -> References:
        """Create from alternating ``locator, component`` arguments."""
        return cls(list(zip(tuples[0::2], tuples[1::2], strict=True)))

    def put(self, locator: Any, component: Any) -> None:
        if component is None:
            raise ValueError("Component cannot be None")
        self._references.append((locator, component))

    def remove(self, locator: Any) -> Any:
        """Remove and return the most recently registered match."""
        for index in range(len(self._references) - 1, -1, -1):
            registered, component = self._references[index]
            if locator_matches(locator, registered):
                del self._references[index]
                return component
        return None

    def get_optional(self, locator: Any) -> list[Any]:
        return [component for registered, component in self._references if locator_matches(locator, registered)]

    def get_one_optional(self, locator: Any) -> Any:
        components = self.get_optional(locator)
        return components[0] if components else None

    def get_one_required(self, locator: Any) -> Any:
        component = self.get_one_optional(locator)
        if component is None:
            raise ReferenceNotFoundError(locator)
        return component

    def get_all(self) -> list[Any]:
        return [component for _, component in self._references]

    def __len__(self) -> int:
        return len(self._references)


class DependencyResolver:
    """Resolves named dependencies through locators declared in config."""

    def __init__(self, config: ConfigParams | dict | None = None, references: References | None = None):
        self._dependencies: dict[str, Any] = {}
        self._references = references
        if config is not None:
            self.configure(ConfigParams(config))

    def configure(self, config: ConfigParams) -> None:
        for name, value in config.get_section("dependencies").items():
            if value is None:
                continue
            text = str(value)
            self._dependencies[name] = Descriptor.from_string(text) if text.count(":") == 4 else text

    def put(self, name: str, locator: Any) -> None:
        self._dependencies[name] = locator

    def set_references(self, references: References) -> None:
        self._references = references

    def _locate(self, name: str) -> Any:
        return self._dependencies.get(name, name)

    def get_one_optional(self, name: str) -> Any:
        if self._references is None:
            return None
        return self._references.get_one_optional(self._locate(name))

    def get_one_required(self, name: str) -> Any:
        component = self.get_one_optional(name)
        if component is None:
            raise ReferenceNotFoundError(self._locate(name))
        return component

    def get_optional(self, name: str) -> list[Any]:
        if self._references is None:
            return []
        return self._references.get_optional(self._locate(name))


__all__ = [
    "Descriptor",
    "References",
    "DependencyResolver",
    "locator_matches",
]
