"""Component factory for MySQL connections.

Manifesto:
    Containers should not hard-code connection classes. The factory maps
    descriptors to component classes so a shared ``MySqlConnection`` can be
    created from a locator alone.

Features:
    - ``DefaultMySqlFactory`` with ``pip-services:connection:mysql:*:1.0``
      pre-registered
    - ``register()`` for custom components
    - ``create()`` returns a new, unconfigured instance

Tags:
    spine-mysql, factory, registry, descriptor
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from spine_mysql.connect import MySqlConnection
from spine_mysql.errors import ConfigError
from spine_mysql.references import Descriptor, locator_matches

MYSQL_CONNECTION_DESCRIPTOR = Descriptor("pip-services", "connection", "mysql", "*", "1.0")


class DefaultMySqlFactory:
    """
    Creates MySQL components by their descriptors.

    Pre-registered components:
    - ``pip-services:connection:mysql:*:1.0``: :class:`MySqlConnection`
    """

    def __init__(self):
        self._registrations: list[tuple[Descriptor, Callable[[], Any]]] = []
        self._register_defaults()

    def _register_defaults(self) -> None:
        self.register(MYSQL_CONNECTION_DESCRIPTOR, MySqlConnection)

    def register(self, locator: Descriptor, factory: Callable[[], Any]) -> None:
        """Register a component factory under a descriptor."""
        self._registrations.append((locator, factory))

    def _find(self, locator: Any) -> tuple[Descriptor, Callable[[], Any]] | None:
        for registration in self._registrations:
            if locator_matches(locator, registration[0]):
                return registration
        return None

    def can_create(self, locator: Any) -> Descriptor | None:
        """Return the registered descriptor matching ``locator``, or ``None``."""
        registration = self._find(locator)
        return registration[0] if registration else None

    def create(self, locator: Any) -> Any:
        """Create a component for ``locator``.

        Raises:
            ConfigError: ``UNKNOWN_COMPONENT`` when nothing is registered for it.
        """
        registration = self._find(locator)
        if registration is None:
            raise ConfigError("UNKNOWN_COMPONENT", f"Cannot create component {locator}")
        return registration[1]()

    def list_components(self) -> list[str]:
        return [str(registered) for registered, _ in self._registrations]


__all__ = [
    "MYSQL_CONNECTION_DESCRIPTOR",
    "DefaultMySqlFactory",
]
