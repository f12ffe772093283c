"""
Structured error types for spine-mysql.

Every failure raised by the persistence layer is a :class:`MySqlError`
subclass carrying a stable ``code`` (the error *kind*) and the
``correlation_id`` of the call that produced it, so callers can branch on
``error.code`` and trace the failure through logs.

Manifesto:
    - **Typed Error Hierarchy:** Configuration, connection, schema and state
      failures are different classes
    - **Stable codes:** ``code`` strings such as ``NO_HOST`` or
      ``CONNECT_FAILED`` never change between releases
    - **Traceable:** Every error knows the correlation id of its call
    - **Error Chaining:** Driver exceptions are kept as ``cause``

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────────┐
        │                         MySqlError                            │
        │      (code, category, retryable, correlation_id, cause)       │
        ├──────────────────────────────────────────────────────────────┤
        │                                                               │
        │  ConfigError          DatabaseConnectionError   SchemaError   │
        │  (CONFIG)             (DATABASE)                (VALIDATION)  │
        │  NO_CONNECTION        CONNECT_FAILED            NO_MAP_...    │
        │  NO_HOST / NO_PORT    DISCONNECT_FAILED                       │
        │  NO_DATABASE                                                  │
        │  NO_TABLE             InvalidStateError    ReferenceNotFound  │
        │                       (INTERNAL)           (CONFIG)           │
        └──────────────────────────────────────────────────────────────┘

Guardrails:
    ❌ DON'T: Catch driver errors inside CRUD calls
    ✅ DO: Let ``pymysql`` query errors propagate to the caller

    ❌ DON'T: Retry on ``ConfigError`` or ``SchemaError``
    ✅ DO: Fix the configuration or the entity class

Tags:
    error-handling, exception-hierarchy, error-context, spine-mysql
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories used for routing and alerting."""

    DATABASE = "DATABASE"         # Connect, disconnect, pool
    VALIDATION = "VALIDATION"     # Entity contract violations
    CONFIG = "CONFIG"             # Missing or invalid settings
    INTERNAL = "INTERNAL"         # Inconsistent component state
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """Structured metadata attached to an error.

    Attributes:
        table: Table the failing operation was working on
        database: Database name, when known
        component: Name of the component that raised the error
        metadata: Additional key-value pairs
    """

    table: str | None = None
    database: str | None = None
    component: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["table", "database", "component"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class MySqlError(Exception):
    """
    Base exception for all spine-mysql errors.

    Subclasses set ``default_category`` and ``default_retryable``; the
    ``code`` is supplied per raise site.

    Examples:
        >>> error = ConfigError("NO_HOST", "Connection host is not set", correlation_id="123")
        >>> error.code
        'NO_HOST'
        >>> error.to_dict()["category"]
        'CONFIG'
    """

    default_category: ErrorCategory = ErrorCategory.UNKNOWN
    default_retryable: bool = False

    def __init__(
        self,
        code: str,
        message: str,
        *,
        correlation_id: str | None = None,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.correlation_id = correlation_id
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_cause(self, cause: BaseException) -> MySqlError:
        """Chain an underlying exception (fluent API)."""
        self.cause = cause
        self.__cause__ = cause
        return self

    def with_context(self, **kwargs: Any) -> MySqlError:
        """Add context to this error (fluent API).

        Usage:
            raise ConfigError("NO_TABLE", "Table name is not defined").with_context(
                component="DummyMySqlPersistence"
            )
        """
        for key, value in kwargs.items():
            if key != "metadata" and hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        if self.correlation_id is not None:
            result["correlation_id"] = self.correlation_id

        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict

        if self.cause is not None:
            result["cause"] = str(self.cause)

        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.code!r}, {self.message!r})"


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(MySqlError):
    """
    Configuration error.

    Never retryable - configuration must be fixed. Raised for a missing
    connection, host, port, database or table name.
    """

    default_category = ErrorCategory.CONFIG
    default_retryable = False


class ReferenceNotFoundError(ConfigError):
    """A required component reference could not be located."""

    def __init__(self, locator: Any, *, correlation_id: str | None = None):
        self.locator = locator
        super().__init__(
            "REF_NOT_FOUND",
            f"Failed to obtain reference to {locator}",
            correlation_id=correlation_id,
        )


# =============================================================================
# CONNECTION ERRORS
# =============================================================================


class DatabaseConnectionError(MySqlError):
    """Failure to connect to or disconnect from the database.

    Always wraps the driver exception as ``cause``.
    """

    default_category = ErrorCategory.DATABASE
    default_retryable = False


# =============================================================================
# ENTITY / STATE ERRORS
# =============================================================================


class SchemaError(MySqlError):
    """The entity type does not implement the map-conversion contract.

    This is an integration bug, not a runtime condition.
    """

    default_category = ErrorCategory.VALIDATION
    default_retryable = False


class InvalidStateError(MySqlError):
    """A component is in a state that should be impossible."""

    default_category = ErrorCategory.INTERNAL
    default_retryable = False


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "MySqlError",
    "ConfigError",
    "ReferenceNotFoundError",
    "DatabaseConnectionError",
    "SchemaError",
    "InvalidStateError",
]
