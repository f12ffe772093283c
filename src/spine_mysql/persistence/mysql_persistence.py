"""
Generic MySQL persistence - one table, generated SQL, lazy schema bootstrap.

Manifesto:
    Entity stores should not hand-write the same SELECT/INSERT/DELETE for
    every table. ``MySqlPersistence`` builds those statements from the row
    shape an entity produces through its ``to_json()`` / ``from_json()``
    pair, and leaves filter translation to the concrete persistence.

    - **One table:** table and schema are fixed at construction or by config
    - **Lazy schema:** DDL declared in ``define_schema()`` runs only when
      the table does not exist yet
    - **Shared pool:** the connection comes from references (SHARED) or is
      created privately (OWNED); only OWNED connections are closed here

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────────┐
        │                    MySqlPersistence[T]                       │
        ├──────────────────────────────────────────────────────────────┤
        │ configure(config)        table / schema / max_page_size      │
        │ set_references(refs)     connection → SHARED or OWNED        │
        │ open(cid)                define_schema() → create_schema()   │
        │ close(cid) / clear(cid)                                      │
        ├──────────────────────────────────────────────────────────────┤
        │ get_page_by_filter   get_count_by_filter   get_list_by_filter│
        │ get_one_random       create                delete_by_filter  │
        └──────────────────────────────────────────────────────────────┘
                              │ %s parameters
                              ▼
                     MySqlConnection (aiomysql pool)

    State machine::

        Closed ──open(), bootstrap ok──► Open ──close()──► Closed
        Open ──open()──► Open                    (no-op)
        Closed ──open(), bootstrap fails──► Closed

Examples:
    >>> class DummyMySqlPersistence(MySqlPersistence[Dummy]):
    ...     def __init__(self):
    ...         super().__init__("dummies")
    ...
    ...     def define_schema(self):
    ...         self.clear_schema()
    ...         self.ensure_schema(
    ...             "CREATE TABLE `dummies` (`id` VARCHAR(32) PRIMARY KEY, `key` VARCHAR(50))"
    ...         )
    ...
    ...     async def get_page_by_key(self, correlation_id, key, paging):
    ...         return await self.get_page_by_filter(correlation_id, f"`key`='{key}'", paging, None, None)

Guardrails:
    ❌ DON'T: Build filters from untrusted input
    ✅ DO: Escape or validate values before embedding them in filter text

    ❌ DON'T: Close a SHARED connection from a persistence
    ✅ DO: Let the owner of the shared connection close it

Tags:
    persistence, mysql, crud, schema-bootstrap, paging
"""

from __future__ import annotations

import random
import typing
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any, Generic, TypeVar

import aiomysql

from spine_mysql.config import ConfigParams
from spine_mysql.connect import MySqlConnection
from spine_mysql.data import DataPage, PagingParams
from spine_mysql.errors import ConfigError, DatabaseConnectionError, InvalidStateError, SchemaError
from spine_mysql.logging import get_logger
from spine_mysql.references import DependencyResolver, References

logger = get_logger(__name__)

T = TypeVar("T")

_DEFAULT_CONFIG = ConfigParams.from_tuples(
    "table", None,
    "schema", None,
    "dependencies.connection", "*:connection:mysql:*:1.0",
    "options.max_pool_size", 2,
    "options.keep_alive", 1,
    "options.connect_timeout", 5000,
    "options.auto_reconnect", True,
    "options.max_page_size", 100,
    "options.debug", True,
)


class ConnectionOwnership(str, Enum):
    """Who closes the connection a persistence uses."""

    OWNED = "owned"  # created by the persistence, closed by it
    SHARED = "shared"  # supplied through references, never closed by it


class MySqlPersistence(Generic[T]):
    """Base class for MySQL persistence components.

    The entity type is taken from the generic parameter of a subclass
    (``class DummyPersistence(MySqlPersistence[Dummy])``) or from an
    explicit ``item_type`` class attribute. Entities implement
    ``to_json() -> dict`` and ``from_json(dict)``; with no entity type rows
    are returned as plain dicts.

    Configuration:
        collection / table:      table name
        schema:                  schema (database) name
        connection(s).*:         see MySqlConnection
        credential(s).*:         see MySqlConnection
        options.max_page_size:   maximum page size (default 100)
        dependencies.connection: locator of a shared MySqlConnection
    """

    item_type: type | None = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "item_type" in cls.__dict__:
            return
        for base in getattr(cls, "__orig_bases__", ()):
            origin = typing.get_origin(base)
            if isinstance(origin, type) and issubclass(origin, MySqlPersistence):
                args = typing.get_args(base)
                if args and isinstance(args[0], type):
                    cls.item_type = args[0]
                    return

    def __init__(self, table_name: str | None = None, schema_name: str | None = None):
        self._config: ConfigParams | None = None
        self._references: References | None = None
        self._opened = False
        self._ownership = ConnectionOwnership.OWNED
        self._schema_statements: list[str] = []

        self._dependency_resolver = DependencyResolver(_DEFAULT_CONFIG)
        self._connection: MySqlConnection | None = None
        self._client: aiomysql.Pool | None = None
        self._database_name: str | None = None
        self._table_name = table_name
        self._schema_name = schema_name
        self._max_page_size = 100

    # -- Configuration -------------------------------------------------------

    def configure(self, config: ConfigParams) -> None:
        config = config.set_defaults(_DEFAULT_CONFIG)
        self._config = config

        self._dependency_resolver.configure(config)

        self._table_name = config.get_as_nullable_string("collection") or self._table_name
        self._table_name = config.get_as_nullable_string("table") or self._table_name
        self._schema_name = config.get_as_nullable_string("schema") or self._schema_name
        self._max_page_size = config.get_as_integer_with_default("options.max_page_size", self._max_page_size)

    def set_references(self, references: References) -> None:
        self._references = references

        self._dependency_resolver.set_references(references)
        self._connection = self._dependency_resolver.get_one_optional("connection")

        if self._connection is None:
            self._connection = self._create_connection()
            self._ownership = ConnectionOwnership.OWNED
        else:
            self._ownership = ConnectionOwnership.SHARED

    def unset_references(self) -> None:
        self._connection = None

    def _create_connection(self) -> MySqlConnection:
        connection = MySqlConnection()
        if self._config is not None:
            connection.configure(self._config)
        if self._references is not None:
            connection.set_references(self._references)
        return connection

    @property
    def ownership(self) -> ConnectionOwnership:
        return self._ownership

    @property
    def table_name(self) -> str | None:
        return self._table_name

    @property
    def schema_name(self) -> str | None:
        return self._schema_name

    # -- Schema ---------------------------------------------------------------

    def ensure_index(self, name: str, keys: Mapping[str, int], options: Mapping[str, Any] | None = None) -> None:
        """Declare an index on the table.

        ``keys`` maps column name to direction (``1`` ascending, ``-1``
        descending). ``options`` may set ``unique`` and ``type``
        (e.g. ``"USING BTREE"``).
        """
        options = options or {}

        builder = "CREATE"
        if options.get("unique"):
            builder += " UNIQUE"

        builder += f" INDEX {self.quote_identifier(name)} ON {self.quoted_table_name()}"

        fields = []
        for key, direction in keys.items():
            field = self.quote_identifier(key)
            if direction < 1:
                field += " DESC"
            fields.append(field)

        builder += " (" + ", ".join(fields) + ")"

        if options.get("type"):
            builder += " " + str(options["type"])

        self.ensure_schema(builder)

    def ensure_schema(self, schema_statement: str) -> None:
        self._schema_statements.append(schema_statement)

    def clear_schema(self) -> None:
        self._schema_statements = []

    def define_schema(self) -> None:
        """Declare the table's DDL; override in concrete persistences."""
        self.clear_schema()

    @property
    def schema_statements(self) -> list[str]:
        return list(self._schema_statements)

    # -- Mapping --------------------------------------------------------------

    def convert_to_public(self, value: Mapping[str, Any] | None, correlation_id: str | None = None) -> Any:
        """Build an entity from a row; binary columns are decoded to ``str``."""
        if value is None:
            return None

        value = {
            key: item.decode("utf-8") if isinstance(item, (bytes, bytearray)) else item
            for key, item in value.items()
        }

        item_type = self.item_type
        if item_type is None or item_type is dict:
            return value

        item = item_type()
        from_json = getattr(item, "from_json", None)
        if not callable(from_json):
            raise SchemaError(
                "NO_MAP_CONVERSION",
                f"Data class {item_type.__name__} must implement from_json method",
                correlation_id=correlation_id,
            )
        from_json(value)
        return item

    def convert_from_public(self, value: Any, correlation_id: str | None = None) -> dict[str, Any] | None:
        """Turn an entity into a row; plain mappings pass through."""
        if value is None:
            return None
        if isinstance(value, Mapping):
            return dict(value)

        to_json = getattr(value, "to_json", None)
        if not callable(to_json):
            raise SchemaError(
                "NO_MAP_CONVERSION",
                f"Data class {type(value).__name__} must implement to_json method",
                correlation_id=correlation_id,
            )
        return to_json()

    # -- SQL fragments --------------------------------------------------------

    def quote_identifier(self, value: str | None) -> str:
        if not value:
            return ""
        if value[0] == "`":
            return value
        return f"`{value}`"

    def quoted_table_name(self) -> str:
        if self._table_name is None:
            return ""

        builder = self.quote_identifier(self._table_name)
        if self._schema_name is not None:
            builder = self.quote_identifier(self._schema_name) + "." + builder
        return builder

    def generate_columns(self, values: Mapping[str, Any] | Iterable[str]) -> str:
        return ",".join(self.quote_identifier(column) for column in values)

    def generate_parameters(self, values: Mapping[str, Any] | Iterable[Any]) -> str:
        return ",".join("%s" for _ in values)

    def generate_set_parameters(self, values: Mapping[str, Any]) -> str:
        return ",".join(f"{self.quote_identifier(column)}=%s" for column in values)

    def generate_values(self, values: Mapping[str, Any]) -> list[Any]:
        return list(values.values())

    # -- Execution ------------------------------------------------------------

    def _require_client(self, correlation_id: str | None) -> aiomysql.Pool:
        if self._client is None:
            raise InvalidStateError(
                "NO_CONNECTION",
                "MySQL persistence is not opened",
                correlation_id=correlation_id,
            )
        return self._client

    async def _query(self, correlation_id: str | None, sql: str, params: list[Any] | None = None) -> list[dict[str, Any]]:
        """Run a statement and return its rows as dicts."""
        client = self._require_client(correlation_id)
        async with client.acquire() as conn:
            async with conn.cursor(aiomysql.DictCursor) as cursor:
                await cursor.execute(sql, params)
                return list(await cursor.fetchall())

    async def _execute(self, correlation_id: str | None, sql: str, params: list[Any] | None = None) -> int:
        """Run a statement and return the affected row count."""
        client = self._require_client(correlation_id)
        async with client.acquire() as conn:
            async with conn.cursor() as cursor:
                return await cursor.execute(sql, params)

    # -- Lifecycle ------------------------------------------------------------

    def is_open(self) -> bool:
        return self._opened

    async def open(self, correlation_id: str | None) -> None:
        """Open the connection and bootstrap the table.

        Raises:
            DatabaseConnectionError: ``CONNECT_FAILED`` when the connection is not open.
        """
        if self._opened:
            return

        if self._connection is None:
            self._connection = self._create_connection()
            self._ownership = ConnectionOwnership.OWNED

        if self._ownership is ConnectionOwnership.OWNED:
            await self._connection.open(correlation_id)

        if not self._connection.is_open():
            raise DatabaseConnectionError(
                "CONNECT_FAILED",
                "MySQL connection is not opened",
                correlation_id=correlation_id,
            )

        self._client = self._connection.get_connection()
        self._database_name = self._connection.get_database_name()

        self.define_schema()

        try:
            await self.create_schema(correlation_id)
        except Exception:
            self._client = None
            if self._ownership is ConnectionOwnership.OWNED:
                try:
                    await self._connection.close(correlation_id)
                except DatabaseConnectionError as close_error:
                    logger.warning(
                        "mysql.close_after_bootstrap_failed",
                        correlation_id=correlation_id,
                        table=self._table_name,
                        error=str(close_error),
                    )
            raise

        self._opened = True

        logger.debug(
            "mysql.persistence_opened",
            correlation_id=correlation_id,
            database=self._database_name,
            table=self._table_name,
        )

    async def close(self, correlation_id: str | None) -> None:
        """Close the persistence; the connection is closed only when OWNED.

        Raises:
            InvalidStateError: ``NO_CONNECTION`` when open without a connection.
        """
        if not self._opened:
            return

        if self._connection is None:
            raise InvalidStateError(
                "NO_CONNECTION",
                "MySql connection is missing",
                correlation_id=correlation_id,
            )

        if self._ownership is ConnectionOwnership.OWNED:
            await self._connection.close(correlation_id)

        self._opened = False
        self._client = None

    async def clear(self, correlation_id: str | None) -> None:
        """Delete every row of the table.

        Raises:
            ConfigError: ``NO_TABLE`` when no table name is configured.
        """
        if self._table_name is None:
            raise ConfigError("NO_TABLE", "Table name is not defined", correlation_id=correlation_id)

        await self._execute(correlation_id, f"DELETE FROM {self.quoted_table_name()}")

    async def _table_exists(self, correlation_id: str | None) -> bool:
        if self._schema_name is not None:
            rows = await self._query(
                correlation_id,
                "SELECT TABLE_NAME FROM information_schema.TABLES WHERE TABLE_SCHEMA=%s AND TABLE_NAME=%s",
                [self._schema_name, self._table_name],
            )
        else:
            # LIKE pattern; the name must match literally
            pattern = self._table_name.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
            rows = await self._query(correlation_id, "SHOW TABLES LIKE %s", [pattern])
        return len(rows) > 0

    async def create_schema(self, correlation_id: str | None) -> None:
        """Run the declared DDL when the table does not exist yet."""
        if not self._schema_statements:
            return

        if await self._table_exists(correlation_id):
            return

        logger.debug("mysql.table_missing", correlation_id=correlation_id, table=self._table_name)

        for statement in self._schema_statements:
            try:
                await self._execute(correlation_id, statement)
            except Exception as e:
                logger.error(
                    "mysql.schema_create_failed",
                    correlation_id=correlation_id,
                    table=self._table_name,
                    error=str(e),
                )
                raise

    # -- Generic queries --------------------------------------------------------

    def _where(self, filter: str | None) -> str:
        return f" WHERE {filter}" if filter else ""

    async def get_page_by_filter(
        self,
        correlation_id: str | None,
        filter: str | None,
        paging: PagingParams | None,
        sort: str | None,
        select: str | None,
    ) -> DataPage[T]:
        """Get one page of entities.

        ``filter``, ``sort`` and ``select`` are raw SQL fragments. The
        page's ``total`` is ``None`` unless ``paging.total`` is set.
        """
        query = f"SELECT {select or '*'} FROM {self.quoted_table_name()}" + self._where(filter)

        paging = paging or PagingParams()
        skip = paging.get_skip(-1)
        take = paging.get_take(self._max_page_size)

        if sort:
            query += f" ORDER BY {sort}"

        query += f" LIMIT {take}"
        if skip >= 0:
            query += f" OFFSET {skip}"

        rows = await self._query(correlation_id, query)

        logger.debug("mysql.retrieved", correlation_id=correlation_id, count=len(rows), table=self._table_name)

        items = [self.convert_to_public(row, correlation_id=correlation_id) for row in rows]

        if paging.total:
            total = await self.get_count_by_filter(correlation_id, filter)
            return DataPage(items, total)

        return DataPage(items)

    async def get_count_by_filter(self, correlation_id: str | None, filter: str | None) -> int:
        query = f"SELECT COUNT(*) AS count FROM {self.quoted_table_name()}" + self._where(filter)

        rows = await self._query(correlation_id, query)
        count = int(rows[0]["count"]) if rows else 0

        logger.debug("mysql.counted", correlation_id=correlation_id, count=count, table=self._table_name)
        return count

    async def get_list_by_filter(
        self,
        correlation_id: str | None,
        filter: str | None,
        sort: str | None,
        select: str | None,
    ) -> list[T]:
        """Get every matching entity, without paging."""
        query = f"SELECT {select or '*'} FROM {self.quoted_table_name()}" + self._where(filter)

        if sort:
            query += f" ORDER BY {sort}"

        rows = await self._query(correlation_id, query)

        logger.debug("mysql.retrieved", correlation_id=correlation_id, count=len(rows), table=self._table_name)

        return [self.convert_to_public(row, correlation_id=correlation_id) for row in rows]

    async def get_one_random(self, correlation_id: str | None, filter: str | None) -> T | None:
        count = await self.get_count_by_filter(correlation_id, filter)
        if count == 0:
            logger.debug("mysql.random_not_found", correlation_id=correlation_id, table=self._table_name)
            return None

        offset = random.randrange(count)
        query = f"SELECT * FROM {self.quoted_table_name()}" + self._where(filter) + f" LIMIT 1 OFFSET {offset}"

        rows = await self._query(correlation_id, query)
        row = rows[0] if rows else None

        if row is None:
            logger.debug("mysql.random_not_found", correlation_id=correlation_id, table=self._table_name)
        else:
            logger.debug("mysql.random_retrieved", correlation_id=correlation_id, table=self._table_name)

        return self.convert_to_public(row, correlation_id=correlation_id)

    async def create(self, correlation_id: str | None, item: T | None) -> T | None:
        """Insert an entity and return it."""
        if item is None:
            return None

        row = self.convert_from_public(item, correlation_id=correlation_id)
        columns = self.generate_columns(row)
        params = self.generate_parameters(row)
        values = self.generate_values(row)

        query = f"INSERT INTO {self.quoted_table_name()} ({columns}) VALUES ({params})"
        await self._execute(correlation_id, query, values)

        logger.debug("mysql.created", correlation_id=correlation_id, table=self._table_name, id=row.get("id"))

        return item

    async def delete_by_filter(self, correlation_id: str | None, filter: str | None) -> None:
        query = f"DELETE FROM {self.quoted_table_name()}" + self._where(filter)

        count = await self._execute(correlation_id, query)

        logger.debug("mysql.deleted", correlation_id=correlation_id, count=count, table=self._table_name)


__all__ = [
    "ConnectionOwnership",
    "MySqlPersistence",
]
