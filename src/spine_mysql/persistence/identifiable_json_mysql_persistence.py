"""MySQL persistence that stores each entity as one JSON document.

Table layout::

    `id`   VARCHAR(32) PRIMARY KEY
    `data` JSON                      -- full public shape of the entity

Concrete persistences may add generated columns over ``data`` to index
fields, e.g. ``data_key VARCHAR(50) AS (JSON_UNQUOTE(data->"$.key"))``.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from spine_mysql.errors import SchemaError
from spine_mysql.logging import get_logger

from .identifiable_mysql_persistence import IdentifiableMySqlPersistence, K
from .mysql_persistence import T

logger = get_logger(__name__)


class IdentifiableJsonMySqlPersistence(IdentifiableMySqlPersistence[T, K]):
    """Id-keyed persistence over an ``(id, data)`` JSON table."""

    def ensure_table(self, id_type: str = "VARCHAR(32)", data_type: str = "JSON") -> None:
        """Declare the ``(id, data)`` table, and its schema when one is set."""
        if self._schema_name is not None:
            self.ensure_schema(f"CREATE SCHEMA IF NOT EXISTS {self.quote_identifier(self._schema_name)}")

        self.ensure_schema(
            f"CREATE TABLE IF NOT EXISTS {self.quoted_table_name()}"
            f" (`id` {id_type} PRIMARY KEY, `data` {data_type})"
        )

    def convert_to_public(self, value: Mapping[str, Any] | None, correlation_id: str | None = None) -> Any:
        if value is None:
            return None

        data = value["data"]
        if isinstance(data, (bytes, bytearray)):
            data = data.decode("utf-8")
        if isinstance(data, str):
            data = json.loads(data)

        return super().convert_to_public(data, correlation_id=correlation_id)

    def convert_from_public(self, value: Any, correlation_id: str | None = None) -> dict[str, Any] | None:
        if value is None:
            return None

        if isinstance(value, Mapping):
            return {"id": value.get("id"), "data": json.dumps(dict(value))}

        to_json = getattr(value, "to_json", None)
        if not callable(to_json):
            raise SchemaError(
                "NO_MAP_CONVERSION",
                f"Data class {type(value).__name__} must implement to_json method or be a mapping",
                correlation_id=correlation_id,
            )
        return {"id": getattr(value, "id", None), "data": json.dumps(to_json())}

    async def update_partially(self, correlation_id: str | None, id: K | None, data: Mapping[str, Any] | None) -> T | None:
        """Merge ``data`` into the stored document with ``JSON_MERGE_PATCH``."""
        if data is None or id is None:
            return None

        query = f"UPDATE {self.quoted_table_name()} SET `data`=JSON_MERGE_PATCH(`data`,%s) WHERE id=%s"
        await self._execute(correlation_id, query, [json.dumps(dict(data)), id])

        stored = await self._read_by_id(correlation_id, id)

        logger.debug("mysql.updated_partially", correlation_id=correlation_id, table=self._table_name, id=id)

        return self.convert_to_public(stored, correlation_id=correlation_id)


__all__ = [
    "IdentifiableJsonMySqlPersistence",
]
