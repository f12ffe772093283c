"""MySQL persistence for entities with a unique ``id``.

Adds get/set/update/delete by id on top of :class:`MySqlPersistence`.
Rows are written and re-read so callers always get what the server
stored, including column defaults.

Example:
    >>> class DummyMySqlPersistence(IdentifiableMySqlPersistence[Dummy, str]):
    ...     def __init__(self):
    ...         super().__init__("dummies")
    ...
    >>> created = await persistence.create(None, Dummy(key="A", content="x"))
    >>> created.id is not None
    True
"""

from __future__ import annotations

import copy
from collections.abc import Mapping, Sequence
from typing import Any, Generic, TypeVar

from spine_mysql.keys import UlidGenerator
from spine_mysql.logging import get_logger
from spine_mysql.protocols import IdGenerator

from .mysql_persistence import MySqlPersistence, T

logger = get_logger(__name__)

K = TypeVar("K")


def _get_id(item: Any) -> Any:
    if isinstance(item, Mapping):
        return item.get("id")
    return getattr(item, "id", None)


class IdentifiableMySqlPersistence(MySqlPersistence[T], Generic[T, K]):
    """Id-keyed CRUD over one MySQL table.

    Attributes:
        auto_generate_id: Assign ids to new entities that have none.
        id_generator: Source of new ids; anything with ``next_id()``.
    """

    def __init__(
        self,
        table_name: str | None = None,
        schema_name: str | None = None,
        id_generator: IdGenerator | None = None,
    ):
        super().__init__(table_name, schema_name)
        self.auto_generate_id = True
        self.id_generator: IdGenerator = id_generator or UlidGenerator()

    def convert_from_public_partial(
        self, value: Mapping[str, Any], correlation_id: str | None = None
    ) -> dict[str, Any] | None:
        return self.convert_from_public(value, correlation_id=correlation_id)

    def _with_generated_id(self, item: T) -> T:
        """Return a copy of ``item`` with a new id, or ``item`` itself."""
        if _get_id(item) is not None or not self.auto_generate_id:
            return item

        if isinstance(item, Mapping):
            new_item: Any = dict(item)
            new_item["id"] = self.id_generator.next_id()
            return new_item

        clone = getattr(item, "clone", None)
        new_item = clone() if callable(clone) else copy.copy(item)
        new_item.id = self.id_generator.next_id()
        return new_item

    async def _read_by_id(self, correlation_id: str | None, id: K) -> dict[str, Any] | None:
        rows = await self._query(
            correlation_id,
            f"SELECT * FROM {self.quoted_table_name()} WHERE id=%s",
            [id],
        )
        return rows[0] if rows else None

    async def get_list_by_ids(self, correlation_id: str | None, ids: Sequence[K]) -> list[T]:
        if not ids:
            return []

        params = self.generate_parameters(ids)
        query = f"SELECT * FROM {self.quoted_table_name()} WHERE id IN({params})"

        rows = await self._query(correlation_id, query, list(ids))

        logger.debug("mysql.retrieved", correlation_id=correlation_id, count=len(rows), table=self._table_name)

        return [self.convert_to_public(row, correlation_id=correlation_id) for row in rows]

    async def get_one_by_id(self, correlation_id: str | None, id: K) -> T | None:
        row = await self._read_by_id(correlation_id, id)

        if row is None:
            logger.debug("mysql.not_found", correlation_id=correlation_id, table=self._table_name, id=id)
        else:
            logger.debug("mysql.retrieved_by_id", correlation_id=correlation_id, table=self._table_name, id=id)

        return self.convert_to_public(row, correlation_id=correlation_id)

    async def create(self, correlation_id: str | None, item: T | None) -> T | None:
        """Insert an entity; a copy gets a generated id when it has none."""
        if item is None:
            return None

        return await super().create(correlation_id, self._with_generated_id(item))

    async def set(self, correlation_id: str | None, item: T | None) -> T | None:
        """Insert or update an entity and return the stored row."""
        if item is None:
            return None

        new_item = self._with_generated_id(item)

        row = self.convert_from_public(new_item, correlation_id=correlation_id)
        columns = self.generate_columns(row)
        params = self.generate_parameters(row)
        set_params = self.generate_set_parameters(row)
        values = self.generate_values(row)

        query = (
            f"INSERT INTO {self.quoted_table_name()} ({columns}) VALUES ({params})"
            f" ON DUPLICATE KEY UPDATE {set_params}"
        )
        await self._execute(correlation_id, query, values + values)

        id = _get_id(new_item)
        stored = await self._read_by_id(correlation_id, id)

        logger.debug("mysql.set", correlation_id=correlation_id, table=self._table_name, id=id)

        return self.convert_to_public(stored, correlation_id=correlation_id)

    async def update(self, correlation_id: str | None, item: T | None) -> T | None:
        """Update an existing entity; ``None`` when it has no id or no row matched."""
        if item is None:
            return None
        id = _get_id(item)
        if id is None:
            return None

        row = self.convert_from_public(item, correlation_id=correlation_id)
        params = self.generate_set_parameters(row)
        values = self.generate_values(row)
        values.append(id)

        query = f"UPDATE {self.quoted_table_name()} SET {params} WHERE id=%s"
        await self._execute(correlation_id, query, values)

        stored = await self._read_by_id(correlation_id, id)

        logger.debug("mysql.updated", correlation_id=correlation_id, table=self._table_name, id=id)

        return self.convert_to_public(stored, correlation_id=correlation_id)

    async def update_partially(self, correlation_id: str | None, id: K | None, data: Mapping[str, Any] | None) -> T | None:
        """Update only the given columns of an entity."""
        if data is None or id is None:
            return None

        row = self.convert_from_public_partial(data, correlation_id=correlation_id)
        params = self.generate_set_parameters(row)
        values = self.generate_values(row)
        values.append(id)

        query = f"UPDATE {self.quoted_table_name()} SET {params} WHERE id=%s"
        await self._execute(correlation_id, query, values)

        stored = await self._read_by_id(correlation_id, id)

        logger.debug("mysql.updated_partially", correlation_id=correlation_id, table=self._table_name, id=id)

        return self.convert_to_public(stored, correlation_id=correlation_id)

    async def delete_by_id(self, correlation_id: str | None, id: K) -> T | None:
        """Delete an entity and return it as it was before deletion."""
        row = await self._read_by_id(correlation_id, id)

        await self._execute(correlation_id, f"DELETE FROM {self.quoted_table_name()} WHERE id=%s", [id])

        logger.debug("mysql.deleted_by_id", correlation_id=correlation_id, table=self._table_name, id=id)

        return self.convert_to_public(row, correlation_id=correlation_id)

    async def delete_by_ids(self, correlation_id: str | None, ids: Sequence[K]) -> None:
        if not ids:
            return

        params = self.generate_parameters(ids)
        query = f"DELETE FROM {self.quoted_table_name()} WHERE id IN({params})"

        count = await self._execute(correlation_id, query, list(ids))

        logger.debug("mysql.deleted", correlation_id=correlation_id, count=count, table=self._table_name)


__all__ = [
    "IdentifiableMySqlPersistence",
]
