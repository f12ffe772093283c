"""Tests for the ``(id, data)`` JSON table persistence."""

from __future__ import annotations

import json

import pytest

from spine_mysql import FilterParams, IdentifiableJsonMySqlPersistence
from spine_mysql.errors import SchemaError
from tests._support.dummy import Dummy, DummyJsonMySqlPersistence


class TestEnsureTable:
    def test_default_columns(self):
        persistence = IdentifiableJsonMySqlPersistence("docs")
        persistence.ensure_table()
        assert persistence.schema_statements == [
            "CREATE TABLE IF NOT EXISTS `docs` (`id` VARCHAR(32) PRIMARY KEY, `data` JSON)",
        ]

    def test_with_schema_and_custom_types(self):
        persistence = IdentifiableJsonMySqlPersistence("docs", "app")
        persistence.ensure_table("VARCHAR(64)", "LONGTEXT")
        assert persistence.schema_statements == [
            "CREATE SCHEMA IF NOT EXISTS `app`",
            "CREATE TABLE IF NOT EXISTS `app`.`docs` (`id` VARCHAR(64) PRIMARY KEY, `data` LONGTEXT)",
        ]

    def test_dummy_schema(self):
        persistence = DummyJsonMySqlPersistence()
        persistence.define_schema()
        assert persistence.schema_statements[-1] == (
            "CREATE UNIQUE INDEX `dummies_json_json_key` ON `dummies_json` (`data_key`)"
        )
        assert len(persistence.schema_statements) == 3


class TestMapping:
    def test_from_public_wraps_document(self):
        row = DummyJsonMySqlPersistence().convert_from_public(Dummy("1", "Key 1", "Content 1"))
        assert row["id"] == "1"
        assert json.loads(row["data"]) == {"id": "1", "key": "Key 1", "content": "Content 1"}

    def test_from_public_mapping(self):
        row = IdentifiableJsonMySqlPersistence("docs").convert_from_public({"id": "1", "n": 2})
        assert row == {"id": "1", "data": '{"id": "1", "n": 2}'}

    @pytest.mark.parametrize(
        "data",
        ['{"id": "1", "key": "Key 1", "content": null}', b'{"id": "1", "key": "Key 1", "content": null}'],
    )
    def test_to_public_decodes_document(self, data):
        item = DummyJsonMySqlPersistence().convert_to_public({"id": "1", "data": data})
        assert item == Dummy("1", "Key 1", None)

    def test_to_public_accepts_decoded_document(self):
        item = DummyJsonMySqlPersistence().convert_to_public({"id": "1", "data": {"id": "1", "key": "k"}})
        assert item == Dummy("1", "k", None)

    @pytest.mark.parametrize(
        "item",
        [Dummy("1", "Key 1", "Content 1"), Dummy("2", "K\u00e9y \"2\"", None)],
    )
    def test_document_round_trip(self, item):
        persistence = DummyJsonMySqlPersistence()

        row = persistence.convert_from_public(item)
        restored = persistence.convert_to_public({"id": row["id"], "data": row["data"].encode("utf-8")})

        assert restored == item
        assert restored is not item

    def test_from_public_without_contract(self):
        with pytest.raises(SchemaError) as exc_info:
            DummyJsonMySqlPersistence().convert_from_public(object(), correlation_id="cid-2")
        assert exc_info.value.code == "NO_MAP_CONVERSION"
        assert exc_info.value.correlation_id == "cid-2"


class TestCrud:
    async def test_create(self, opened_json_persistence, fake_pool):
        created = await opened_json_persistence.create(None, Dummy(None, "Key 1", "Content 1"))

        sql, params = fake_pool.statements[0]
        assert sql == "INSERT INTO `dummies_json` (`id`,`data`) VALUES (%s,%s)"
        assert params[0] == "dummy1"
        assert json.loads(params[1]) == {"id": "dummy1", "key": "Key 1", "content": "Content 1"}
        assert created.id == "dummy1"

    async def test_update_partially_merges_document(self, opened_json_persistence, fake_pool):
        fake_pool.script("SELECT *", [{"id": "1", "data": '{"id": "1", "key": "Key 1", "content": "Partial"}'}])

        updated = await opened_json_persistence.update_partially(None, "1", {"content": "Partial"})

        assert fake_pool.statements == [
            (
                "UPDATE `dummies_json` SET `data`=JSON_MERGE_PATCH(`data`,%s) WHERE id=%s",
                ['{"content": "Partial"}', "1"],
            ),
            ("SELECT * FROM `dummies_json` WHERE id=%s", ["1"]),
        ]
        assert updated == Dummy("1", "Key 1", "Partial")

    async def test_update_partially_without_data(self, opened_json_persistence, fake_pool):
        assert await opened_json_persistence.update_partially(None, "1", None) is None
        assert fake_pool.statements == []

    async def test_filter_on_generated_column(self, opened_json_persistence, fake_pool):
        fake_pool.script("SELECT COUNT(*)", [{"count": 1}])

        count = await opened_json_persistence.get_count(None, FilterParams.from_value({"key": "Key 1"}))

        assert count == 1
        assert fake_pool.sql == ["SELECT COUNT(*) AS count FROM `dummies_json` WHERE `data_key`='Key 1'"]
