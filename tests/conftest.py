"""
Shared pytest fixtures and configuration for spine-mysql tests.

This module provides:
- Auto-marking of unit / integration tests by location
- A FakePool standing in for aiomysql pools
- A patched ``aiomysql.create_pool`` that records its arguments
- Ready-to-use Dummy persistences opened against the fake pool

Usage:
    async def test_something(opened_persistence, fake_pool):
        await opened_persistence.clear(None)
        assert fake_pool.sql[-1] == "DELETE FROM `dummies`"
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import aiomysql
import pytest

from spine_mysql import ConfigParams, SequenceIdGenerator
from tests._support.dummy import DummyJsonMySqlPersistence, DummyMySqlPersistence
from tests._support.fake_mysql import FakePool

# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = Path(item.fspath).relative_to(Path(__file__).parent)

        if "integration" in str(test_path):
            item.add_marker(pytest.mark.integration)

        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration", "slow"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Fake Driver Fixtures
# =============================================================================


@pytest.fixture
def mysql_config() -> ConfigParams:
    """Connection config for a local test database."""
    return ConfigParams.from_tuples(
        "connection.host", "localhost",
        "connection.port", 3306,
        "connection.database", "test",
        "credential.username", "mysql",
        "credential.password", "mysql",
    )


@pytest.fixture
def fake_pool() -> FakePool:
    return FakePool()


@pytest.fixture
def create_pool_calls(monkeypatch: pytest.MonkeyPatch, fake_pool: FakePool) -> list[dict[str, Any]]:
    """
    Replace ``aiomysql.create_pool`` with a recorder returning ``fake_pool``.

    Each call's keyword arguments are appended to the returned list.
    """
    calls: list[dict[str, Any]] = []

    async def create_pool(**kwargs: Any) -> FakePool:
        calls.append(kwargs)
        return fake_pool

    monkeypatch.setattr(aiomysql, "create_pool", create_pool)
    return calls


@pytest.fixture
async def opened_persistence(
    mysql_config: ConfigParams, fake_pool: FakePool, create_pool_calls: list[dict[str, Any]]
) -> DummyMySqlPersistence:
    """DummyMySqlPersistence opened against an existing ``dummies`` table."""
    persistence = DummyMySqlPersistence(id_generator=SequenceIdGenerator("dummy"))
    persistence.configure(mysql_config)

    fake_pool.script("SHOW TABLES", [{"Tables_in_test": "dummies"}])
    await persistence.open(None)
    fake_pool.statements.clear()

    yield persistence

    await persistence.close(None)


@pytest.fixture
async def opened_json_persistence(
    mysql_config: ConfigParams, fake_pool: FakePool, create_pool_calls: list[dict[str, Any]]
) -> DummyJsonMySqlPersistence:
    """DummyJsonMySqlPersistence opened against an existing ``dummies_json`` table."""
    persistence = DummyJsonMySqlPersistence(id_generator=SequenceIdGenerator("dummy"))
    persistence.configure(mysql_config)

    fake_pool.script("SHOW TABLES", [{"Tables_in_test": "dummies_json"}])
    await persistence.open(None)
    fake_pool.statements.clear()

    yield persistence

    await persistence.close(None)
