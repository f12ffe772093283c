"""Tests for ``spine_mysql.settings``: MYSQL_* environment settings."""

from __future__ import annotations

import pytest

from spine_mysql.settings import MySqlSettings

_ENV_VARS = (
    "MYSQL_URI", "MYSQL_HOST", "MYSQL_PORT", "MYSQL_DB", "MYSQL_USER", "MYSQL_PASSWORD",
    "MYSQL_SSL", "MYSQL_MAX_POOL_SIZE", "MYSQL_CONNECT_TIMEOUT", "MYSQL_MAX_PAGE_SIZE",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestMySqlSettings:
    def test_defaults(self, clean_env):
        settings = MySqlSettings(_env_file=None)
        assert settings.host == "localhost"
        assert settings.port == 3306
        assert settings.db == "test"

    def test_reads_environment(self, clean_env):
        clean_env.setenv("MYSQL_HOST", "db.internal")
        clean_env.setenv("MYSQL_PORT", "3307")
        clean_env.setenv("MYSQL_USER", "app")
        clean_env.setenv("MYSQL_SSL", "false")

        config = MySqlSettings(_env_file=None).to_config()

        assert config["connection.host"] == "db.internal"
        assert config["connection.port"] == 3307
        assert config["connection.ssl"] is False
        assert config["credential.username"] == "app"
        assert "credential.password" not in config

    def test_uri_wins(self, clean_env):
        clean_env.setenv("MYSQL_URI", "mysql://u:p@h:3306/db")
        config = MySqlSettings(_env_file=None).to_config()
        assert config["connection.uri"] == "mysql://u:p@h:3306/db"
        assert "connection.host" not in config

    def test_options(self, clean_env):
        config = MySqlSettings(_env_file=None, max_pool_size=5, connect_timeout=2000, max_page_size=20).to_config()
        assert config.get_section("options") == {"max_pool_size": 5, "connect_timeout": 2000, "max_page_size": 20}
