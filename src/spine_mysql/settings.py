"""Environment-driven MySQL settings.

``MySqlSettings`` reads ``MYSQL_*`` environment variables (and ``.env``)
and turns them into a :class:`~spine_mysql.config.ConfigParams` that any
spine-mysql component accepts in ``configure()``.

Examples:
    >>> settings = MySqlSettings(host="db.local", db="orders", user="app")
    >>> config = settings.to_config()
    >>> config["connection.host"], config["credential.username"]
    ('db.local', 'app')

Tags:
    settings, configuration, pydantic, environment, spine-mysql
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .config import ConfigParams


class MySqlSettings(BaseSettings):
    """MySQL connection settings.

    Fields
    ──────
    uri              : Full connection URI; wins over every other field
    host / port / db : Endpoint of a single MySQL server
    user / password  : Credentials
    ssl              : Passed through as the ``ssl`` URI option when set
    max_pool_size    : Upper bound for the connection pool
    connect_timeout  : Connect timeout in milliseconds
    max_page_size    : Default page size for paged queries
    """

    model_config = SettingsConfigDict(
        env_prefix="MYSQL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Endpoint ─────────────────────────────────────────────────
    uri: str | None = None
    host: str | None = "localhost"
    port: int = 3306
    db: str | None = "test"

    # ── Credentials ──────────────────────────────────────────────
    user: str | None = None
    password: str | None = None

    # ── Options ──────────────────────────────────────────────────
    ssl: bool | None = None
    max_pool_size: int | None = Field(default=None, ge=1)
    connect_timeout: int | None = Field(default=None, ge=0)
    max_page_size: int | None = Field(default=None, ge=1)

    def to_config(self) -> ConfigParams:
        """Build the ``connection.*``, ``credential.*`` and ``options.*`` keys."""
        config = ConfigParams()

        if self.uri:
            config["connection.uri"] = self.uri
        else:
            config["connection.host"] = self.host
            config["connection.port"] = self.port
            config["connection.database"] = self.db
            if self.ssl is not None:
                config["connection.ssl"] = self.ssl

        if self.user is not None:
            config["credential.username"] = self.user
        if self.password is not None:
            config["credential.password"] = self.password

        if self.max_pool_size is not None:
            config["options.max_pool_size"] = self.max_pool_size
        if self.connect_timeout is not None:
            config["options.connect_timeout"] = self.connect_timeout
        if self.max_page_size is not None:
            config["options.max_page_size"] = self.max_page_size

        return config


__all__ = [
    "MySqlSettings",
]
