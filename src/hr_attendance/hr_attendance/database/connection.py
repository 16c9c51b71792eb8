from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import mysql.connector

DEFAULT_CONNECT_TIMEOUT_SECONDS = 5


@dataclass(frozen=True)
class DBConfig:
    host: str = "localhost"
    port: int = 3306
    user: str = "root"
    password: str = ""
    database: str = "hr_attendance"
    connect_timeout: int = DEFAULT_CONNECT_TIMEOUT_SECONDS

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        """Build from the ``DB_CONFIG`` settings mapping; missing keys take local defaults."""
        return cls(
            host=str(db_config.get("host", cls.host)),
            port=int(db_config.get("port", cls.port)),
            user=str(db_config.get("user", cls.user)),
            password=str(db_config.get("password", cls.password)),
            database=str(db_config.get("database", cls.database)),
            connect_timeout=int(db_config.get("connect_timeout", cls.connect_timeout)),
        )

    def open(self, *, with_database: bool = True):
        """Open a new server connection, optionally without selecting the schema."""
        kwargs = dict(
            host=self.host,
            port=self.port,
            user=self.user,
            password=self.password,
            connection_timeout=self.connect_timeout,
        )
        if with_database:
            kwargs["database"] = self.database
        return mysql.connector.connect(**kwargs)


class DatabaseConnection:
    """Process-wide connection factory shared by the MySQL repositories.

    Each repository call opens and closes its own connection through
    ``db_cursor``, so concurrent requests never share a cursor.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config

    @property
    def config(self) -> DBConfig:
        return self._config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None or cls._instance.config != config:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def connect(self):
        return self._config.open()
