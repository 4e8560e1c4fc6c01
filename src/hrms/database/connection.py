from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import mysql.connector

from ..core.constants import DEFAULT_CONFLICT_RETRIES


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str


class DatabaseConnection:
    """Singleton-like DB connection factory.

    Note: We create short-lived connections per operation; each one is a single
    transaction pinned to UTC so DATE/DATETIME keys mean the same thing everywhere.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig, *, conflict_retries: int = DEFAULT_CONFLICT_RETRIES):
        self._config = config
        self.conflict_retries = max(int(conflict_retries), 1)

    @classmethod
    def get_instance(cls, config: DBConfig, *, conflict_retries: int = DEFAULT_CONFLICT_RETRIES) -> "DatabaseConnection":
        if cls._instance is None:
            cls._instance = DatabaseConnection(config, conflict_retries=conflict_retries)
        return cls._instance

    def connect(self):
        return mysql.connector.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
            time_zone="+00:00",
            autocommit=False,
        )
