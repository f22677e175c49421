#  Licensed to the Apache Software Foundation (ASF) under one
#  or more contributor license agreements.  See the NOTICE file
#  distributed with this work for additional information
#  regarding copyright ownership.  The ASF licenses this file
#  to you under the Apache License, Version 2.0 (the
#  "License"); you may not use this file except in compliance
#  with the License.  You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
#  Unless required by applicable law or agreed to in writing,
#  software distributed under the License is distributed on an
#  "AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY
#  KIND, either express or implied.  See the License for the
#  specific language governing permissions and limitations
#  under the License.

"""
SQLite Benchmark Engine Implementation

Embedded relational engine backed by a single database file in WAL mode.
A whole populate() call runs inside one transaction.
"""

import logging
import sqlite3
from typing import Any, ContextManager

from quakebench.engine_base import SQLBenchmarkEngine
from quakebench.records import FIELD_NAMES, FLOAT, INTEGER, TEXT, EarthquakeRecord

logger = logging.getLogger(__name__)


class SQLiteEngine(SQLBenchmarkEngine):
    """SQLite implementation of the benchmark engine.

    Attributes:
        _conn: sqlite3 connection to config.sqlite_path
    """

    column_types = {FLOAT: "REAL", INTEGER: "INTEGER", TEXT: "TEXT"}

    @property
    def name(self) -> str:
        return "sqlite"

    @property
    def dialect(self) -> str:
        return "SQLite"

    def connect(self) -> None:
        path = str(self.config.sqlite_path)
        logger.info(f"Opening SQLite database at {path}")
        self._conn = sqlite3.connect(path)
        self._conn.execute("PRAGMA journal_mode = WAL")

    def _execute(self, sql: str) -> None:
        self._conn.execute(sql)
        self._conn.commit()

    def _fetch_all(self, sql: str) -> list[Any]:
        return self._conn.execute(sql).fetchall()

    def _load_transaction(self) -> ContextManager[Any]:
        # Commits on success, rolls back if any insert fails
        return self._conn

    def _insert_records(self, table: str, records: list[EarthquakeRecord]) -> None:
        placeholders = ", ".join("?" for _ in FIELD_NAMES)
        self._conn.executemany(
            f"INSERT INTO {table} VALUES ({placeholders})",
            (record.as_tuple() for record in records),
        )

    def close(self) -> None:
        if self._conn is not None:
            logger.info("Closing SQLite connection")
            self._conn.close()
            self._conn = None

    def get_version(self) -> str:
        return sqlite3.sqlite_version
