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
DuckDB Benchmark Engine Implementation

This module provides a DuckDB implementation of the BenchmarkEngine interface.
DuckDB is the embedded columnar engine:
- No external server required
- File-backed or in-memory (duckdb_path=":memory:")
- Bulk inserts go through Arrow tables rather than row-by-row statements
"""

import logging
from typing import Any

from quakebench.engine_base import SQLBenchmarkEngine
from quakebench.records import FIELD_NAMES, FLOAT, INTEGER, TEXT, EarthquakeRecord

logger = logging.getLogger(__name__)

# Name under which each Arrow batch is registered during inserts
_BATCH_VIEW = "quakebench_insert_batch"


class DuckDBEngine(SQLBenchmarkEngine):
    """DuckDB implementation of the benchmark engine.

    Attributes:
        _conn: DuckDB connection object
    """

    column_types = {FLOAT: "DOUBLE", INTEGER: "BIGINT", TEXT: "VARCHAR"}

    @property
    def name(self) -> str:
        """Return engine identifier."""
        return "duckdb"

    @property
    def dialect(self) -> str:
        """Return backend name for reporting."""
        return "DuckDB"

    def connect(self) -> None:
        """Open the DuckDB database configured by duckdb_path.

        Raises:
            ImportError: If duckdb package is not installed
        """
        try:
            import duckdb
        except ImportError as e:
            raise ImportError(
                "DuckDB is required for this engine. "
                "Install it with: pip install duckdb"
            ) from e

        path = str(self.config.duckdb_path)
        logger.info(f"Opening DuckDB database at {path}")
        self._conn = duckdb.connect(path)

    def _execute(self, sql: str) -> None:
        self._conn.execute(sql)

    def _fetch_all(self, sql: str) -> list[Any]:
        return self._conn.execute(sql).fetchall()

    def _insert_records(self, table: str, records: list[EarthquakeRecord]) -> None:
        import pyarrow as pa

        batch = pa.table(
            {name: [getattr(record, name) for record in records] for name in FIELD_NAMES}
        )
        columns = ", ".join(FIELD_NAMES)
        self._conn.register(_BATCH_VIEW, batch)
        try:
            self._conn.execute(
                f"INSERT INTO {table} ({columns}) SELECT {columns} FROM {_BATCH_VIEW}"
            )
        finally:
            self._conn.unregister(_BATCH_VIEW)

    def close(self) -> None:
        """Close DuckDB connection and release resources."""
        if self._conn is not None:
            logger.info("Closing DuckDB connection")
            self._conn.close()
            self._conn = None

    def get_version(self) -> str:
        """Return DuckDB version string."""
        if self._conn is None:
            return "unknown"

        try:
            result = self._conn.execute("SELECT version()").fetchone()
            return result[0] if result else "unknown"
        except Exception:
            return "unknown"
