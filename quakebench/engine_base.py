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
Abstract Base Classes for Benchmark Engines

This module defines the interface that all storage engine implementations must
follow, plus a shared base for engines that speak SQL.

To implement a new SQL engine:

    from quakebench.engine_base import SQLBenchmarkEngine

    class MyNewEngine(SQLBenchmarkEngine):
        '''Engine implementation for MyNewDB.'''

        column_types = {FLOAT: "DOUBLE", INTEGER: "BIGINT", TEXT: "VARCHAR"}

        @property
        def name(self) -> str:
            return "mynewdb"

        @property
        def dialect(self) -> str:
            return "MyNewDB"

        def connect(self) -> None:
            self._conn = mynewdb.connect(self.config.mynewdb_path)

        def _execute(self, sql: str) -> None:
            self._conn.execute(sql)

        def _fetch_all(self, sql: str) -> list:
            return self._conn.execute(sql).fetchall()

        def _insert_records(self, table, records) -> None:
            self._conn.executemany(...)

        def close(self) -> None:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
"""

import contextlib
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, ContextManager, Optional

from quakebench.config import BenchmarkConfig
from quakebench.errors import EngineNotReadyError
from quakebench.query import Query, to_count_sql, to_search_sql
from quakebench.records import FIELD_KINDS, EarthquakeRecord
from quakebench.source import list_files, read_files

logger = logging.getLogger(__name__)

# Benchmark phases, in the order the runner executes them
PHASE_POPULATE = "populate"
PHASE_SEARCH = "search"
PHASE_COUNT = "count"
PHASES = (PHASE_POPULATE, PHASE_SEARCH, PHASE_COUNT)


@dataclass
class PhaseResult:
    """Result of a single benchmark phase.

    Attributes:
        phase: Phase identifier ("populate", "search" or "count")
        engine: Name of the storage engine used
        success: Whether the phase completed successfully
        duration_seconds: Wall-clock time for the phase
        row_count: Rows inserted, returned or counted (if successful)
        error_message: Error description (if failed)
        iteration: Which iteration this result is from (for multi-run benchmarks)
        metadata: Additional engine-specific metadata
    """

    phase: str
    engine: str
    success: bool
    duration_seconds: float = 0.0
    row_count: int = 0
    error_message: Optional[str] = None
    iteration: int = 1
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert result to dictionary for JSON serialization."""
        return {
            "phase": self.phase,
            "engine": self.engine,
            "success": self.success,
            "duration_seconds": self.duration_seconds,
            "row_count": self.row_count,
            "error_message": self.error_message,
            "iteration": self.iteration,
            "metadata": self.metadata,
        }


class BenchmarkEngine(ABC):
    """Abstract base class for earthquake storage engines.

    The lifecycle is Uninitialized -> Ready -> Closed:
        1. engine = MyEngine(config)
        2. engine.connect()
        3. engine.ensure_schema(table)
        4. if not engine.has_records(table):
               engine.populate(table, data_dir)
        5. rows = engine.search(table, query); total = engine.count(table, query)
        6. engine.close()

    Every operation except close() and get_version() raises
    EngineNotReadyError until connect() has been called. Errors from the
    underlying client are not caught and reach the caller unchanged.

    Context manager support is provided for automatic cleanup:
        with MyEngine(config) as engine:
            engine.search(...)
    """

    def __init__(self, config: Optional[BenchmarkConfig] = None) -> None:
        self.config = config or BenchmarkConfig()
        self._conn: Optional[Any] = None

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the short identifier for this engine (e.g., 'sqlite').

        This is used in CLI arguments and result reporting.
        """

    @property
    @abstractmethod
    def dialect(self) -> str:
        """Return a human-readable name for the storage backend."""

    @property
    def uses_sql(self) -> bool:
        """Return whether queries are translated to SQL for this engine."""
        return True

    @property
    def is_ready(self) -> bool:
        """True between connect() and close()."""
        return self._conn is not None

    def _require_ready(self) -> None:
        if not self.is_ready:
            raise EngineNotReadyError(self.name)

    @abstractmethod
    def connect(self) -> None:
        """Open the connection or handle used by all other operations."""

    @abstractmethod
    def ensure_schema(self, table: str) -> None:
        """Create the table if it does not exist. Safe to call repeatedly."""

    @abstractmethod
    def has_records(self, table: str) -> bool:
        """Return True if the table holds at least one record.

        Probe failures (e.g. a missing table) count as "no records".
        """

    @abstractmethod
    def populate(self, table: str, data_dir: Path) -> int:
        """Load every CSV file in data_dir into the table.

        Not idempotent: callers check has_records() first.

        Returns:
            Number of records inserted
        """

    @abstractmethod
    def search(self, table: str, query: Query) -> list[Any]:
        """Run the query and return the matching rows in backend-native form."""

    @abstractmethod
    def count(self, table: str, query: Query) -> int:
        """Return how many rows match the query's filters."""

    @abstractmethod
    def close(self) -> None:
        """Release the connection. A no-op when not connected."""

    def get_version(self) -> str:
        """Return the version string of the storage engine."""
        return "unknown"

    def __enter__(self) -> "BenchmarkEngine":
        """Context manager entry: connect to database."""
        self.connect()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit: close connection."""
        self.close()


class SQLBenchmarkEngine(BenchmarkEngine):
    """Shared control flow for engines backed by a SQL database.

    Subclasses supply the connection handling, the column type names and
    three primitives: _execute, _fetch_all and _insert_records.
    """

    # Maps record field kinds (records.FLOAT/INTEGER/TEXT) to column types
    column_types: dict[str, str] = {}

    # Appended after the column list in CREATE TABLE
    table_options: str = ""

    @abstractmethod
    def _execute(self, sql: str) -> None:
        """Run a statement that returns no rows."""

    @abstractmethod
    def _fetch_all(self, sql: str) -> list[Any]:
        """Run a query and return all rows."""

    @abstractmethod
    def _insert_records(self, table: str, records: list[EarthquakeRecord]) -> None:
        """Bulk insert records using the backend's native mechanism."""

    def _load_transaction(self) -> ContextManager[Any]:
        """Context wrapping a whole populate() call. No transaction by default."""
        return contextlib.nullcontext()

    def create_table_sql(self, table: str) -> str:
        columns = ",\n    ".join(
            f"{name} {self.column_types[kind]}" for name, kind in FIELD_KINDS.items()
        )
        return f"CREATE TABLE IF NOT EXISTS {table} (\n    {columns}\n){self.table_options}"

    def ensure_schema(self, table: str) -> None:
        self._require_ready()
        logger.info(f"Ensuring table '{table}' exists on {self.name}")
        self._execute(self.create_table_sql(table))

    def has_records(self, table: str) -> bool:
        self._require_ready()
        try:
            rows = self._fetch_all(f"SELECT * FROM {table} LIMIT 1")
        except Exception as e:
            logger.debug(f"Record probe for '{table}' failed on {self.name}: {e}")
            return False
        return len(rows) > 0

    def populate(self, table: str, data_dir: Path) -> int:
        self._require_ready()

        files = list_files(data_dir)
        if not files:
            logger.warning(f"No files found in {data_dir}")
            return 0

        logger.info(f"Populating '{table}' on {self.name} from {len(files)} files")
        total = 0
        with self._load_transaction():
            for path, records in read_files(files, max_workers=self.config.max_workers):
                if records:
                    self._insert_records(table, records)
                total += len(records)

        logger.info(f"Inserted {total:,} records into '{table}'")
        return total

    def search(self, table: str, query: Query) -> list[Any]:
        self._require_ready()
        sql = to_search_sql(table, query)
        logger.debug(f"{self.name} search: {sql}")
        return self._fetch_all(sql)

    def count(self, table: str, query: Query) -> int:
        self._require_ready()
        sql = to_count_sql(table, query)
        logger.debug(f"{self.name} count: {sql}")
        rows = self._fetch_all(sql)
        return int(rows[0][0])


class TimedExecution:
    """Context manager for timing code execution.

    Usage:
        with TimedExecution() as timer:
            # code to time
        print(f"Elapsed: {timer.elapsed:.3f}s")
    """

    def __init__(self) -> None:
        self.start_time: float = 0.0
        self.end_time: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> "TimedExecution":
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.end_time = time.perf_counter()
        self.elapsed = self.end_time - self.start_time
