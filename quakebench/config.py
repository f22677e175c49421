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
Benchmark Configuration

All settings an engine needs (paths, table name, ClickHouse credentials) live
in one BenchmarkConfig that is passed to each engine constructor.

Configuration via environment variables:
    - QUAKEBENCH_DATA_DIR: Directory holding the input CSV files
    - QUAKEBENCH_TABLE: Table name shared by all engines
    - QUAKEBENCH_SQLITE_PATH: SQLite database file
    - QUAKEBENCH_DUCKDB_PATH: DuckDB database file
    - QUAKEBENCH_MAX_WORKERS: Threads used to parse CSV files
    - CLICKHOUSE_HOST, CLICKHOUSE_PORT: ClickHouse HTTP endpoint
    - CLICKHOUSE_USERNAME, CLICKHOUSE_PASSWORD: ClickHouse credentials
    - CLICKHOUSE_DATABASE: ClickHouse database name
"""

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, Optional

# Environment variable names
ENV_DATA_DIR = "QUAKEBENCH_DATA_DIR"
ENV_TABLE = "QUAKEBENCH_TABLE"
ENV_SQLITE_PATH = "QUAKEBENCH_SQLITE_PATH"
ENV_DUCKDB_PATH = "QUAKEBENCH_DUCKDB_PATH"
ENV_MAX_WORKERS = "QUAKEBENCH_MAX_WORKERS"
ENV_CLICKHOUSE_HOST = "CLICKHOUSE_HOST"
ENV_CLICKHOUSE_PORT = "CLICKHOUSE_PORT"
ENV_CLICKHOUSE_USERNAME = "CLICKHOUSE_USERNAME"
ENV_CLICKHOUSE_PASSWORD = "CLICKHOUSE_PASSWORD"
ENV_CLICKHOUSE_DATABASE = "CLICKHOUSE_DATABASE"


@dataclass(frozen=True)
class BenchmarkConfig:
    """Settings shared by all engines.

    Attributes:
        data_dir: Directory containing the earthquake CSV files
        table_name: Table created and queried by the database engines
        sqlite_path: SQLite database file
        duckdb_path: DuckDB database file (":memory:" for a transient database)
        clickhouse_host: ClickHouse server hostname
        clickhouse_port: ClickHouse HTTP port
        clickhouse_username: ClickHouse user
        clickhouse_password: ClickHouse password
        clickhouse_database: ClickHouse database holding the table
        max_workers: Thread count for CSV parsing (None = CPU count)
    """

    data_dir: Path = Path("data")
    table_name: str = "earthquakes"
    sqlite_path: Path = Path("earthquakes.db")
    duckdb_path: str = "earthquakes.duckdb"
    clickhouse_host: str = "localhost"
    clickhouse_port: int = 8123
    clickhouse_username: str = "default"
    clickhouse_password: str = ""
    clickhouse_database: str = "default"
    max_workers: Optional[int] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "BenchmarkConfig":
        """Build a config from environment variables, falling back to defaults.

        Raises:
            ValueError: If an integer variable does not hold an integer
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        def _int(name: str, default: Optional[int]) -> Optional[int]:
            raw = env.get(name)
            if raw is None or raw == "":
                return default
            try:
                return int(raw)
            except ValueError:
                raise ValueError(f"{name} must be an integer, got {raw!r}") from None

        return cls(
            data_dir=Path(env.get(ENV_DATA_DIR, defaults.data_dir)),
            table_name=env.get(ENV_TABLE, defaults.table_name),
            sqlite_path=Path(env.get(ENV_SQLITE_PATH, defaults.sqlite_path)),
            duckdb_path=env.get(ENV_DUCKDB_PATH, defaults.duckdb_path),
            clickhouse_host=env.get(ENV_CLICKHOUSE_HOST, defaults.clickhouse_host),
            clickhouse_port=_int(ENV_CLICKHOUSE_PORT, defaults.clickhouse_port),
            clickhouse_username=env.get(ENV_CLICKHOUSE_USERNAME, defaults.clickhouse_username),
            clickhouse_password=env.get(ENV_CLICKHOUSE_PASSWORD, defaults.clickhouse_password),
            clickhouse_database=env.get(ENV_CLICKHOUSE_DATABASE, defaults.clickhouse_database),
            max_workers=_int(ENV_MAX_WORKERS, defaults.max_workers),
        )

    def with_overrides(self, **overrides: Any) -> "BenchmarkConfig":
        """Return a copy with the given fields replaced; None values are ignored."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})
