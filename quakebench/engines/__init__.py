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
Benchmark Engine Registry

This module provides registration and discovery of storage engine implementations.
To add a new engine, import it here and add it to the ENGINES dictionary.
"""

from typing import Optional, Type

from quakebench.config import BenchmarkConfig
from quakebench.engine_base import BenchmarkEngine

# Import engine implementations
from quakebench.engines.clickhouse_engine import ClickHouseEngine
from quakebench.engines.csv_engine import CSVScanEngine
from quakebench.engines.duckdb_engine import DuckDBEngine
from quakebench.engines.sqlite_engine import SQLiteEngine

# Registry of available engines
# Key: CLI argument name (lowercase)
# Value: Engine class
ENGINES: dict[str, Type[BenchmarkEngine]] = {
    "clickhouse": ClickHouseEngine,
    "sqlite": SQLiteEngine,
    "duckdb": DuckDBEngine,
    "csv": CSVScanEngine,
}


def get_engine(name: str, config: Optional[BenchmarkConfig] = None) -> BenchmarkEngine:
    """Get an instance of the specified engine.

    Args:
        name: Engine name (case-insensitive)
        config: Settings passed to the engine (default: from environment)

    Returns:
        An instance of the requested engine

    Raises:
        ValueError: If engine name is not recognized
    """
    name_lower = name.lower()
    if name_lower not in ENGINES:
        available = ", ".join(sorted(ENGINES.keys()))
        raise ValueError(f"Unknown engine '{name}'. Available engines: {available}")

    return ENGINES[name_lower](config or BenchmarkConfig.from_env())


def list_engines() -> list[str]:
    """Return list of available engine names."""
    return sorted(ENGINES.keys())


__all__ = [
    "ENGINES",
    "get_engine",
    "list_engines",
    "ClickHouseEngine",
    "CSVScanEngine",
    "DuckDBEngine",
    "SQLiteEngine",
]
