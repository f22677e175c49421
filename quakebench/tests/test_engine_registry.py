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
Tests for the engine registry module.

These tests verify:
1. All engines are properly registered
2. get_engine() returns correct engine instances
3. list_engines() returns all available engines
4. Unknown engine names raise appropriate errors
"""

import pytest

from quakebench.config import BenchmarkConfig
from quakebench.engine_base import BenchmarkEngine
from quakebench.engines import (
    ENGINES,
    ClickHouseEngine,
    CSVScanEngine,
    DuckDBEngine,
    SQLiteEngine,
    get_engine,
    list_engines,
)


class TestEngineRegistry:
    """Tests for the ENGINES registry dictionary."""

    def test_all_expected_engines_registered(self):
        """All expected engines are registered in ENGINES."""
        assert set(ENGINES.keys()) == {"clickhouse", "sqlite", "duckdb", "csv"}

    def test_registry_maps_to_correct_classes(self):
        """Registry maps engine names to correct classes."""
        assert ENGINES["clickhouse"] is ClickHouseEngine
        assert ENGINES["sqlite"] is SQLiteEngine
        assert ENGINES["duckdb"] is DuckDBEngine
        assert ENGINES["csv"] is CSVScanEngine

    def test_all_registered_classes_are_benchmark_engines(self):
        """All registered classes are subclasses of BenchmarkEngine."""
        for name, engine_class in ENGINES.items():
            assert issubclass(engine_class, BenchmarkEngine), (
                f"Engine '{name}' is not a BenchmarkEngine subclass"
            )


class TestGetEngine:
    """Tests for the get_engine() function."""

    def test_get_engine_returns_instance(self):
        """get_engine() returns an instance of the requested engine."""
        engine = get_engine("sqlite")

        assert isinstance(engine, SQLiteEngine)
        assert engine.is_ready is False

    def test_get_engine_case_insensitive(self):
        """get_engine() is case-insensitive."""
        assert type(get_engine("sqlite")) is type(get_engine("SQLite")) is type(get_engine("SQLITE"))

    def test_get_engine_passes_config(self):
        """The given config reaches the engine."""
        config = BenchmarkConfig(table_name="quakes")

        assert get_engine("csv", config).config is config

    def test_get_engine_reads_environment_by_default(self, monkeypatch):
        """Without a config, settings come from the environment."""
        monkeypatch.setenv("CLICKHOUSE_HOST", "ch.example")

        assert get_engine("clickhouse").config.clickhouse_host == "ch.example"

    def test_get_engine_unknown_raises_value_error(self):
        """get_engine() raises ValueError listing available engines."""
        with pytest.raises(ValueError, match="Unknown engine") as exc_info:
            get_engine("postgres")

        assert "clickhouse, csv, duckdb, sqlite" in str(exc_info.value)

    def test_get_engine_returns_new_instance_each_time(self):
        """get_engine() returns a new instance on each call."""
        assert get_engine("csv") is not get_engine("csv")


class TestListEngines:
    """Tests for the list_engines() function."""

    def test_list_engines_sorted(self):
        """list_engines() returns every engine, sorted."""
        assert list_engines() == ["clickhouse", "csv", "duckdb", "sqlite"]


class TestEngineProperties:
    """Tests for engine property values."""

    @pytest.mark.parametrize("engine_name,expected_dialect,expected_uses_sql", [
        ("clickhouse", "ClickHouse", True),
        ("sqlite", "SQLite", True),
        ("duckdb", "DuckDB", True),
        ("csv", "CSV", False),
    ])
    def test_engine_dialect_and_uses_sql(self, engine_name, expected_dialect, expected_uses_sql):
        """Each engine has correct dialect and uses_sql values."""
        engine = get_engine(engine_name, BenchmarkConfig())

        assert engine.dialect == expected_dialect
        assert engine.uses_sql == expected_uses_sql

    def test_engine_names_match_registry_keys(self):
        """Each engine's name property matches its registry key."""
        for registry_name in list_engines():
            engine = get_engine(registry_name, BenchmarkConfig())
            assert engine.name == registry_name
