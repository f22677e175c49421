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
Integration tests for the SQLite engine.

These tests verify the SQLite-specific behaviour on top of the shared
engine scenarios:
1. The database file is opened in WAL mode
2. Data persists across connections
3. A populate() call is a single transaction
"""

import sqlite3

import pytest

from quakebench.engines.sqlite_engine import SQLiteEngine
from quakebench.query import Query

TABLE = "earthquakes"


class TestSQLiteEngineConnection:
    """Tests for SQLite connection management."""

    def test_wal_mode_enabled(self, magnitude_dir, config_for):
        """connect() switches the database to WAL journaling."""
        with SQLiteEngine(config_for(magnitude_dir)) as engine:
            mode = engine._conn.execute("PRAGMA journal_mode").fetchone()[0]

        assert mode.lower() == "wal"

    def test_database_file_created(self, magnitude_dir, config_for):
        """The configured database file is created on connect."""
        config = config_for(magnitude_dir)

        with SQLiteEngine(config):
            pass

        assert config.sqlite_path.exists()

    def test_get_version(self):
        """get_version() reports the linked SQLite library version."""
        assert SQLiteEngine().get_version() == sqlite3.sqlite_version


class TestSQLiteEngineSchema:
    """Tests for schema creation."""

    def test_ensure_schema_creates_table(self, magnitude_dir, config_for):
        """ensure_schema() creates the table in sqlite_master."""
        lookup = "SELECT name FROM sqlite_master WHERE type = 'table' AND name = ?"

        with SQLiteEngine(config_for(magnitude_dir)) as engine:
            assert engine._conn.execute(lookup, (TABLE,)).fetchone() is None
            engine.ensure_schema(TABLE)

            assert engine._conn.execute(lookup, (TABLE,)).fetchone() == (TABLE,)

    def test_column_types(self, magnitude_dir, config_for):
        """Columns use REAL, INTEGER and TEXT affinities."""
        with SQLiteEngine(config_for(magnitude_dir)) as engine:
            engine.ensure_schema(TABLE)
            columns = {
                row[1]: row[2]
                for row in engine._conn.execute(f"PRAGMA table_info({TABLE})").fetchall()
            }

        assert len(columns) == 22
        assert columns["mag"] == "REAL"
        assert columns["nst"] == "INTEGER"
        assert columns["place"] == "TEXT"

    def test_has_records_false_without_table(self, magnitude_dir, config_for):
        """A missing table probes as empty rather than raising."""
        with SQLiteEngine(config_for(magnitude_dir)) as engine:
            assert engine.has_records(TABLE) is False


class TestSQLiteEnginePopulate:
    """Tests for populate() persistence and atomicity."""

    def test_data_persists_across_connections(self, magnitude_dir, config_for):
        """A second connection sees the populated table."""
        config = config_for(magnitude_dir)
        with SQLiteEngine(config) as engine:
            engine.ensure_schema(TABLE)
            inserted = engine.populate(TABLE, magnitude_dir)

        with SQLiteEngine(config) as engine:
            assert engine.has_records(TABLE) is True
            assert engine.count(TABLE, Query()) == inserted == 3

    def test_populate_rolls_back_on_failure(self, two_file_dir, config_for, monkeypatch):
        """A failed insert discards every batch of the same populate() call."""
        with SQLiteEngine(config_for(two_file_dir)) as engine:
            engine.ensure_schema(TABLE)
            original = engine._insert_records
            batches = []

            def flaky_insert(table, records):
                batches.append(len(records))
                if len(batches) == 2:
                    raise sqlite3.OperationalError("database or disk is full")
                original(table, records)

            monkeypatch.setattr(engine, "_insert_records", flaky_insert)

            with pytest.raises(sqlite3.OperationalError, match="disk is full"):
                engine.populate(TABLE, two_file_dir)

            assert batches == [3, 5]
            assert engine.count(TABLE, Query()) == 0

    def test_populate_twice_duplicates(self, magnitude_dir, config_for):
        """populate() is not idempotent; callers check has_records() first."""
        with SQLiteEngine(config_for(magnitude_dir)) as engine:
            engine.ensure_schema(TABLE)
            engine.populate(TABLE, magnitude_dir)
            engine.populate(TABLE, magnitude_dir)

            assert engine.count(TABLE, Query()) == 6
