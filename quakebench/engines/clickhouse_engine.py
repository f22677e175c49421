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
ClickHouse Benchmark Engine Implementation

This module provides a ClickHouse implementation of the BenchmarkEngine
interface. It talks to a ClickHouse server over HTTP via clickhouse-connect
and stores records in a MergeTree table ordered by event id.

Requirements:
    - clickhouse-connect

Configuration (see quakebench.config):
    - CLICKHOUSE_HOST / CLICKHOUSE_PORT: Server endpoint (default localhost:8123)
    - CLICKHOUSE_USERNAME / CLICKHOUSE_PASSWORD: Credentials
    - CLICKHOUSE_DATABASE: Database holding the table

Example:
    export CLICKHOUSE_USERNAME="default"
    export CLICKHOUSE_PASSWORD="..."

    from quakebench.config import BenchmarkConfig
    from quakebench.engines.clickhouse_engine import ClickHouseEngine

    with ClickHouseEngine(BenchmarkConfig.from_env()) as engine:
        engine.ensure_schema("earthquakes")
        total = engine.count("earthquakes", Query())
"""

import logging
from typing import Any

from quakebench.engine_base import SQLBenchmarkEngine
from quakebench.records import FIELD_NAMES, FLOAT, INTEGER, TEXT, EarthquakeRecord

logger = logging.getLogger(__name__)


class ClickHouseEngine(SQLBenchmarkEngine):
    """ClickHouse implementation of the benchmark engine.

    Attributes:
        _conn: clickhouse-connect client
    """

    column_types = {FLOAT: "Float64", INTEGER: "Int64", TEXT: "String"}
    table_options = " ENGINE = MergeTree() ORDER BY (id)"

    @property
    def name(self) -> str:
        """Return engine identifier."""
        return "clickhouse"

    @property
    def dialect(self) -> str:
        """Return backend name for reporting."""
        return "ClickHouse"

    def connect(self) -> None:
        """Create a ClickHouse client from the configured credentials.

        Raises:
            ImportError: If clickhouse-connect is not installed
        """
        try:
            import clickhouse_connect
        except ImportError as e:
            raise ImportError(
                "clickhouse-connect is required for this engine. "
                "Install it with: pip install clickhouse-connect"
            ) from e

        cfg = self.config
        logger.info(
            f"Connecting to ClickHouse: {cfg.clickhouse_host}:{cfg.clickhouse_port} "
            f"(database: {cfg.clickhouse_database})"
        )
        self._conn = clickhouse_connect.get_client(
            host=cfg.clickhouse_host,
            port=cfg.clickhouse_port,
            username=cfg.clickhouse_username,
            password=cfg.clickhouse_password,
            database=cfg.clickhouse_database,
        )
        logger.info("ClickHouse connection established")

    def _execute(self, sql: str) -> None:
        self._conn.command(sql)

    def _fetch_all(self, sql: str) -> list[Any]:
        return self._conn.query(sql).result_rows

    def _insert_records(self, table: str, records: list[EarthquakeRecord]) -> None:
        self._conn.insert(
            table,
            [record.as_tuple() for record in records],
            column_names=list(FIELD_NAMES),
        )

    def close(self) -> None:
        """Close the ClickHouse client."""
        if self._conn is not None:
            logger.info("Closing ClickHouse connection")
            try:
                self._conn.close()
            except Exception as e:
                logger.warning(f"Error closing connection: {e}")
            self._conn = None

    def get_version(self) -> str:
        """Return the ClickHouse server version."""
        if self._conn is None:
            return "unknown"
        return str(getattr(self._conn, "server_version", "unknown"))
