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
CSV Scan Benchmark Engine Implementation

Unlike the SQL engines, this engine has no storage of its own: every search
and count re-reads the CSV files in config.data_dir and evaluates the filters
in memory. The table argument is accepted for interface compatibility and
otherwise ignored.
"""

import logging
import platform
from pathlib import Path
from typing import Any, Optional

from quakebench.config import BenchmarkConfig
from quakebench.engine_base import BenchmarkEngine
from quakebench.query import Filter, Query
from quakebench.records import EarthquakeRecord
from quakebench.source import list_files, read_files

logger = logging.getLogger(__name__)


class CSVScanEngine(BenchmarkEngine):
    """Raw file scanning implementation of the benchmark engine.

    Attributes:
        _data_dir: Directory scanned on every query (set by connect())
    """

    def __init__(self, config: Optional[BenchmarkConfig] = None) -> None:
        super().__init__(config)
        self._data_dir: Optional[Path] = None

    @property
    def name(self) -> str:
        """Return engine identifier."""
        return "csv"

    @property
    def dialect(self) -> str:
        """Return backend name for reporting."""
        return "CSV"

    @property
    def uses_sql(self) -> bool:
        """Indicate this engine filters in memory instead of using SQL."""
        return False

    @property
    def is_ready(self) -> bool:
        return self._data_dir is not None

    def connect(self) -> None:
        """Resolve the data directory.

        Raises:
            FileNotFoundError: If the data directory does not exist
        """
        data_dir = Path(self.config.data_dir)
        if not data_dir.is_dir():
            raise FileNotFoundError(f"Data directory not found: {data_dir}")
        logger.info(f"Scanning CSV files in {data_dir}")
        self._data_dir = data_dir

    def ensure_schema(self, table: str) -> None:
        self._require_ready()

    def has_records(self, table: str) -> bool:
        self._require_ready()
        try:
            return bool(list_files(self._data_dir))
        except FileNotFoundError as e:
            logger.debug(f"Record probe failed on {self.name}: {e}")
            return False

    def populate(self, table: str, data_dir: Path) -> int:
        self._require_ready()
        logger.info("CSV engine reads files directly; nothing to populate")
        return 0

    def _scan(self, filters: list[Filter]) -> list[EarthquakeRecord]:
        files = list_files(self._data_dir)
        if not files:
            logger.warning(f"No files found in {self._data_dir}")
            return []

        matched: list[EarthquakeRecord] = []
        for _, records in read_files(files, filters, max_workers=self.config.max_workers):
            matched.extend(records)
        logger.info(f"Total: {len(matched)}")
        return matched

    def search(self, table: str, query: Query) -> list[Any]:
        self._require_ready()
        matched = self._scan(query.filters)
        return matched[query.offset:query.offset + query.limit]

    def count(self, table: str, query: Query) -> int:
        self._require_ready()
        return len(self._scan(query.filters))

    def close(self) -> None:
        self._data_dir = None

    def get_version(self) -> str:
        return f"python-csv {platform.python_version()}"
