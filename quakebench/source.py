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
CSV Record Source

Reads earthquake CSV files into EarthquakeRecord objects. Used in bulk mode by
the database engines (every row, for insertion) and in filtered mode by the
CSV engine (only rows matching a filter list).

Bad input never aborts a run:
- a malformed row is logged and skipped
- a file that fails mid-read is logged and yields the rows read before the error
"""

import concurrent.futures
import csv
import logging
import os
from pathlib import Path
from typing import Iterable, Iterator, Optional

from quakebench.errors import RecordParseError
from quakebench.query import Filter, matches
from quakebench.records import EarthquakeRecord

logger = logging.getLogger(__name__)

CSV_SUFFIX = ".csv"


def list_files(data_dir: Path) -> list[Path]:
    """Return the CSV files directly inside data_dir, sorted by name.

    Raises:
        FileNotFoundError: If data_dir does not exist
    """
    data_dir = Path(data_dir)
    if not data_dir.is_dir():
        raise FileNotFoundError(f"Data directory not found: {data_dir}")

    return sorted(
        entry
        for entry in data_dir.iterdir()
        if entry.name.endswith(CSV_SUFFIX) and entry.is_file()
    )


def _parse_rows(path: Path) -> Iterator[EarthquakeRecord]:
    with open(path, newline="", encoding="utf-8") as f:
        reader = csv.reader(f, delimiter=",")
        header = next(reader, None)
        if header is None:
            return
        header = [name.strip() for name in header]

        for row in reader:
            if not row:
                continue
            if len(row) != len(header):
                logger.error(
                    f"{path}:{reader.line_num}: expected {len(header)} columns, "
                    f"got {len(row)}; row skipped"
                )
                continue
            try:
                yield EarthquakeRecord.from_row(dict(zip(header, row)))
            except RecordParseError as e:
                logger.error(f"{path}:{reader.line_num}: {e}; row skipped")


def read_file(path: Path, filters: Optional[list[Filter]] = None) -> list[EarthquakeRecord]:
    """Parse one CSV file, optionally keeping only records matching filters.

    Args:
        path: CSV file with a header row
        filters: When given, only records satisfying every filter are kept

    Returns:
        The parsed (and filtered) records; partial if the file failed mid-read
    """
    records: list[EarthquakeRecord] = []
    try:
        for record in _parse_rows(path):
            if filters is None or matches(record, filters):
                records.append(record)
    except (csv.Error, OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed reading {path}: {e}; kept {len(records)} records")

    logger.info(f"- {len(records)} records: {path}")
    return records


def read_files(
    paths: Iterable[Path],
    filters: Optional[list[Filter]] = None,
    max_workers: Optional[int] = None,
) -> Iterator[tuple[Path, list[EarthquakeRecord]]]:
    """Parse several CSV files concurrently.

    Files are parsed in a thread pool; results are yielded as (path, records)
    pairs in the order the paths were given, each as soon as it and every
    earlier file is done.
    """
    paths = list(paths)
    if not paths:
        return

    workers = max_workers or min(len(paths), os.cpu_count() or 4)
    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(read_file, path, filters) for path in paths]
        for path, future in zip(paths, futures):
            yield path, future.result()
