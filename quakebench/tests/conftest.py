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

"""Shared fixtures: small earthquake CSV directories written on the fly."""

import csv
from pathlib import Path
from typing import Optional, Union

import pytest

from quakebench.config import BenchmarkConfig
from quakebench.records import FIELD_NAMES


def make_row(event_id: str, mag: Union[float, str], **overrides: str) -> dict[str, str]:
    """Return a complete CSV row with plausible values."""
    row = {
        "FF": "2024-01-01T00:00:00.000Z",
        "latitude": "61.5",
        "longitude": "-149.9",
        "depth": "10.2",
        "mag": str(mag),
        "magType": "ml",
        "nst": "12",
        "gap": "71.5",
        "dmin": "0.05",
        "rms": "0.42",
        "net": "ak",
        "id": event_id,
        "updated": "2024-01-02T00:00:00.000Z",
        "place": "10 km N of Anchorage, Alaska",
        "type": "earthquake",
        "horizontalError": "0.3",
        "depthError": "0.5",
        "magError": "0.1",
        "magNst": "8",
        "status": "reviewed",
        "locationSource": "ak",
        "magSource": "ak",
    }
    row.update(overrides)
    return row


def write_csv(path: Path, rows: list[dict[str, str]], extra_lines: Optional[list[str]] = None) -> Path:
    """Write rows under the standard header, then append any raw extra lines."""
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=FIELD_NAMES)
        writer.writeheader()
        writer.writerows(rows)
        for line in extra_lines or []:
            f.write(line + "\r\n")
    return path


@pytest.fixture
def magnitude_dir(tmp_path):
    """One CSV file with magnitudes 0.5, 1.5 and 2.5."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    write_csv(
        data_dir / "quakes.csv",
        [make_row("ev1", 0.5), make_row("ev2", 1.5), make_row("ev3", 2.5)],
    )
    return data_dir


@pytest.fixture
def two_file_dir(tmp_path):
    """Two CSV files: 3 valid rows, then 5 valid rows plus one malformed row."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    write_csv(data_dir / "a.csv", [make_row(f"a{i}", 1.0 + i) for i in range(3)])
    write_csv(
        data_dir / "b.csv",
        [make_row(f"b{i}", 0.5 * i) for i in range(5)],
        extra_lines=["broken,row,with,too,few,columns"],
    )
    # Not a CSV file: must be ignored
    (data_dir / "notes.txt").write_text("ignore me")
    return data_dir


@pytest.fixture
def config_for(tmp_path):
    """Build a BenchmarkConfig pointing every path into tmp_path."""

    def _build(data_dir: Path, **overrides) -> BenchmarkConfig:
        settings = {
            "data_dir": data_dir,
            "table_name": "earthquakes",
            "sqlite_path": tmp_path / "test.db",
            "duckdb_path": str(tmp_path / "test.duckdb"),
            "max_workers": 2,
        }
        settings.update(overrides)
        return BenchmarkConfig(**settings)

    return _build
