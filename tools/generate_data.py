#!/usr/bin/env python3
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

import argparse
import concurrent.futures
import csv
import logging
import os
import random
from datetime import datetime, timedelta, timezone
from pathlib import Path
from tempfile import mkdtemp

from quakebench.records import FIELD_NAMES

NETWORKS = ["ak", "ci", "hv", "nc", "nn", "pr", "us", "uw"]
MAG_TYPES = ["md", "ml", "mb", "mw", "mww"]
EVENT_TYPES = ["earthquake", "earthquake", "earthquake", "quarry blast", "explosion"]
STATUSES = ["automatic", "reviewed"]
PLACES = [
    "Central Alaska",
    "Northern California",
    "Island of Hawaii, Hawaii",
    "Puerto Rico region",
    "Nevada",
    "Washington",
    "Fiji region",
]


def main():
    # take some args: output dir, number of files, rows per file, seed

    parser = argparse.ArgumentParser()
    parser.add_argument("--output-dir", type=str, default=mkdtemp(prefix="quakebench-data-"),
                        help="Output directory for generated CSV files")
    parser.add_argument("--files", type=int, default=4, help="Number of CSV files to write")
    parser.add_argument("--rows-per-file", type=int, default=100_000, help="Data rows per file")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    args = parser.parse_args()

    generate_data(args.files, args.rows_per_file, args.output_dir, args.seed)
    print(f"Data generated at {args.output_dir}")


def _maybe(rng: random.Random, value: str) -> str:
    # Sparse columns are sometimes left empty, like real catalog exports
    return value if rng.random() > 0.2 else ""


def _fake_row(rng: random.Random, index: int, start: datetime) -> dict[str, str]:
    net = rng.choice(NETWORKS)
    when = start + timedelta(seconds=rng.randint(0, 30 * 24 * 3600))
    # Roughly exponential magnitudes: many small events, few large ones
    mag = min(9.5, rng.expovariate(1.2) - 0.5)
    return {
        "FF": when.strftime("%Y-%m-%dT%H:%M:%S.%fZ"),
        "latitude": f"{rng.uniform(-60.0, 70.0):.4f}",
        "longitude": f"{rng.uniform(-180.0, 180.0):.4f}",
        "depth": f"{rng.uniform(0.0, 300.0):.2f}",
        "mag": f"{mag:.2f}",
        "magType": rng.choice(MAG_TYPES),
        "nst": _maybe(rng, str(rng.randint(3, 150))),
        "gap": _maybe(rng, f"{rng.uniform(10.0, 300.0):.1f}"),
        "dmin": _maybe(rng, f"{rng.uniform(0.0, 5.0):.4f}"),
        "rms": f"{rng.uniform(0.0, 1.5):.2f}",
        "net": net,
        "id": f"{net}{index:010d}",
        "updated": (when + timedelta(hours=rng.randint(1, 72))).strftime("%Y-%m-%dT%H:%M:%S.%fZ"),
        "place": f"{rng.randint(1, 120)} km of {rng.choice(PLACES)}",
        "type": rng.choice(EVENT_TYPES),
        "horizontalError": _maybe(rng, f"{rng.uniform(0.1, 15.0):.2f}"),
        "depthError": f"{rng.uniform(0.1, 20.0):.2f}",
        "magError": _maybe(rng, f"{rng.uniform(0.01, 0.5):.3f}"),
        "magNst": _maybe(rng, str(rng.randint(1, 80))),
        "status": rng.choice(STATUSES),
        "locationSource": net,
        "magSource": net,
    }


def generate_data(files: int, rows_per_file: int, output_dir: str, seed: int = 42) -> list[Path]:
    """Write synthetic earthquake CSV files and return their paths.

    Each file gets its own generator seeded from (seed, file index), so the
    output is reproducible no matter how the threads are scheduled.
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def write_one(file_index: int) -> Path:
        rng = random.Random(seed * 1_000_003 + file_index)
        path = output_path / f"earthquakes-{file_index:03d}.csv"
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=FIELD_NAMES)
            writer.writeheader()
            first_id = file_index * rows_per_file
            for i in range(rows_per_file):
                writer.writerow(_fake_row(rng, first_id + i, start))
        logging.info(f"Wrote {rows_per_file:,} rows to {path}")
        return path

    # Launch all file writers in parallel threads
    futures = []
    with concurrent.futures.ThreadPoolExecutor(
            max_workers=min(files, os.cpu_count() or 4) or 1
    ) as executor:
        for file_index in range(files):
            futures.append(executor.submit(write_one, file_index))
        # Raise the first exception if any
        for fut in concurrent.futures.as_completed(futures):
            fut.result()

    return sorted(fut.result() for fut in futures)


if __name__ == "__main__":
    main()
