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
Benchmark Result Reporting

This module provides utilities for formatting and outputting phase timings.
"""

import csv
import json
import statistics
import sys
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, TextIO

from quakebench.engine_base import PHASES, PhaseResult


def _phase_order(phase: str) -> tuple[int, str]:
    # Known phases in run order, anything else after them alphabetically
    return (PHASES.index(phase) if phase in PHASES else len(PHASES), phase)


@dataclass
class BenchmarkSummary:
    """Summary statistics for one engine's benchmark run.

    Attributes:
        engine: Engine name
        total_phases: Number of phase executions recorded
        successful_phases: Number of phase executions that succeeded
        failed_phases: Number of phase executions that failed
        total_time: Total time of all successful phases
        results: List of individual phase results
        engine_version: Version of the storage engine
        table: Table queried
        iterations: Number of search/count iterations
        query: Description of the query that was run
    """

    engine: str
    total_phases: int = 0
    successful_phases: int = 0
    failed_phases: int = 0
    total_time: float = 0.0
    results: list[PhaseResult] = field(default_factory=list)
    engine_version: str = "unknown"
    table: str = ""
    iterations: int = 1
    query: dict[str, Any] = field(default_factory=dict)
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())

    def add_result(self, result: PhaseResult) -> None:
        """Add a phase result to the summary."""
        self.results.append(result)
        self.total_phases += 1
        if result.success:
            self.successful_phases += 1
            self.total_time += result.duration_seconds
        else:
            self.failed_phases += 1

    def get_aggregated_results(self) -> dict[str, dict]:
        """Get results aggregated by phase (for multi-iteration runs).

        Returns:
            Dictionary mapping phase names to aggregated statistics:
            {
                "search": {
                    "min": 0.1,
                    "max": 0.2,
                    "mean": 0.15,
                    "median": 0.15,
                    "std_dev": 0.05,
                    "iterations": 3,
                    "success_rate": 1.0,
                    "row_count": 10
                }
            }
        """
        by_phase: dict[str, list[PhaseResult]] = {}
        for result in self.results:
            by_phase.setdefault(result.phase, []).append(result)

        aggregated = {}
        for phase in sorted(by_phase, key=_phase_order):
            results = by_phase[phase]
            successful = [r for r in results if r.success]
            times = [r.duration_seconds for r in successful]

            if times:
                aggregated[phase] = {
                    "min": min(times),
                    "max": max(times),
                    "mean": statistics.mean(times),
                    "median": statistics.median(times),
                    "std_dev": statistics.stdev(times) if len(times) > 1 else 0.0,
                    "iterations": len(results),
                    "successful_iterations": len(successful),
                    "success_rate": len(successful) / len(results),
                    "row_count": successful[-1].row_count,
                }
            else:
                aggregated[phase] = {
                    "min": None,
                    "max": None,
                    "mean": None,
                    "median": None,
                    "std_dev": None,
                    "iterations": len(results),
                    "successful_iterations": 0,
                    "success_rate": 0.0,
                    "row_count": None,
                    "errors": [r.error_message for r in results if r.error_message],
                }

        return aggregated

    def to_dict(self) -> dict:
        """Convert summary to dictionary for JSON serialization."""
        return {
            "engine": self.engine,
            "engine_version": self.engine_version,
            "table": self.table,
            "iterations": self.iterations,
            "query": self.query,
            "timestamp": self.timestamp,
            "summary": {
                "total_phases": self.total_phases,
                "successful_phases": self.successful_phases,
                "failed_phases": self.failed_phases,
                "total_time_seconds": self.total_time,
            },
            "aggregated_results": self.get_aggregated_results(),
            "raw_results": [r.to_dict() for r in self.results],
        }


def print_results_table(
    results: list[PhaseResult],
    file: Optional[TextIO] = None,
    show_iteration: bool = False,
) -> None:
    """Print phase results as an ASCII table.

    Args:
        results: List of phase results to display
        file: Output file (defaults to stdout)
        show_iteration: Whether to show iteration column
    """
    if file is None:
        file = sys.stdout

    if show_iteration:
        headers = ["Phase", "Engine", "Iter", "Duration (s)", "Rows", "Status"]
        widths = [10, 12, 4, 14, 10, 8]
    else:
        headers = ["Phase", "Engine", "Duration (s)", "Rows", "Status"]
        widths = [10, 12, 14, 10, 8]

    header_line = " | ".join(h.ljust(w) for h, w in zip(headers, widths))
    separator = "-+-".join("-" * w for w in widths)

    print(separator, file=file)
    print(header_line, file=file)
    print(separator, file=file)

    for result in results:
        status = "OK" if result.success else "FAIL"
        duration = f"{result.duration_seconds:.4f}" if result.success else "-"
        rows = str(result.row_count) if result.success else "-"

        row = [result.phase.ljust(widths[0]), result.engine.ljust(widths[1])]
        if show_iteration:
            row.append(str(result.iteration).ljust(widths[2]))
        row += [
            duration.rjust(widths[-3]),
            rows.rjust(widths[-2]),
            status.ljust(widths[-1]),
        ]

        print(" | ".join(row), file=file)

    print(separator, file=file)


def print_aggregated_table(
    summary: BenchmarkSummary,
    file: Optional[TextIO] = None,
) -> None:
    """Print aggregated phase timings (for multi-iteration runs).

    Args:
        summary: Benchmark summary with results
        file: Output file (defaults to stdout)
    """
    if file is None:
        file = sys.stdout

    aggregated = summary.get_aggregated_results()

    headers = ["Phase", "Engine", "Mean (s)", "Median (s)", "Min (s)", "Max (s)", "StdDev", "Success"]
    widths = [10, 12, 10, 10, 10, 10, 8, 8]

    header_line = " | ".join(h.ljust(w) for h, w in zip(headers, widths))
    separator = "-+-".join("-" * w for w in widths)

    print(separator, file=file)
    print(header_line, file=file)
    print(separator, file=file)

    for phase, stats in aggregated.items():
        success_rate = f"{stats['success_rate']*100:.0f}%"

        if stats["mean"] is not None:
            timings = [
                f"{stats[key]:.4f}".rjust(width)
                for key, width in zip(("mean", "median", "min", "max", "std_dev"), widths[2:7])
            ]
        else:
            timings = ["-".rjust(width) for width in widths[2:7]]

        row = [phase.ljust(widths[0]), summary.engine.ljust(widths[1])]
        row += timings
        row.append(success_rate.rjust(widths[7]))
        print(" | ".join(row), file=file)

    print(separator, file=file)


def print_comparison_table(
    summaries: list[BenchmarkSummary],
    file: Optional[TextIO] = None,
) -> None:
    """Print side-by-side comparison of multiple engines.

    Args:
        summaries: List of benchmark summaries to compare
        file: Output file (defaults to stdout)
    """
    if file is None:
        file = sys.stdout

    if not summaries:
        print("No results to compare", file=file)
        return

    all_phases = set()
    for summary in summaries:
        all_phases.update(summary.get_aggregated_results().keys())
    sorted_phases = sorted(all_phases, key=_phase_order)

    engine_names = [s.engine for s in summaries]
    headers = ["Phase"] + [f"{name} (s)" for name in engine_names]
    widths = [10] + [14] * len(engine_names)

    header_line = " | ".join(h.ljust(w) for h, w in zip(headers, widths))
    separator = "-+-".join("-" * w for w in widths)

    print("\n" + "=" * len(separator), file=file)
    print("COMPARISON: Mean Phase Times", file=file)
    print("=" * len(separator), file=file)
    print(header_line, file=file)
    print(separator, file=file)

    for phase in sorted_phases:
        row = [phase.ljust(widths[0])]

        for i, summary in enumerate(summaries):
            agg = summary.get_aggregated_results()
            if phase in agg and agg[phase]["mean"] is not None:
                row.append(f"{agg[phase]['mean']:.4f}".rjust(widths[i + 1]))
            else:
                row.append("-".rjust(widths[i + 1]))

        print(" | ".join(row), file=file)

    print(separator, file=file)

    row = ["TOTAL".ljust(widths[0])]
    for i, summary in enumerate(summaries):
        row.append(f"{summary.total_time:.4f}".rjust(widths[i + 1]))
    print(" | ".join(row), file=file)
    print(separator, file=file)


CSV_COLUMNS = [
    "engine",
    "phase",
    "mean_seconds",
    "median_seconds",
    "min_seconds",
    "max_seconds",
    "std_dev",
    "iterations",
    "success_rate",
    "row_count",
]


def _csv_rows(summary: BenchmarkSummary) -> list[list[Any]]:
    return [
        [
            summary.engine,
            phase,
            stats["mean"],
            stats["median"],
            stats["min"],
            stats["max"],
            stats["std_dev"],
            stats["iterations"],
            stats["success_rate"],
            stats["row_count"],
        ]
        for phase, stats in summary.get_aggregated_results().items()
    ]


def save_json(summaries: list[BenchmarkSummary], output_path: Path) -> None:
    """Save benchmark results to a JSON file.

    A single summary is written as-is; several are wrapped in a comparison
    document.

    Args:
        summaries: Benchmark summaries to save
        output_path: Path to output file
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)

    if len(summaries) == 1:
        document = summaries[0].to_dict()
    else:
        document = {
            "comparison": True,
            "timestamp": datetime.now().isoformat(),
            "engines": [s.to_dict() for s in summaries],
        }

    with open(output_path, "w") as f:
        json.dump(document, f, indent=2)


def save_csv(summaries: list[BenchmarkSummary], output_path: Path) -> None:
    """Save aggregated phase timings of every summary to a CSV file.

    Args:
        summaries: Benchmark summaries to save
        output_path: Path to output file
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_COLUMNS)
        for summary in summaries:
            writer.writerows(_csv_rows(summary))
