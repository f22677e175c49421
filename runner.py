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

"""
QuakeBench Benchmark Runner

A CLI tool that loads earthquake CSV files into storage engines, runs a
filtered search and a count against each, and reports how long every phase
took.

Usage Examples:
    # Populate SQLite from ./data and run the default query (1 < mag < 2)
    python runner.py --engine sqlite --data-dir ./data

    # Custom filters and pagination
    python runner.py --engine duckdb --filter "mag>4" --filter "net=us" --limit 100

    # Compare all engines over 5 iterations and save results
    python runner.py --engine all --iterations 5 --output results.json

    # List available engines
    python runner.py --list-engines
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from quakebench.config import BenchmarkConfig
from quakebench.engine_base import (
    PHASE_COUNT,
    PHASE_POPULATE,
    PHASE_SEARCH,
    BenchmarkEngine,
    PhaseResult,
    TimedExecution,
)
from quakebench.engines import get_engine, list_engines
from quakebench.query import Query, parse_filter
from quakebench.reporting import (
    BenchmarkSummary,
    print_aggregated_table,
    print_comparison_table,
    print_results_table,
    save_csv,
    save_json,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

DEFAULT_FILTERS = ["mag>1", "mag<2"]


def build_query(limit: int, offset: int, filter_exprs: Optional[list[str]]) -> Query:
    """Build a Query from CLI values; no expressions means the default filters."""
    query = Query(limit=limit, offset=offset)
    for expr in filter_exprs if filter_exprs is not None else DEFAULT_FILTERS:
        query.add_filter(parse_filter(expr))
    return query


def describe_query(query: Query) -> dict:
    """Return a JSON-friendly description of a query for reports."""
    return {
        "limit": query.limit,
        "offset": query.offset,
        "filters": [
            {"field": f.field, "operator": f.operator.value, "value": f.value}
            for f in query.filters
        ],
    }


def run_benchmark(
    engine: BenchmarkEngine,
    table: str,
    data_dir: Path,
    query: Query,
    iterations: int = 1,
) -> BenchmarkSummary:
    """Run the populate/search/count phases against a connected engine.

    Errors raised by the engine are not caught here.

    Args:
        engine: A connected storage engine
        table: Table to create, populate and query
        data_dir: Directory containing the CSV files
        query: Query used for the search and count phases
        iterations: Number of times to run search and count

    Returns:
        BenchmarkSummary with all results
    """
    summary = BenchmarkSummary(
        engine=engine.name,
        table=table,
        iterations=iterations,
        query=describe_query(query),
    )
    summary.engine_version = engine.get_version()
    logger.info(f"Engine version: {summary.engine_version}")

    engine.ensure_schema(table)

    if not engine.has_records(table):
        print(f"Populating table {table}")
        with TimedExecution() as timer:
            inserted = engine.populate(table, data_dir)
        summary.add_result(
            PhaseResult(
                phase=PHASE_POPULATE,
                engine=engine.name,
                success=True,
                duration_seconds=timer.elapsed,
                row_count=inserted,
            )
        )
        print(f"Populate took {timer.elapsed:.3f} seconds.")
    else:
        print(f"Table {table} already has records.")

    for iteration in range(1, iterations + 1):
        if iterations > 1:
            logger.info(f"=== Iteration {iteration}/{iterations} ===")

        with TimedExecution() as timer:
            rows = engine.search(table, query)
        summary.add_result(
            PhaseResult(
                phase=PHASE_SEARCH,
                engine=engine.name,
                success=True,
                duration_seconds=timer.elapsed,
                row_count=len(rows),
                iteration=iteration,
            )
        )
        print(f"Search took {timer.elapsed:.3f} seconds ({len(rows)} rows).")

        with TimedExecution() as timer:
            total = engine.count(table, query)
        summary.add_result(
            PhaseResult(
                phase=PHASE_COUNT,
                engine=engine.name,
                success=True,
                duration_seconds=timer.elapsed,
                row_count=total,
                iteration=iteration,
            )
        )
        print(f"Total: {total}")
        print(f"Count took {timer.elapsed:.3f} seconds.")

    return summary


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the benchmark runner."""
    parser = argparse.ArgumentParser(
        description="QuakeBench Benchmark Runner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --engine sqlite --data-dir ./data
  %(prog)s --engine duckdb --filter "mag>4" --filter "net=us" --limit 100
  %(prog)s --engine all --iterations 5 --output results.json
  %(prog)s --list-engines

ClickHouse credentials are read from CLICKHOUSE_HOST, CLICKHOUSE_PORT,
CLICKHOUSE_USERNAME, CLICKHOUSE_PASSWORD and CLICKHOUSE_DATABASE.
        """,
    )

    # Engine selection
    parser.add_argument(
        "--engine",
        "-e",
        type=str,
        help=f"Storage engine to use. Use 'all' to run all engines. "
        f"Available: {', '.join(list_engines())}",
    )

    # Data configuration
    parser.add_argument(
        "--data-dir",
        "-d",
        type=Path,
        help="Directory containing earthquake CSV files (default: $QUAKEBENCH_DATA_DIR or ./data)",
    )

    parser.add_argument(
        "--table",
        "-t",
        type=str,
        help="Table name (default: $QUAKEBENCH_TABLE or earthquakes)",
    )

    parser.add_argument(
        "--sqlite-path",
        type=Path,
        help="SQLite database file (default: $QUAKEBENCH_SQLITE_PATH or earthquakes.db)",
    )

    parser.add_argument(
        "--duckdb-path",
        type=str,
        help="DuckDB database file (default: $QUAKEBENCH_DUCKDB_PATH or earthquakes.duckdb)",
    )

    # Query configuration
    parser.add_argument(
        "--filter",
        "-f",
        action="append",
        dest="filters",
        metavar="EXPR",
        help="Filter as <field><op><value> with op one of =, !=, <, >. "
        "Repeat to combine with AND (default: mag>1 and mag<2)",
    )

    parser.add_argument(
        "--limit",
        type=int,
        default=10,
        help="Maximum rows returned by the search (default: 10)",
    )

    parser.add_argument(
        "--offset",
        type=int,
        default=0,
        help="Rows skipped by the search (default: 0)",
    )

    parser.add_argument(
        "--iterations",
        "-n",
        type=int,
        default=1,
        help="Number of search/count iterations (default: 1)",
    )

    # Output configuration
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        help="Output file path for results (JSON or CSV based on extension)",
    )

    parser.add_argument(
        "--output-format",
        type=str,
        choices=["json", "csv"],
        default="json",
        help="Output format when extension is ambiguous (default: json)",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose (debug) logging",
    )

    # Information commands
    parser.add_argument(
        "--list-engines",
        action="store_true",
        help="List available storage engines and exit",
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        config = BenchmarkConfig.from_env().with_overrides(
            data_dir=args.data_dir,
            table_name=args.table,
            sqlite_path=args.sqlite_path,
            duckdb_path=args.duckdb_path,
        )
    except ValueError as e:
        logger.error(str(e))
        return 1

    if args.list_engines:
        print("Available storage engines:")
        for name in list_engines():
            engine = get_engine(name, config)
            query_type = "SQL" if engine.uses_sql else "in-memory filter"
            print(f"  - {name} ({engine.dialect}, {query_type})")
        return 0

    if not args.engine:
        parser.error("--engine is required")
    if args.iterations < 1:
        parser.error("--iterations must be at least 1")

    try:
        query = build_query(args.limit, args.offset, args.filters)
    except ValueError as e:
        parser.error(str(e))

    if not config.data_dir.exists():
        logger.error(f"Data directory not found: {config.data_dir}")
        return 1

    if args.engine.lower() == "all":
        engine_names = list_engines()
        logger.info(f"Running benchmarks on all engines: {', '.join(engine_names)}")
    else:
        engine_names = [args.engine.lower()]

    summaries: list[BenchmarkSummary] = []

    for engine_name in engine_names:
        try:
            engine = get_engine(engine_name, config)
        except ValueError as e:
            logger.error(str(e))
            return 1

        print(f"\n{'='*60}")
        print(f"Engine: {engine_name.upper()}")
        print(f"{'='*60}")

        try:
            with engine:
                summary = run_benchmark(
                    engine=engine,
                    table=config.table_name,
                    data_dir=config.data_dir,
                    query=query,
                    iterations=args.iterations,
                )
                summaries.append(summary)
        except Exception as e:
            logger.error(f"Benchmark failed for {engine_name}: {e}")
            if args.verbose:
                import traceback

                traceback.print_exc()
            continue

    if not summaries:
        logger.error("No benchmarks completed successfully")
        return 1

    print(f"\n{'='*60}")
    print("RESULTS")
    print(f"{'='*60}\n")

    for summary in summaries:
        print(f"Engine: {summary.engine} (v{summary.engine_version})")
        print(f"Table: {summary.table}")
        print(f"Iterations: {summary.iterations}")
        print(f"Total Time: {summary.total_time:.2f}s")
        print()

        if summary.iterations > 1:
            print_aggregated_table(summary)
        else:
            print_results_table(summary.results)
        print()

    if len(summaries) > 1:
        print_comparison_table(summaries)

    if args.output:
        output_path = args.output

        if output_path.suffix.lower() == ".csv":
            output_format = "csv"
        elif output_path.suffix.lower() == ".json":
            output_format = "json"
        else:
            output_format = args.output_format

        if output_format == "json":
            save_json(summaries, output_path)
        else:
            save_csv(summaries, output_path)

        logger.info(f"Results saved to {output_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
