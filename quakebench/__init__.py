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
QuakeBench Storage Benchmark

A small framework for timing how fast different storage engines load and
query earthquake catalog CSV files.

To add support for a new storage engine:
1. Create a new file in quakebench/engines/ (e.g., postgres_engine.py)
2. Subclass SQLBenchmarkEngine (or BenchmarkEngine for non-SQL engines)
   from quakebench.engine_base
3. Implement the abstract methods
4. Register your engine in quakebench/engines/__init__.py
"""

from quakebench.config import BenchmarkConfig
from quakebench.engine_base import BenchmarkEngine, PhaseResult, SQLBenchmarkEngine
from quakebench.engines import ENGINES, get_engine
from quakebench.query import Filter, FilterOperator, Query
from quakebench.records import EarthquakeRecord

__all__ = [
    "BenchmarkConfig",
    "BenchmarkEngine",
    "SQLBenchmarkEngine",
    "PhaseResult",
    "ENGINES",
    "get_engine",
    "Filter",
    "FilterOperator",
    "Query",
    "EarthquakeRecord",
]
