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

"""Exception types raised by QuakeBench."""


class QuakeBenchError(Exception):
    """Base class for all QuakeBench errors."""


class EngineNotReadyError(QuakeBenchError, RuntimeError):
    """An engine operation was called before connect()."""

    def __init__(self, engine: str) -> None:
        super().__init__(
            f"Connection not established for engine '{engine}'. Call connect() first."
        )
        self.engine = engine


class QueryError(QuakeBenchError, ValueError):
    """A query cannot be evaluated against the record model."""


class UnsupportedOperatorError(QueryError):
    """A filter uses an operator outside the supported set."""

    def __init__(self, operator: object) -> None:
        super().__init__(f"Unknown filter operator: {operator!r}")
        self.operator = operator


class RecordParseError(QuakeBenchError, ValueError):
    """A CSV row could not be turned into an EarthquakeRecord."""
