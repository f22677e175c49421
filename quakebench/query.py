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
Query Model and SQL Translation

A query is a limit, an offset and a flat list of filters combined with AND.
This module renders queries to SQL for the database engines and evaluates
them in memory for the CSV engine. Both paths reject unknown operators with
UnsupportedOperatorError.

Field names and values are interpolated into the SQL text verbatim; callers
must only pass trusted input.
"""

import operator
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Union

from quakebench.errors import QueryError, UnsupportedOperatorError
from quakebench.records import FIELD_KINDS, TEXT, EarthquakeRecord

FilterValue = Union[str, int, float]

DEFAULT_LIMIT = 10
DEFAULT_OFFSET = 0


class FilterOperator(Enum):
    """Comparison operators supported by filters."""

    EQUAL = "equal"
    NOT_EQUAL = "not_equal"
    LESS_THAN = "less_than"
    GREATER_THAN = "greater_than"


_SQL_SYMBOLS: dict[FilterOperator, str] = {
    FilterOperator.EQUAL: "=",
    FilterOperator.NOT_EQUAL: "!=",
    FilterOperator.LESS_THAN: "<",
    FilterOperator.GREATER_THAN: ">",
}

_COMPARATORS: dict[FilterOperator, Callable[[Any, Any], bool]] = {
    FilterOperator.EQUAL: operator.eq,
    FilterOperator.NOT_EQUAL: operator.ne,
    FilterOperator.LESS_THAN: operator.lt,
    FilterOperator.GREATER_THAN: operator.gt,
}

_SYMBOL_OPERATORS = {symbol: op for op, symbol in _SQL_SYMBOLS.items()}

# Longest symbol first so "!=" is not read as "="; ">=" and "<=" are rejected
_FILTER_EXPR = re.compile(r"^\s*(\w+)\s*(!=|=|<|>)(?![=<>])\s*(.*?)\s*$")


@dataclass(frozen=True)
class Filter:
    """A single (field, operator, value) condition.

    The field name is not checked here; an unknown field fails when the
    query runs.
    """

    field: str
    operator: FilterOperator
    value: FilterValue


@dataclass
class Query:
    """Pagination plus an ordered list of filters."""

    limit: int = DEFAULT_LIMIT
    offset: int = DEFAULT_OFFSET
    filters: list[Filter] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.limit < 0:
            raise ValueError(f"limit must be >= 0, got {self.limit}")
        if self.offset < 0:
            raise ValueError(f"offset must be >= 0, got {self.offset}")

    def add_filter(self, flt: Filter) -> "Query":
        self.filters.append(flt)
        return self


def operator_symbol(op: FilterOperator) -> str:
    """Return the SQL comparison symbol for an operator.

    Raises:
        UnsupportedOperatorError: If op is not a known FilterOperator
    """
    try:
        return _SQL_SYMBOLS[op]
    except (KeyError, TypeError):
        raise UnsupportedOperatorError(op) from None


def where_clause(filters: list[Filter]) -> str:
    """Render filters as an AND-joined condition, preserving their order."""
    return " AND ".join(
        f"{flt.field} {operator_symbol(flt.operator)} '{flt.value}'" for flt in filters
    )


def to_search_sql(table: str, query: Query) -> str:
    """Build the paginated SELECT statement for a query."""
    sql = f"SELECT * FROM {table}"
    if query.filters:
        sql = f"{sql} WHERE {where_clause(query.filters)}"
    return f"{sql} LIMIT {query.limit} OFFSET {query.offset}"


def to_count_sql(table: str, query: Query) -> str:
    """Build the COUNT statement for a query (pagination does not apply)."""
    sql = f"SELECT COUNT(*) FROM {table}"
    if query.filters:
        sql = f"{sql} WHERE {where_clause(query.filters)}"
    return sql


def _comparable(field_name: str, value: FilterValue) -> Any:
    if FIELD_KINDS[field_name] == TEXT:
        return str(value)
    try:
        return float(value)
    except (TypeError, ValueError):
        raise QueryError(
            f"Field '{field_name}' is numeric but the filter value is {value!r}"
        ) from None


def filter_matches(record: EarthquakeRecord, flt: Filter) -> bool:
    """Evaluate one filter against a record.

    The filter value is coerced to the field's kind before comparing, so
    ``mag > "1"`` and ``mag > 1`` behave the same, as they do in SQL.

    Raises:
        QueryError: If the field does not exist or the value cannot be coerced
        UnsupportedOperatorError: If the operator is unknown
    """
    if flt.field not in FIELD_KINDS:
        raise QueryError(f"Unknown field '{flt.field}'")
    try:
        compare = _COMPARATORS[flt.operator]
    except (KeyError, TypeError):
        raise UnsupportedOperatorError(flt.operator) from None
    return compare(getattr(record, flt.field), _comparable(flt.field, flt.value))


def matches(record: EarthquakeRecord, filters: list[Filter]) -> bool:
    """Return True when the record satisfies every filter."""
    return all(filter_matches(record, flt) for flt in filters)


def parse_filter(expr: str) -> Filter:
    """Parse a CLI filter expression such as ``mag>1`` or ``net=us``.

    Values for numeric fields become int or float; values for text fields
    and unknown fields keep their exact text.

    Raises:
        ValueError: If the expression is not ``<field><op><value>``
    """
    match = _FILTER_EXPR.match(expr)
    if match is None:
        raise ValueError(
            f"Invalid filter '{expr}'. Expected <field><op><value> with op one of "
            f"{', '.join(_SYMBOL_OPERATORS)}"
        )
    field_name, symbol, raw = match.groups()
    value: FilterValue = raw
    if FIELD_KINDS.get(field_name, TEXT) != TEXT:
        for convert in (int, float):
            try:
                value = convert(raw)
                break
            except ValueError:
                continue
    return Filter(field_name, _SYMBOL_OPERATORS[symbol], value)
