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
Earthquake Record Model

Defines the fixed 22-field record shared by every engine. Rows coming out of
CSV files are normalized here before they reach a backend:
- numeric fields default to 0 when absent or empty
- text fields default to the NULL_MARKER string when absent or empty
"""

from dataclasses import astuple, dataclass, fields
from typing import Any, Mapping, Optional

from quakebench.errors import RecordParseError

NULL_MARKER = "NULL"

# Field kinds used by the schema builders and the in-memory predicate
FLOAT = "float"
INTEGER = "integer"
TEXT = "text"

# Integer columns are signed 64-bit in every SQL backend
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

# Column order matches the CSV header and the table layout
FIELD_KINDS: dict[str, str] = {
    "FF": TEXT,
    "latitude": FLOAT,
    "longitude": FLOAT,
    "depth": FLOAT,
    "mag": FLOAT,
    "magType": TEXT,
    "nst": INTEGER,
    "gap": FLOAT,
    "dmin": FLOAT,
    "rms": FLOAT,
    "net": TEXT,
    "id": TEXT,
    "updated": TEXT,
    "place": TEXT,
    "type": TEXT,
    "horizontalError": FLOAT,
    "depthError": FLOAT,
    "magError": FLOAT,
    "magNst": INTEGER,
    "status": TEXT,
    "locationSource": TEXT,
    "magSource": TEXT,
}

FIELD_NAMES: tuple[str, ...] = tuple(FIELD_KINDS)


@dataclass(frozen=True)
class EarthquakeRecord:
    """A single earthquake event with every field populated."""

    FF: str = NULL_MARKER
    latitude: float = 0.0
    longitude: float = 0.0
    depth: float = 0.0
    mag: float = 0.0
    magType: str = NULL_MARKER
    nst: int = 0
    gap: float = 0.0
    dmin: float = 0.0
    rms: float = 0.0
    net: str = NULL_MARKER
    id: str = NULL_MARKER
    updated: str = NULL_MARKER
    place: str = NULL_MARKER
    type: str = NULL_MARKER
    horizontalError: float = 0.0
    depthError: float = 0.0
    magError: float = 0.0
    magNst: int = 0
    status: str = NULL_MARKER
    locationSource: str = NULL_MARKER
    magSource: str = NULL_MARKER

    @classmethod
    def from_row(cls, row: Mapping[str, Optional[str]]) -> "EarthquakeRecord":
        """Build a normalized record from a header-keyed CSV row.

        Columns not in the record model are ignored and missing columns take
        their defaults.

        Raises:
            RecordParseError: If a numeric column holds a non-numeric value
        """
        values = {name: coerce_value(name, row.get(name)) for name in FIELD_NAMES}
        return cls(**values)

    def as_tuple(self) -> tuple[Any, ...]:
        """Return field values in column order, ready for a positional insert."""
        return astuple(self)

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def coerce_value(name: str, raw: Any) -> Any:
    """Convert a raw value to the kind of the named field, applying defaults.

    Raises:
        KeyError: If name is not a record field
        RecordParseError: If a numeric field holds a non-numeric value, or an
            integer field a fractional or out-of-range one
    """
    kind = FIELD_KINDS[name]
    if isinstance(raw, str):
        raw = raw.strip()
    if raw is None or raw == "":
        return NULL_MARKER if kind == TEXT else (0 if kind == INTEGER else 0.0)

    if kind == TEXT:
        return str(raw)

    try:
        number = float(raw)
    except (TypeError, ValueError) as e:
        raise RecordParseError(f"Field '{name}' expects a number, got {raw!r}") from e

    if kind == INTEGER:
        if not number.is_integer():
            raise RecordParseError(f"Field '{name}' expects an integer, got {raw!r}")
        value = int(number)
        if not INT64_MIN <= value <= INT64_MAX:
            raise RecordParseError(f"Field '{name}' is out of the 64-bit integer range: {raw!r}")
        return value
    return number
