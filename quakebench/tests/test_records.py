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
Tests for the earthquake record model.

These tests verify:
1. The 22-field layout and its kinds
2. Defaults for missing and empty values
3. Numeric parsing and malformed value rejection
"""

import pytest

from quakebench.errors import RecordParseError
from quakebench.records import (
    FIELD_KINDS,
    FIELD_NAMES,
    INTEGER,
    NULL_MARKER,
    TEXT,
    EarthquakeRecord,
    coerce_value,
)
from quakebench.tests.conftest import make_row


class TestFieldLayout:
    """Tests for the fixed record layout."""

    def test_has_22_fields(self):
        """The record model has exactly 22 fields."""
        assert len(FIELD_NAMES) == 22

    def test_dataclass_matches_field_order(self):
        """EarthquakeRecord fields follow the column order."""
        record = EarthquakeRecord()
        assert tuple(record.to_dict().keys()) == FIELD_NAMES

    def test_integer_fields(self):
        """Only nst and magNst are integer columns."""
        integers = {name for name, kind in FIELD_KINDS.items() if kind == INTEGER}
        assert integers == {"nst", "magNst"}

    def test_identifying_fields_are_text(self):
        """id, place and net are text columns."""
        for name in ("id", "place", "net", "FF"):
            assert FIELD_KINDS[name] == TEXT


class TestFromRow:
    """Tests for EarthquakeRecord.from_row()."""

    def test_parses_complete_row(self):
        """A complete row is converted to typed values."""
        record = EarthquakeRecord.from_row(make_row("ev1", 1.5))

        assert record.id == "ev1"
        assert record.mag == 1.5
        assert record.nst == 12
        assert isinstance(record.nst, int)
        assert record.gap == 71.5
        assert record.place == "10 km N of Anchorage, Alaska"

    def test_missing_numeric_defaults_to_zero(self):
        """A missing mag column becomes 0."""
        row = make_row("ev1", 1.0)
        del row["mag"]

        record = EarthquakeRecord.from_row(row)

        assert record.mag == 0

    def test_empty_numeric_defaults_to_zero(self):
        """Empty numeric strings become 0."""
        record = EarthquakeRecord.from_row(make_row("ev1", 1.0, nst="", dmin=" "))

        assert record.nst == 0
        assert record.dmin == 0.0

    def test_missing_text_defaults_to_null_marker(self):
        """A missing or empty place becomes the null marker."""
        row = make_row("ev1", 1.0, magSource="")
        del row["place"]

        record = EarthquakeRecord.from_row(row)

        assert record.place == NULL_MARKER
        assert record.magSource == NULL_MARKER

    def test_extra_columns_ignored(self):
        """Columns outside the model are dropped."""
        record = EarthquakeRecord.from_row(make_row("ev1", 1.0, unexpected="x"))

        assert not hasattr(record, "unexpected")

    def test_every_field_populated(self):
        """An empty row still yields a fully populated record."""
        record = EarthquakeRecord.from_row({})

        assert len(record.as_tuple()) == 22
        assert all(value is not None for value in record.as_tuple())

    def test_non_numeric_value_raises(self):
        """Text in a numeric column raises RecordParseError."""
        with pytest.raises(RecordParseError, match="mag"):
            EarthquakeRecord.from_row(make_row("ev1", "strong"))

    def test_integral_float_text_accepted_for_integer(self):
        """'12.0' is accepted for an integer column."""
        assert coerce_value("nst", "12.0") == 12

    def test_fractional_value_rejected_for_integer(self):
        """'12.5' is rejected for an integer column."""
        with pytest.raises(RecordParseError, match="integer"):
            coerce_value("magNst", "12.5")

    def test_integer_out_of_64_bit_range_rejected(self):
        """Integral values too large for a 64-bit column are rejected."""
        with pytest.raises(RecordParseError, match="64-bit"):
            coerce_value("nst", "1e20")
        with pytest.raises(RecordParseError, match="64-bit"):
            coerce_value("magNst", "-1e19")

    def test_integer_range_bounds_accepted(self):
        """The smallest 64-bit integer is still accepted."""
        assert coerce_value("nst", str(-(2 ** 63))) == -(2 ** 63)

    def test_unknown_field_raises_key_error(self):
        """coerce_value() only knows record fields."""
        with pytest.raises(KeyError):
            coerce_value("magnitude", "1")
