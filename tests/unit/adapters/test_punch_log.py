"""
Unit tests for biometric punch normalization.
"""

from datetime import date, datetime
from decimal import Decimal

import pytest

from shiftpay.adapters.punch_log import (
    normalize_direction,
    normalize_punch,
    normalize_punches,
    parse_adms_text_records,
)
from shiftpay.schemas.attendance import PunchDirection, ShiftDetectionInput
from shiftpay.services.shift_pairing import detect_shifts


class TestNormalizeDirection:
    """Tests for direction field mapping."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ({"punch_state": 0}, PunchDirection.IN),
            ({"punch_state": "1"}, PunchDirection.OUT),
            ({"inOutMode": 1}, PunchDirection.OUT),
            ({"in_out_mode": "0"}, PunchDirection.IN),
            ({"type": "in"}, PunchDirection.IN),
            ({"direction": " OUT "}, PunchDirection.OUT),
        ],
    )
    def test_known_fields(self, raw, expected):
        assert normalize_direction(raw) == expected

    def test_state_takes_precedence_over_type(self):
        assert normalize_direction({"punch_state": 1, "type": "IN"}) == PunchDirection.OUT

    def test_unknown_direction(self):
        assert normalize_direction({"punch_state": 5}) is None
        assert normalize_direction({"type": "BREAK"}) is None
        assert normalize_direction({"punch_state": True}) is None


class TestNormalizePunch:
    """Tests for normalize_punch."""

    def test_iso_string_with_z(self, local_timezone):
        """UTC timestamps become local wall-clock time."""
        local_timezone("Asia/Kolkata")
        punch = normalize_punch({"_id": "abc", "timestamp": "2025-01-15T08:00:00Z", "type": "IN"})

        assert punch.timestamp == datetime(2025, 1, 15, 13, 30)
        assert punch.timestamp.tzinfo is None
        assert punch.source_id == "abc"
        assert punch.direction == PunchDirection.IN

    def test_slash_dates(self):
        punch = normalize_punch({"id": 7, "timestamp": "2025/01/15 17:30:00", "punch_state": 1})

        assert punch.timestamp == datetime(2025, 1, 15, 17, 30)
        assert punch.source_id == "7"

    def test_derived_source_id_is_stable(self):
        raw = {"userId": "42", "timestamp": datetime(2025, 1, 15, 8, 0), "inOutMode": 0}

        first = normalize_punch(raw)
        second = normalize_punch(dict(raw))

        assert first.source_id == second.source_id
        assert first.source_id.startswith("42:")

    def test_bad_timestamp_dropped(self):
        assert normalize_punch({"timestamp": "not a date", "type": "IN"}) is None
        assert normalize_punch({"type": "IN"}) is None

    def test_unknown_direction_dropped(self):
        assert normalize_punch({"timestamp": "2025-01-15T08:00:00", "type": "LUNCH"}) is None


class TestNormalizePunches:
    """Tests for batch normalization."""

    def test_drops_unusable_records(self):
        raw = [
            {"_id": "1", "timestamp": "2025-01-15T08:00:00", "type": "IN"},
            {"_id": "2", "timestamp": None, "type": "OUT"},
            {"_id": "3", "timestamp": "2025-01-15T17:00:00", "type": "OUT"},
        ]
        assert [p.source_id for p in normalize_punches(raw)] == ["1", "3"]

    def test_none_input(self):
        assert normalize_punches(None) == []

    def test_mixed_timestamp_formats_pair(self, local_timezone):
        """Plain ISO, offset ISO and datetime punches form one comparable batch."""
        local_timezone("UTC")
        raw = [
            {"id": "a", "timestamp": "2025-01-15T08:00:00", "type": "IN"},
            {"id": "b", "timestamp": "2025-01-15T12:00:00Z", "type": "OUT"},
            {"id": "c", "timestamp": "2025-01-15T13:00:00+00:00", "type": "IN"},
            {"id": "d", "timestamp": datetime(2025, 1, 15, 17, 30), "type": "OUT"},
        ]
        punches = normalize_punches(raw)

        assert all(p.timestamp.tzinfo is None for p in punches)

        result = detect_shifts(
            ShiftDetectionInput(employee_id="EMP001", target_date=date(2025, 1, 15), punches=punches)
        )

        assert [(s.in_event_id, s.out_event_id) for s in result.shifts] == [("a", "b"), ("c", "d")]
        assert [s.working_hours for s in result.shifts] == [Decimal("4.00"), Decimal("4.50")]


class TestParseAdmsTextRecords:
    """Tests for ADMS push-protocol parsing."""

    def test_parses_lines(self):
        text = "table=ATTLOG\n1\t2025-12-23 00:50:00\t0\t0\t0\t0\n\n2\t2025-12-23 09:05:00\t1\t15\n"

        records = parse_adms_text_records(text)

        assert records == [
            {"userId": "1", "timestamp": datetime(2025, 12, 23, 0, 50), "inOutMode": 0, "status": 0},
            {"userId": "2", "timestamp": datetime(2025, 12, 23, 9, 5), "inOutMode": 1, "status": 15},
        ]

    def test_bad_lines_skipped(self):
        text = "1\tyesterday\t0\n3\n4\t2025-12-23 10:00:00"

        records = parse_adms_text_records(text)

        assert len(records) == 1
        assert records[0]["inOutMode"] == 0

    def test_records_feed_normalization(self):
        records = parse_adms_text_records("9\t2025-12-23 18:00:00\t1\t0")
        punch = normalize_punches(records)[0]

        assert punch.direction == PunchDirection.OUT
        assert punch.source_id.startswith("9:")
