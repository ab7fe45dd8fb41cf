"""
Unit tests for multi-shift detection.
"""

import random
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from shiftpay.schemas.attendance import (
    PunchDirection,
    Shift,
    ShiftDetectionInput,
    ShiftStatus,
)
from shiftpay.services.shift_pairing import (
    calculate_daily_totals,
    detect_shifts,
    filter_duplicate_ins,
    find_next_out,
    sort_punches,
)
from tests.factories import make_punch

DAY = date(2025, 1, 15)


def at(hour: int, minute: int = 0, day: date = DAY) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute)


def detect(punches, **kwargs):
    return detect_shifts(
        ShiftDetectionInput(employee_id="EMP001", target_date=DAY, punches=punches, **kwargs)
    )


class TestFilterDuplicateIns:
    """Tests for double-punch filtering."""

    def test_first_in_always_kept(self):
        """A single IN is kept."""
        punch = make_punch(at(8))
        kept, ignored = filter_duplicate_ins([punch])

        assert kept == [punch]
        assert ignored == []

    def test_in_within_threshold_is_ignored(self):
        """An IN 20 minutes after the last kept IN is dropped."""
        first, dup = make_punch(at(8)), make_punch(at(8, 20))
        notes = []
        kept, ignored = filter_duplicate_ins([first, dup], 60, notes)

        assert kept == [first]
        assert ignored == [dup]
        assert len(notes) == 1
        assert dup.source_id in notes[0]

    def test_gap_equal_to_threshold_is_kept(self):
        """Exactly 60 minutes apart counts as a new IN."""
        first, second = make_punch(at(8)), make_punch(at(9))
        kept, ignored = filter_duplicate_ins([first, second], 60)

        assert kept == [first, second]
        assert ignored == []

    def test_gap_measured_from_last_kept_in(self):
        """08:00, 08:40, 09:10 keeps 09:10 since it is 70 min after 08:00."""
        a, b, c = make_punch(at(8)), make_punch(at(8, 40)), make_punch(at(9, 10))
        kept, ignored = filter_duplicate_ins([a, b, c], 60)

        assert kept == [a, c]
        assert ignored == [b]

    def test_zero_threshold_keeps_everything(self):
        """A zero threshold disables filtering."""
        punches = [make_punch(at(8)), make_punch(at(8, 1))]
        kept, ignored = filter_duplicate_ins(punches, 0)

        assert kept == punches
        assert ignored == []


class TestFindNextOut:
    """Tests for OUT punch lookup."""

    def test_skips_consumed_and_earlier_outs(self):
        """Earlier and consumed OUTs are never returned."""
        early = make_punch(at(7), "OUT")
        used = make_punch(at(12), "OUT")
        free = make_punch(at(13), "OUT")

        result = find_next_out([early, used, free], at(8), {used.source_id})

        assert result is free

    def test_out_at_same_instant_not_paired(self):
        """An OUT must be strictly after the IN."""
        out = make_punch(at(8), "OUT")
        assert find_next_out([out], at(8), set()) is None

    def test_out_beyond_window_not_paired(self):
        """An OUT more than 24h after the IN is out of range."""
        out = make_punch(at(8) + timedelta(hours=24, minutes=1), "OUT")
        assert find_next_out([out], at(8), set()) is None

    def test_out_at_window_edge_is_paired(self):
        """Exactly 24h later is still inside the window."""
        out = make_punch(at(8) + timedelta(hours=24), "OUT")
        assert find_next_out([out], at(8), set()) is out


class TestDetectShifts:
    """Tests for detect_shifts."""

    def test_single_shift(self):
        """IN 09:00 / OUT 17:30 produces one 8.5h shift."""
        in_p, out_p = make_punch(at(9)), make_punch(at(17, 30), "OUT")
        result = detect([in_p, out_p])

        assert len(result.shifts) == 1
        shift = result.shifts[0]
        assert shift.sequence_number == 1
        assert shift.status == ShiftStatus.COMPLETE
        assert shift.in_event_id == in_p.source_id
        assert shift.out_event_id == out_p.source_id
        assert shift.duration_minutes == 510
        assert shift.working_hours == Decimal("8.50")

    def test_duplicate_in_and_two_shifts(self):
        """The documented split-shift example."""
        dup = make_punch(at(8, 20))
        punches = [
            make_punch(at(8)),
            dup,
            make_punch(at(12), "OUT"),
            make_punch(at(13)),
            make_punch(at(17, 30), "OUT"),
        ]
        result = detect(punches)

        assert [s.working_hours for s in result.shifts] == [Decimal("4.00"), Decimal("4.50")]
        assert [s.sequence_number for s in result.shifts] == [1, 2]
        assert result.ignored_in_event_ids == [dup.source_id]

    def test_input_order_does_not_matter(self):
        """Shuffled punches produce identical shifts."""
        punches = [
            make_punch(at(8)),
            make_punch(at(12), "OUT"),
            make_punch(at(13)),
            make_punch(at(17), "OUT"),
            make_punch(at(19)),
            make_punch(at(23), "OUT"),
        ]
        expected = detect(punches).shifts

        shuffled = list(punches)
        random.Random(7).shuffle(shuffled)

        assert detect(shuffled).shifts == expected

    def test_out_paired_at_most_once(self):
        """Two INs chasing a single OUT: the second is incomplete."""
        out = make_punch(at(17), "OUT")
        result = detect([make_punch(at(8)), make_punch(at(10)), out])

        assert result.shifts[0].out_event_id == out.source_id
        assert result.shifts[1].status == ShiftStatus.INCOMPLETE
        assert result.shifts[1].out_event_id is None

    def test_overnight_shift_pairs_with_next_day_out(self):
        """IN 22:00 pairs with OUT 06:00 the next day."""
        next_day = DAY + timedelta(days=1)
        result = detect([make_punch(at(22)), make_punch(at(6, day=next_day), "OUT")])

        assert len(result.shifts) == 1
        assert result.shifts[0].working_hours == Decimal("8.00")

    def test_in_on_other_day_is_ignored(self):
        """Only INs on the target date seed shifts."""
        prev_day = DAY - timedelta(days=1)
        result = detect([make_punch(at(23, day=prev_day)), make_punch(at(7), "OUT")])

        assert result.shifts == []
        assert any("No IN punches" in n for n in result.calculation_notes)

    def test_empty_input(self):
        """No punches gives no shifts and no ignored events."""
        result = detect([])

        assert result.shifts == []
        assert result.ignored_in_event_ids == []

    def test_no_out_marks_incomplete(self):
        """A lone IN yields an incomplete shift without hours."""
        result = detect([make_punch(at(9))])
        shift = result.shifts[0]

        assert shift.status == ShiftStatus.INCOMPLETE
        assert shift.duration_minutes is None
        assert shift.working_hours is None
        assert "Shift 1: no OUT punch, marked incomplete" in result.calculation_notes

    def test_max_shifts_caps_pairing(self):
        """Only the first max_shifts valid INs are paired."""
        punches = []
        for hour in (6, 10, 14, 18):
            punches.append(make_punch(at(hour)))
            punches.append(make_punch(at(hour + 2), "OUT"))

        result = detect(punches, max_shifts=3)

        assert len(result.shifts) == 3
        assert [s.in_time.hour for s in result.shifts] == [6, 10, 14]
        assert any("only the first 3" in n for n in result.calculation_notes)

    def test_default_max_shifts_is_three(self):
        """Without an explicit cap the configured default of 3 applies."""
        punches = [make_punch(at(h)) for h in (6, 9, 12, 15)]
        assert len(detect(punches).shifts) == 3

    def test_out_before_in_not_paired(self):
        """An OUT before every IN stays unused."""
        result = detect([make_punch(at(7), "OUT"), make_punch(at(9))])
        assert result.shifts[0].status == ShiftStatus.INCOMPLETE

    def test_custom_duplicate_threshold(self):
        """A 15 minute threshold keeps an IN 20 minutes later."""
        result = detect([make_punch(at(8)), make_punch(at(8, 20))], duplicate_threshold_minutes=15)
        assert len(result.shifts) == 2

    def test_duration_rounding(self):
        """Seconds are rounded half-up to whole minutes."""
        in_p = make_punch(at(9))
        out_p = make_punch(at(9) + timedelta(minutes=90, seconds=30), "OUT")
        shift = detect([in_p, out_p]).shifts[0]

        assert shift.duration_minutes == 91
        assert shift.working_hours == Decimal("1.51")

    def test_shifts_ordered_and_non_overlapping(self):
        """Complete shifts are chronological and never overlap."""
        punches = [
            make_punch(at(h))
            for h in (7, 12, 18)
        ] + [
            make_punch(at(h), "OUT")
            for h in (11, 16, 23)
        ]
        shifts = detect(punches).shifts

        for earlier, later in zip(shifts, shifts[1:]):
            assert earlier.in_time < later.in_time
            assert earlier.out_time <= later.in_time

    def test_aware_timestamps_use_local_zone(self, local_timezone):
        """An IN at 20:00 UTC is the next calendar day in Asia/Kolkata."""
        local_timezone("Asia/Kolkata")
        in_p = make_punch(datetime(2025, 1, 14, 20, 0, tzinfo=timezone.utc))
        out_p = make_punch(datetime(2025, 1, 15, 4, 0, tzinfo=timezone.utc), "OUT")

        result = detect([in_p, out_p])

        assert len(result.shifts) == 1
        assert result.shifts[0].working_hours == Decimal("8.00")

    def test_mixed_naive_and_aware_punches(self, local_timezone):
        """A naive IN and an aware OUT pair on local wall-clock time."""
        local_timezone("Asia/Kolkata")
        in_p = make_punch(at(9))
        out_p = make_punch(datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc), "OUT")

        shift = detect([in_p, out_p]).shifts[0]

        assert shift.out_time == at(17, 30)
        assert shift.working_hours == Decimal("8.50")


class TestSortPunches:
    """Tests for deterministic punch ordering."""

    def test_ties_broken_by_source_id(self):
        """Same-instant punches sort by source id."""
        b = make_punch(at(8), source_id="b")
        a = make_punch(at(8), "OUT", source_id="a")

        assert sort_punches([b, a]) == [a, b]
        assert sort_punches([b, a])[0].direction == PunchDirection.OUT


class TestDailyTotals:
    """Tests for calculate_daily_totals."""

    def test_empty(self):
        """No shifts gives zeroed totals."""
        totals = calculate_daily_totals([])

        assert totals.shift_count == 0
        assert totals.total_working_hours == Decimal("0")
        assert totals.first_in_time is None
        assert totals.last_out_time is None

    def test_sums_complete_shifts_only(self):
        """Incomplete shifts count towards shift_count but not hours."""
        complete = Shift(
            sequence_number=1,
            in_time=at(8),
            out_time=at(12),
            in_event_id="i1",
            out_event_id="o1",
            status=ShiftStatus.COMPLETE,
            duration_minutes=240,
            working_hours=Decimal("4.00"),
            ot_hours=Decimal("0.5"),
        )
        incomplete = Shift(
            sequence_number=2,
            in_time=at(13),
            in_event_id="i2",
            status=ShiftStatus.INCOMPLETE,
            ot_hours=Decimal("3"),
        )

        totals = calculate_daily_totals([complete, incomplete])

        assert totals.shift_count == 2
        assert totals.total_working_hours == Decimal("4.00")
        assert totals.total_overtime_hours == Decimal("0.50")
        assert totals.first_in_time == at(8)
        assert totals.last_out_time is None

    def test_totals_from_detection(self):
        """Totals of the split-shift example add to 8.50 hours."""
        punches = [
            make_punch(at(8)),
            make_punch(at(12), "OUT"),
            make_punch(at(13)),
            make_punch(at(17, 30), "OUT"),
        ]
        totals = calculate_daily_totals(detect(punches).shifts)

        assert totals.total_working_hours == Decimal("8.50")
        assert totals.first_in_time == at(8)
        assert totals.last_out_time == at(17, 30)
