"""
Multi-Shift Detection Service

Pure pairing logic turning a day's raw, unordered punches into an
ordered list of IN/OUT shifts, plus the daily totals derived from them.
"""

import logging
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from zoneinfo import ZoneInfo

from shiftpay.config import get_settings
from shiftpay.schemas.attendance import (
    DailyTotals,
    PunchDirection,
    PunchEvent,
    Shift,
    ShiftDetectionInput,
    ShiftDetectionOutput,
    ShiftStatus,
)

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")


def to_local_naive(timestamp: datetime, tz: ZoneInfo | None = None) -> datetime:
    """
    Local wall-clock time of a punch, without tzinfo.

    Naive timestamps are already local. Aware ones are converted to
    ``tz``, or the system zone when ``tz`` is None, so a batch mixing
    both kinds stays comparable.
    """
    if timestamp.tzinfo is None:
        return timestamp
    return timestamp.astimezone(tz).replace(tzinfo=None)


def local_zone() -> ZoneInfo | None:
    """Configured local zone, None for the system zone."""
    local_timezone = get_settings().local_timezone
    return ZoneInfo(local_timezone) if local_timezone else None


def _minutes_between(start: datetime, end: datetime) -> Decimal:
    return Decimal(str((end - start).total_seconds())) / Decimal("60")


def sort_punches(punches: list[PunchEvent]) -> list[PunchEvent]:
    """Sort punches chronologically; equal instants are ordered by source id."""
    return sorted(punches, key=lambda p: (p.timestamp, p.source_id))


def filter_duplicate_ins(
    in_punches: list[PunchEvent],
    threshold_minutes: int = 60,
    notes: list[str] | None = None,
) -> tuple[list[PunchEvent], list[PunchEvent]]:
    """
    Drop IN punches that follow the last kept IN too closely.

    The first IN is always kept. A later IN is kept only if it is at
    least ``threshold_minutes`` after the last *kept* IN, which absorbs
    double-punch noise from biometric devices.

    Args:
        in_punches: IN punches sorted by timestamp
        threshold_minutes: Minimum gap between kept INs
        notes: Optional list receiving one note per dropped IN

    Returns:
        Tuple of (kept, ignored) punches
    """
    kept: list[PunchEvent] = []
    ignored: list[PunchEvent] = []
    threshold = Decimal(threshold_minutes)

    for punch in in_punches:
        if not kept:
            kept.append(punch)
            continue

        gap = _minutes_between(kept[-1].timestamp, punch.timestamp)
        if gap >= threshold:
            kept.append(punch)
        else:
            ignored.append(punch)
            if notes is not None:
                notes.append(
                    f"Ignored duplicate IN {punch.source_id} at {punch.timestamp.isoformat()} "
                    f"(gap {gap:.2f} min < {threshold_minutes} min)"
                )

    return kept, ignored


def find_next_out(
    out_punches: list[PunchEvent],
    in_timestamp: datetime,
    consumed: set[str],
    window: timedelta = timedelta(hours=24),
) -> PunchEvent | None:
    """
    Earliest unconsumed OUT strictly after ``in_timestamp`` and within ``window``.

    ``out_punches`` must be sorted; the first match in that order wins.
    """
    for out_punch in out_punches:
        if out_punch.source_id in consumed:
            continue
        if out_punch.timestamp <= in_timestamp:
            continue
        if out_punch.timestamp - in_timestamp > window:
            # Sorted, so every later OUT is outside the window as well
            return None
        return out_punch
    return None


def detect_shifts(input_data: ShiftDetectionInput) -> ShiftDetectionOutput:
    """
    Detect and pair up to ``max_shifts`` shifts for one employee and date.

    Algorithm:
    1. Convert timestamps to local wall-clock time and sort them
    2. Take IN punches whose local date is the target date; take every
       OUT punch regardless of date (overnight shifts end after midnight)
    3. Drop duplicate INs closer than the threshold to the last kept IN
    4. Pair each kept IN with the earliest unconsumed OUT after it and
       within the pairing window; an OUT pairs with at most one IN
    5. Compute duration and working hours for complete shifts
    """
    settings = get_settings()
    max_shifts = input_data.max_shifts or settings.max_shifts_per_day
    threshold = (
        input_data.duplicate_threshold_minutes
        if input_data.duplicate_threshold_minutes is not None
        else settings.duplicate_in_threshold_minutes
    )
    window = timedelta(hours=input_data.pairing_window_hours or settings.pairing_window_hours)
    tz = local_zone()

    notes: list[str] = []
    punches = sort_punches([
        p.model_copy(update={"timestamp": to_local_naive(p.timestamp, tz)})
        for p in input_data.punches
    ])

    ins = [
        p
        for p in punches
        if p.direction == PunchDirection.IN and p.timestamp.date() == input_data.target_date
    ]
    outs = [p for p in punches if p.direction == PunchDirection.OUT]

    if not ins:
        notes.append(f"No IN punches on {input_data.target_date.isoformat()}")
        return ShiftDetectionOutput(
            employee_id=input_data.employee_id,
            target_date=input_data.target_date,
            calculation_notes=notes,
        )

    valid_ins, ignored_ins = filter_duplicate_ins(ins, threshold, notes)

    if len(valid_ins) > max_shifts:
        notes.append(
            f"{len(valid_ins)} valid INs found; only the first {max_shifts} are paired"
        )

    shifts: list[Shift] = []
    consumed: set[str] = set()

    for sequence, in_punch in enumerate(valid_ins[:max_shifts], start=1):
        out_punch = find_next_out(outs, in_punch.timestamp, consumed, window)

        if out_punch is None:
            shifts.append(
                Shift(
                    sequence_number=sequence,
                    in_time=in_punch.timestamp,
                    in_event_id=in_punch.source_id,
                    status=ShiftStatus.INCOMPLETE,
                )
            )
            notes.append(f"Shift {sequence}: no OUT punch, marked incomplete")
            continue

        consumed.add(out_punch.source_id)
        minutes = _minutes_between(in_punch.timestamp, out_punch.timestamp)
        shifts.append(
            Shift(
                sequence_number=sequence,
                in_time=in_punch.timestamp,
                out_time=out_punch.timestamp,
                in_event_id=in_punch.source_id,
                out_event_id=out_punch.source_id,
                status=ShiftStatus.COMPLETE,
                duration_minutes=int(minutes.quantize(Decimal("1"), rounding=ROUND_HALF_UP)),
                working_hours=(minutes / Decimal("60")).quantize(TWO_PLACES, rounding=ROUND_HALF_UP),
            )
        )

    logger.debug(
        f"Detected {len(shifts)} shift(s) for employee {input_data.employee_id} "
        f"on {input_data.target_date.isoformat()}"
    )

    return ShiftDetectionOutput(
        employee_id=input_data.employee_id,
        target_date=input_data.target_date,
        shifts=shifts,
        ignored_in_event_ids=[p.source_id for p in ignored_ins],
        calculation_notes=notes,
    )


def calculate_daily_totals(shifts: list[Shift]) -> DailyTotals:
    """
    Aggregate a day's shifts.

    Hours are summed over complete shifts only and rounded once after
    summation. First IN and last OUT are read from the first and last
    shift as given; the list is not re-sorted.
    """
    if not shifts:
        return DailyTotals()

    complete = [s for s in shifts if s.status == ShiftStatus.COMPLETE]

    working = sum((s.working_hours or Decimal("0") for s in complete), Decimal("0"))
    overtime = sum((s.ot_hours for s in complete), Decimal("0"))
    extra = sum((s.extra_hours for s in complete), Decimal("0"))

    return DailyTotals(
        shift_count=len(shifts),
        total_working_hours=working.quantize(TWO_PLACES, rounding=ROUND_HALF_UP),
        total_overtime_hours=overtime.quantize(TWO_PLACES, rounding=ROUND_HALF_UP),
        total_extra_hours=extra.quantize(TWO_PLACES, rounding=ROUND_HALF_UP),
        first_in_time=shifts[0].in_time,
        last_out_time=shifts[-1].out_time,
    )
