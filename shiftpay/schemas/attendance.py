"""
Attendance Schemas

Punch, shift and daily-total models for multi-shift detection.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class PunchDirection(str, Enum):
    """Normalized direction of a biometric punch."""

    IN = "IN"
    OUT = "OUT"


class ShiftStatus(str, Enum):
    """Pairing status of a detected shift."""

    COMPLETE = "complete"
    INCOMPLETE = "incomplete"


class PunchEvent(BaseModel):
    """
    A single punch from a biometric device.

    Punches arrive in no particular order and are sorted by the
    pairing engine before use.
    """

    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(..., description="Instant the punch was recorded")
    direction: PunchDirection
    source_id: str = Field(..., description="Opaque device/log identifier")


class Shift(BaseModel):
    """One IN/OUT pair detected for a target date."""

    sequence_number: int = Field(..., ge=1)
    in_time: datetime
    out_time: datetime | None = None
    in_event_id: str
    out_event_id: str | None = None
    status: ShiftStatus
    duration_minutes: int | None = Field(
        default=None,
        description="Rounded minutes between IN and OUT (complete shifts only)",
    )
    working_hours: Decimal | None = Field(
        default=None,
        description="Duration in hours, 2 decimal places (complete shifts only)",
    )

    # Filled by downstream OT / extra-hours detection
    ot_hours: Decimal = Decimal("0")
    extra_hours: Decimal = Decimal("0")


class ShiftDetectionInput(BaseModel):
    """
    Input for multi-shift detection.

    Unset tunables fall back to the configured defaults.
    """

    employee_id: str = Field(..., description="Unique employee identifier")
    target_date: date = Field(..., description="Date an IN punch must fall on to seed a shift")
    punches: list[PunchEvent] = Field(default_factory=list)

    max_shifts: int | None = Field(default=None, ge=1)
    duplicate_threshold_minutes: int | None = Field(default=None, ge=0)
    pairing_window_hours: int | None = Field(default=None, ge=1)


class ShiftDetectionOutput(BaseModel):
    """Shifts detected for one employee and date."""

    employee_id: str
    target_date: date
    shifts: list[Shift] = Field(default_factory=list)
    ignored_in_event_ids: list[str] = Field(
        default_factory=list,
        description="IN punches dropped as device double-punches",
    )
    calculation_notes: list[str] = Field(default_factory=list)


class DailyTotals(BaseModel):
    """Aggregate of a day's shifts."""

    shift_count: int = 0
    total_working_hours: Decimal = Decimal("0")
    total_overtime_hours: Decimal = Decimal("0")
    total_extra_hours: Decimal = Decimal("0")
    first_in_time: datetime | None = None
    last_out_time: datetime | None = None
