"""
Attendance Engine MCP Tools

Multi-shift detection and daily totals exposed as MCP tools.
"""

from datetime import date

from fastmcp import FastMCP

from shiftpay.adapters.punch_log import normalize_punches
from shiftpay.schemas.attendance import ShiftDetectionInput
from shiftpay.services.shift_pairing import calculate_daily_totals, detect_shifts

# Initialize MCP server (will be started from server.py)
mcp = FastMCP("shiftpay Calculation Engines")


@mcp.tool()
async def detect_employee_shifts(
    employee_id: str,
    target_date: str,
    punches: list[dict],
    max_shifts: int | None = None,
) -> dict:
    """
    Pair a day's raw biometric punches into shifts.

    Punches may arrive unordered and in any device format: direction is
    read from ``punch_state`` (0=IN, 1=OUT), ``type`` ("IN"/"OUT") or
    ``inOutMode``. IN punches must fall on ``target_date``; OUT punches
    may fall on the next day (overnight shifts).

    Args:
        employee_id: Unique employee identifier
        target_date: Date to detect shifts for (YYYY-MM-DD)
        punches: Raw punch records with ``timestamp`` and direction fields
        max_shifts: Maximum shifts per day (configured default if omitted)

    Returns:
        Dictionary with the shifts, daily totals and calculation notes

    Example:
        IN 08:00, IN 08:20, OUT 12:00, IN 13:00, OUT 17:30
        - 08:20 is a duplicate IN (< 60 min after 08:00)
        - Shift 1: 08:00-12:00 (4.00 h), Shift 2: 13:00-17:30 (4.50 h)
    """
    input_data = ShiftDetectionInput(
        employee_id=employee_id,
        target_date=date.fromisoformat(target_date),
        punches=normalize_punches(punches),
        max_shifts=max_shifts,
    )

    result = detect_shifts(input_data)
    totals = calculate_daily_totals(result.shifts)

    return {
        "employee_id": result.employee_id,
        "target_date": result.target_date.isoformat(),
        "shifts": [
            {
                "sequence_number": s.sequence_number,
                "in_time": s.in_time.isoformat(),
                "out_time": s.out_time.isoformat() if s.out_time else None,
                "in_event_id": s.in_event_id,
                "out_event_id": s.out_event_id,
                "status": s.status.value,
                "duration_minutes": s.duration_minutes,
                "working_hours": float(s.working_hours) if s.working_hours is not None else None,
            }
            for s in result.shifts
        ],
        "daily_totals": {
            "shift_count": totals.shift_count,
            "total_working_hours": float(totals.total_working_hours),
            "total_overtime_hours": float(totals.total_overtime_hours),
            "total_extra_hours": float(totals.total_extra_hours),
            "first_in_time": totals.first_in_time.isoformat() if totals.first_in_time else None,
            "last_out_time": totals.last_out_time.isoformat() if totals.last_out_time else None,
        },
        "ignored_in_event_ids": result.ignored_in_event_ids,
        "calculation_notes": result.calculation_notes,
    }
