"""
Compensation Engine MCP Tools

Allowance/deduction amounts, basic pay apportionment and attendance
bonus exposed as MCP tools.
"""

from decimal import Decimal
from typing import Literal

from shiftpay.schemas.bonus import BonusTier, MonthlyAttendanceTotals
from shiftpay.schemas.compensation import AttendanceProrationInput, CompensationRule
from shiftpay.services.amount_calculator import calculate_amount
from shiftpay.services.basic_pay import calculate_basic_pay
from shiftpay.services.bonus_tiers import calculate_bonus

# Use the same MCP instance as attendance_engine
from shiftpay.tools.attendance_engine import mcp


def _decimal(value: float | None) -> Decimal | None:
    return Decimal(str(value)) if value is not None else None


@mcp.tool()
async def calculate_compensation_amount(
    kind: Literal["fixed", "percentage"],
    basic_pay: float,
    amount: float | None = None,
    percentage: float | None = None,
    percentage_base: Literal["basic", "gross"] | None = None,
    min_amount: float | None = None,
    max_amount: float | None = None,
    prorated_by_attendance: bool = False,
    gross_salary: float | None = None,
    present_days: float | None = None,
    paid_leave_days: float = 0.0,
    od_days: float = 0.0,
    total_days_in_month: float = 30.0,
) -> dict:
    """
    Calculate an allowance or deduction amount from its rule.

    Fixed rules may be prorated by paid days (present + paid leave + OD)
    over the month length. Percentage rules apply to basic or gross pay
    and are never prorated. Min/max clamps apply last.

    Args:
        kind: "fixed" or "percentage"
        basic_pay: Employee basic pay
        amount: Fixed amount (fixed rules)
        percentage: Percentage (percentage rules)
        percentage_base: "basic" or "gross" (percentage rules)
        min_amount: Optional lower clamp
        max_amount: Optional upper clamp
        prorated_by_attendance: Prorate fixed amounts by paid days
        gross_salary: Gross salary for gross-based percentages
        present_days: Present days; omit to skip proration
        paid_leave_days: Paid leave days
        od_days: On-duty days
        total_days_in_month: Calendar days in the month

    Returns:
        Dictionary with the calculated amount

    Example:
        Fixed 3000, prorated, 20 present + 3 paid leave + 2 OD of 30 days
        - 3000 / 30 × 25 = 2500.00
    """
    rule = CompensationRule(
        kind=kind,
        amount=_decimal(amount),
        percentage=_decimal(percentage),
        percentage_base=percentage_base,
        min_amount=_decimal(min_amount),
        max_amount=_decimal(max_amount),
        prorated_by_attendance=prorated_by_attendance,
    )

    attendance = None
    if present_days is not None:
        attendance = AttendanceProrationInput(
            present_days=Decimal(str(present_days)),
            paid_leave_days=Decimal(str(paid_leave_days)),
            od_days=Decimal(str(od_days)),
            total_days_in_month=Decimal(str(total_days_in_month)),
        )

    result = calculate_amount(
        rule,
        Decimal(str(basic_pay)),
        gross_salary=_decimal(gross_salary),
        attendance=attendance,
    )

    return {
        "amount": float(result),
        "is_well_formed": rule.is_well_formed,
        "prorated": bool(attendance and prorated_by_attendance and kind == "fixed"),
    }


@mcp.tool()
async def calculate_employee_basic_pay(
    basic_salary: float,
    total_days_in_month: float,
    total_payable_shifts: float,
) -> dict:
    """
    Apportion monthly basic pay over payable shifts.

    Args:
        basic_salary: Fixed monthly salary
        total_days_in_month: Calendar days in the month
        total_payable_shifts: Payable shifts realized from attendance

    Returns:
        Dictionary with per-day rate, payable amount and signed incentive
    """
    result = calculate_basic_pay(
        Decimal(str(basic_salary)),
        Decimal(str(total_days_in_month)),
        Decimal(str(total_payable_shifts)),
    )

    return {
        "basic_pay": float(result.basic_pay),
        "per_day_basic_pay": float(result.per_day_basic_pay),
        "payable_amount": float(result.payable_amount),
        "incentive": float(result.incentive),
        "total_days_in_month": float(result.total_days_in_month),
        "total_payable_shifts": float(result.total_payable_shifts),
    }


@mcp.tool()
async def calculate_attendance_bonus(
    employee_id: str,
    month: str,
    salary: float,
    tiers: list[dict],
    present_days: float = 0.0,
    od_days: float = 0.0,
    absent_days: float = 0.0,
    leave_days: float = 0.0,
) -> dict:
    """
    Calculate a tiered attendance bonus.

    Attendance % = (present + OD) / (present + OD + absent + leave).
    The first tier whose [min_percentage, max_percentage] contains it
    pays round(salary × bonus_multiplier) + flat_amount.

    Args:
        employee_id: Unique employee identifier
        month: Bonus month (YYYY-MM)
        salary: Salary component value
        tiers: Ordered tier table (min_percentage, max_percentage,
            bonus_multiplier, flat_amount)
        present_days: Present days
        od_days: On-duty days
        absent_days: Absent days
        leave_days: Leave days

    Returns:
        Dictionary with attendance percentage, applied tier and bonus

    Example:
        19 present, 1 absent → 95%; tier [90, 100] with multiplier 1
        on 50000 salary → bonus 50000
    """
    totals = MonthlyAttendanceTotals(
        present_days=Decimal(str(present_days)),
        od_days=Decimal(str(od_days)),
        absent_days=Decimal(str(absent_days)),
        leave_days=Decimal(str(leave_days)),
    )

    record = calculate_bonus(
        employee_id,
        month,
        totals,
        Decimal(str(salary)),
        [BonusTier.model_validate(t) for t in tiers],
    )

    tier = record.applied_tier
    return {
        "employee_id": record.employee_id,
        "month": record.month,
        "salary_component_value": float(record.salary_component_value),
        "attendance_percentage": float(record.attendance_percentage),
        "attendance_days": float(record.attendance_days),
        "total_month_days": float(record.total_month_days),
        "applied_tier": {
            "min_percentage": float(tier.min_percentage),
            "max_percentage": float(tier.max_percentage),
            "bonus_multiplier": float(tier.bonus_multiplier),
            "flat_amount": float(tier.flat_amount),
        } if tier else None,
        "calculated_bonus": float(record.calculated_bonus),
        "final_bonus": float(record.final_bonus),
        "is_manual_override": record.is_manual_override,
        "calculation_notes": record.calculation_notes,
    }
