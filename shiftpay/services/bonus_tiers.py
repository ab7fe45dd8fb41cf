"""
Attendance Bonus Calculator

Computes the attendance percentage from categorized day counts, matches
it against an ordered tier table, and derives the bonus amount.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal

from shiftpay.schemas.bonus import (
    AttendanceStats,
    BonusPolicy,
    BonusRecord,
    BonusTier,
    MonthlyAttendanceTotals,
    SalaryComponent,
)

logger = logging.getLogger(__name__)


def calculate_attendance_stats(totals: MonthlyAttendanceTotals) -> AttendanceStats:
    """
    Attendance percentage over working days.

    Formula: (present + OD) / (present + OD + absent + leave) × 100.
    Holidays and week-offs are not working days. No working days at all
    gives 0%.
    """
    numerator = totals.present_days + totals.od_days
    denominator = numerator + totals.absent_days + totals.leave_days

    if denominator > 0:
        percentage = (numerator / denominator * 100).quantize(
            Decimal("0.01"), rounding=ROUND_HALF_UP
        )
    else:
        percentage = Decimal("0")

    return AttendanceStats(numerator=numerator, denominator=denominator, percentage=percentage)


def find_applicable_tier(percentage: Decimal, tiers: list[BonusTier]) -> BonusTier | None:
    """First tier in table order whose [min, max] range contains ``percentage``."""
    for tier in tiers:
        if tier.min_percentage <= percentage <= tier.max_percentage:
            return tier
    return None


def resolve_salary_component(
    policy: BonusPolicy,
    gross_salary: Decimal | None,
    basic_salary: Decimal | None = None,
) -> Decimal:
    """
    Salary figure the policy applies to.

    Basic falls back to gross when no separate basic figure is kept;
    fixed pay is the gross figure.
    """
    if policy.salary_component == SalaryComponent.BASIC and basic_salary:
        return basic_salary
    return gross_salary or Decimal("0")


def calculate_bonus(
    employee_id: str,
    month: str,
    totals: MonthlyAttendanceTotals,
    salary: Decimal,
    tiers: list[BonusTier],
) -> BonusRecord:
    """
    Calculate the attendance bonus for one employee and month.

    bonus = round(salary × tier.bonus_multiplier) + tier.flat_amount

    The salary term is rounded to a whole amount before the flat amount
    is added. No matching tier means no bonus.
    """
    notes: list[str] = []
    stats = calculate_attendance_stats(totals)
    tier = find_applicable_tier(stats.percentage, tiers)

    bonus = Decimal("0")
    if tier is not None:
        salary_term = (salary * tier.bonus_multiplier).quantize(
            Decimal("1"), rounding=ROUND_HALF_UP
        )
        bonus = salary_term + tier.flat_amount
        notes.append(
            f"Attendance {stats.percentage}% matched tier "
            f"[{tier.min_percentage}, {tier.max_percentage}]"
        )
    else:
        notes.append(f"Attendance {stats.percentage}% matched no tier")

    return BonusRecord(
        employee_id=employee_id,
        month=month,
        salary_component_value=salary,
        attendance_percentage=stats.percentage,
        attendance_days=stats.numerator,
        total_month_days=stats.denominator,
        applied_tier=tier,
        calculated_bonus=bonus,
        final_bonus=bonus,
        is_manual_override=False,
        calculation_notes=notes,
    )


def calculate_policy_bonus(
    employee_id: str,
    month: str,
    totals: MonthlyAttendanceTotals,
    policy: BonusPolicy,
    gross_salary: Decimal | None,
    basic_salary: Decimal | None = None,
) -> BonusRecord:
    """Calculate a bonus using the policy's salary component and tier table."""
    salary = resolve_salary_component(policy, gross_salary, basic_salary)
    return calculate_bonus(employee_id, month, totals, salary, policy.tiers)


def apply_manual_override(
    record: BonusRecord,
    final_bonus: Decimal,
    remarks: str | None = None,
) -> BonusRecord:
    """Return a copy with a human-adjusted final bonus; the calculated figure is kept."""
    logger.info(
        f"Manual bonus override for employee {record.employee_id} ({record.month}): "
        f"{record.calculated_bonus} -> {final_bonus}"
    )
    return record.model_copy(
        update={
            "final_bonus": final_bonus,
            "is_manual_override": True,
            "remarks": remarks if remarks is not None else record.remarks,
        }
    )
