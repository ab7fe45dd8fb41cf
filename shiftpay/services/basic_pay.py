"""
Basic Pay Apportioner

Converts a fixed monthly salary into a per-day rate and a payable amount
based on the shifts actually worked, yielding a signed incentive.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from shiftpay.exceptions import MissingInputError
from shiftpay.schemas.payroll import BasicPayResult

TWO_PLACES = Decimal("0.01")


def _round(value: Decimal) -> Decimal:
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def calculate_basic_pay(
    basic_salary: Decimal | None,
    total_days_in_month: Decimal | None,
    total_payable_shifts: Decimal | None = None,
) -> BasicPayResult:
    """
    Apportion monthly basic pay over realized payable shifts.

    per_day = basic / days_in_month
    payable = per_day × payable_shifts
    incentive = payable − basic (negative for a shortfall)

    Raises:
        MissingInputError: base salary or month length is missing
    """
    if not basic_salary:
        raise MissingInputError("Employee base salary is missing")
    if not total_days_in_month:
        raise MissingInputError("Attendance summary totalDaysInMonth is missing")

    shifts = total_payable_shifts or Decimal("0")

    per_day = basic_salary / total_days_in_month if total_days_in_month > 0 else Decimal("0")
    payable = per_day * shifts
    incentive = payable - basic_salary

    return BasicPayResult(
        basic_pay=basic_salary,
        per_day_basic_pay=_round(per_day),
        payable_amount=_round(payable),
        incentive=_round(incentive),
        total_days_in_month=total_days_in_month,
        total_payable_shifts=shifts,
    )


def calculate_basic_pay_for_employee(employee: Any, summary: Any) -> BasicPayResult:
    """
    Read the salary and month summary off caller-supplied records.

    ``employee`` must expose ``gross_salary``; ``summary`` must expose
    ``total_days_in_month`` and may expose ``total_payable_shifts``.
    """
    if employee is None or not getattr(employee, "gross_salary", None):
        raise MissingInputError("Employee or gross_salary is missing")
    if summary is None or not getattr(summary, "total_days_in_month", None):
        raise MissingInputError("Attendance summary or totalDaysInMonth is missing")

    return calculate_basic_pay(
        Decimal(str(employee.gross_salary)),
        Decimal(str(summary.total_days_in_month)),
        Decimal(str(getattr(summary, "total_payable_shifts", 0) or 0)),
    )
