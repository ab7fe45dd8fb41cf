"""
Allowance / Deduction Amount Calculator

One calculator for both categories: the category is a label, the
formulas are identical. Handles fixed amounts with optional attendance
proration, percentage-of-basic/gross amounts, and min/max clamps.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal

from shiftpay.schemas.compensation import (
    AttendanceProrationInput,
    CompensationCategory,
    CompensationItemMaster,
    CompensationRule,
    PercentageBase,
    ResolvedLineItem,
    RuleKind,
)
from shiftpay.services.rule_resolver import resolve_rule

logger = logging.getLogger(__name__)


def clamp_amount(amount: Decimal, rule: CompensationRule) -> Decimal:
    """Raise to ``min_amount`` / lower to ``max_amount`` when set."""
    if rule.min_amount is not None and amount < rule.min_amount:
        amount = rule.min_amount
    if rule.max_amount is not None and amount > rule.max_amount:
        amount = rule.max_amount
    return amount


def prorate_amount(amount: Decimal, attendance: AttendanceProrationInput) -> Decimal:
    """
    Scale a monthly amount by paid days over month days.

    Paid days = present + paid leave + OD. A zero-day month leaves the
    amount unchanged.
    """
    if attendance.total_days_in_month <= 0:
        return amount
    return (amount / attendance.total_days_in_month) * attendance.paid_days


def calculate_amount(
    rule: CompensationRule | None,
    basic_pay: Decimal,
    gross_salary: Decimal | None = None,
    attendance: AttendanceProrationInput | None = None,
) -> Decimal:
    """
    Calculate the monetary amount of a resolved rule.

    Fixed rules start from ``amount`` and are prorated when
    ``prorated_by_attendance`` is set and attendance data is supplied.
    Percentage rules take ``percentage`` of gross (when based on gross
    and gross is supplied) or basic pay, and are never prorated. Clamps
    apply after that; the result is rounded half-up to 2 places.

    Absent or malformed rules yield 0.
    """
    if rule is None:
        return Decimal("0")

    if not rule.is_well_formed:
        logger.warning(f"Malformed {rule.kind.value} rule contributes 0")
        return Decimal("0")

    if rule.kind == RuleKind.FIXED:
        amount = rule.amount
        if rule.prorated_by_attendance and attendance is not None:
            amount = prorate_amount(amount, attendance)
    else:
        if rule.percentage_base == PercentageBase.GROSS and gross_salary:
            base = gross_salary
        else:
            base = basic_pay
        amount = base * rule.percentage / Decimal("100")

    amount = clamp_amount(amount, rule)

    return amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def calculate_line_items(
    masters: list[CompensationItemMaster],
    category: CompensationCategory,
    department_id: str | None,
    basic_pay: Decimal,
    gross_salary: Decimal | None = None,
    attendance: AttendanceProrationInput | None = None,
    use_gross_base: bool = False,
) -> list[ResolvedLineItem]:
    """
    Resolve and calculate every active master of ``category``.

    Runs in two passes: the first (``use_gross_base=False``) covers fixed
    and basic-based percentage rules, since gross is not known yet; the
    second covers only gross-based percentage rules. Items that come out
    at zero or below are dropped.
    """
    items: list[ResolvedLineItem] = []

    for master in masters:
        if master.category != category:
            continue

        rule = resolve_rule(master, department_id)
        if rule is None:
            continue

        gross_based = (
            rule.kind == RuleKind.PERCENTAGE and rule.percentage_base == PercentageBase.GROSS
        )
        if gross_based != use_gross_base:
            continue

        amount = calculate_amount(rule, basic_pay, gross_salary, attendance)
        if amount <= 0:
            continue

        items.append(
            ResolvedLineItem(
                master_key=master.master_id,
                name=master.name,
                amount=amount,
                kind=rule.kind,
                percentage_base=rule.percentage_base,
                prorated_by_attendance=bool(rule.prorated_by_attendance),
                category=category,
            )
        )

    return items


def calculate_total(items: list[ResolvedLineItem]) -> Decimal:
    """Sum of line item amounts."""
    return sum((item.amount for item in items), Decimal("0"))
