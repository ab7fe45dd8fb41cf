"""
Overtime Pay Calculator

Resolves OT settings (department over organization) and computes OT pay
for a month's overtime hours.
"""

from decimal import ROUND_HALF_UP, Decimal

from shiftpay.schemas.payroll import OvertimePayResult, OvertimeSettings


def resolve_ot_settings(
    department: OvertimeSettings | None,
    global_: OvertimeSettings | None,
) -> OvertimeSettings:
    """
    Effective OT settings.

    Unlike compensation rules, OT settings fall back field by field: each
    value comes from the department when set, else the organization,
    else 0.
    """
    department = department or OvertimeSettings()
    global_ = global_ or OvertimeSettings()

    def pick(field: str) -> Decimal:
        value = getattr(department, field)
        if value is None:
            value = getattr(global_, field)
        return value if value is not None else Decimal("0")

    return OvertimeSettings(
        ot_pay_per_hour=pick("ot_pay_per_hour"),
        min_ot_hours=pick("min_ot_hours"),
    )


def calculate_ot_pay(
    ot_hours: Decimal | None,
    settings: OvertimeSettings,
) -> OvertimePayResult:
    """
    OT pay for the month.

    Hours below ``min_ot_hours`` earn nothing; otherwise every OT hour
    is paid at ``ot_pay_per_hour``. Missing or negative hours count as 0.
    """
    if ot_hours is None or ot_hours < 0:
        ot_hours = Decimal("0")

    rate = settings.ot_pay_per_hour or Decimal("0")
    min_hours = settings.min_ot_hours or Decimal("0")

    is_eligible = ot_hours >= min_hours
    eligible_hours = ot_hours if is_eligible else Decimal("0")

    return OvertimePayResult(
        ot_hours=ot_hours,
        eligible_ot_hours=eligible_hours,
        ot_pay_per_hour=rate,
        min_ot_hours=min_hours,
        ot_pay=(eligible_hours * rate).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP),
        is_eligible=is_eligible,
    )
