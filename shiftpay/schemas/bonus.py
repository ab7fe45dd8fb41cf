"""
Bonus Schemas

Tier table, policy, attendance totals and bonus record models for the
attendance bonus calculation.
"""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field


class SalaryComponent(str, Enum):
    """Salary figure a bonus policy is computed on."""

    GROSS_SALARY = "gross_salary"
    BASIC = "basic"
    FIXED_PAY = "fixed_pay"


class BonusTier(BaseModel):
    """
    Attendance-percentage bucket mapped to a bonus formula.

    Tiers should not overlap; when they do, the first tier in table
    order wins.
    """

    min_percentage: Decimal = Field(..., ge=0)
    max_percentage: Decimal = Field(..., ge=0)
    bonus_multiplier: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Fraction of salary paid as bonus (1 = 100%)",
    )
    flat_amount: Decimal = Field(default=Decimal("0"), ge=0)


class BonusPolicy(BaseModel):
    """Ordered tier table plus the salary component it applies to."""

    name: str
    salary_component: SalaryComponent = SalaryComponent.GROSS_SALARY
    tiers: list[BonusTier] = Field(default_factory=list)


class MonthlyAttendanceTotals(BaseModel):
    """Categorized day counts for one employee and month."""

    present_days: Decimal = Field(default=Decimal("0"), ge=0)
    od_days: Decimal = Field(default=Decimal("0"), ge=0)
    absent_days: Decimal = Field(default=Decimal("0"), ge=0)
    leave_days: Decimal = Field(default=Decimal("0"), ge=0)


class AttendanceStats(BaseModel):
    """Attendance ratio used for tier lookup."""

    numerator: Decimal = Field(..., description="Present + OD days")
    denominator: Decimal = Field(..., description="Working days: present + OD + absent + leave")
    percentage: Decimal = Field(..., description="Attendance percentage, 2 decimal places")


class BonusRecord(BaseModel):
    """
    Calculated bonus for one employee and month.

    ``final_bonus`` starts equal to ``calculated_bonus`` and may later be
    adjusted by a human without losing the calculated figure.
    """

    employee_id: str
    month: str = Field(..., description="Bonus month (YYYY-MM)")

    # Calculation bases
    salary_component_value: Decimal = Decimal("0")
    attendance_percentage: Decimal = Decimal("0")
    attendance_days: Decimal = Decimal("0")
    total_month_days: Decimal = Field(default=Decimal("0"), description="Working days in the month")

    applied_tier: BonusTier | None = None

    # Result
    calculated_bonus: Decimal = Decimal("0")
    final_bonus: Decimal = Decimal("0")
    is_manual_override: bool = False
    remarks: str | None = None

    calculation_notes: list[str] = Field(default_factory=list)
