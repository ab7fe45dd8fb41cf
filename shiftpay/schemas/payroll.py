"""
Payroll Schemas

Basic pay, overtime pay and batch run models.
"""

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

from shiftpay.schemas.bonus import BonusRecord, MonthlyAttendanceTotals
from shiftpay.schemas.compensation import (
    AttendanceProrationInput,
    EmployeeOverride,
    ResolvedLineItem,
)


class BasicPayResult(BaseModel):
    """
    Monthly basic pay apportioned over realized payable shifts.

    ``incentive`` is signed: positive when more shifts were worked than
    the monthly baseline, negative for a shortfall.
    """

    basic_pay: Decimal
    per_day_basic_pay: Decimal
    payable_amount: Decimal
    incentive: Decimal
    total_days_in_month: Decimal
    total_payable_shifts: Decimal


class OvertimeSettings(BaseModel):
    """OT configuration for a department or the organization."""

    ot_pay_per_hour: Decimal | None = Field(default=None, ge=0)
    min_ot_hours: Decimal | None = Field(default=None, ge=0)


class OvertimePayResult(BaseModel):
    """Overtime pay for one month."""

    ot_hours: Decimal
    eligible_ot_hours: Decimal
    ot_pay_per_hour: Decimal
    min_ot_hours: Decimal
    ot_pay: Decimal
    is_eligible: bool


class EmployeePayrollInput(BaseModel):
    """Everything the batch runner needs to compute one employee's month."""

    employee_id: str
    department_id: str | None = None
    month: str = Field(..., description="Payroll month (YYYY-MM)")

    # Base salary and monthly attendance summary
    gross_salary: Decimal | None = Field(
        default=None,
        description="Fixed monthly figure apportioned as basic pay",
    )
    total_days_in_month: Decimal | None = None
    total_payable_shifts: Decimal = Decimal("0")

    attendance: AttendanceProrationInput | None = None
    monthly_totals: MonthlyAttendanceTotals | None = None

    # Employee-specific adjustments
    allowance_overrides: list[EmployeeOverride | None] | None = None
    deduction_overrides: list[EmployeeOverride | None] | None = None
    include_missing: bool = True

    # Overtime
    ot_hours: Decimal | None = None
    ot_settings: OvertimeSettings | None = None


class EmployeePayrollResult(BaseModel):
    """Per-employee outcome of a batch run."""

    employee_id: str
    status: Literal["success", "error"] = "success"
    error: str | None = None

    basic_pay: BasicPayResult | None = None
    allowances: list[ResolvedLineItem] = Field(default_factory=list)
    deductions: list[ResolvedLineItem] = Field(default_factory=list)
    total_allowances: Decimal = Decimal("0")
    total_deductions: Decimal = Decimal("0")
    gross_salary: Decimal = Field(
        default=Decimal("0"),
        description="Basic pay plus first-pass allowances",
    )
    ot_pay: OvertimePayResult | None = None
    bonus: BonusRecord | None = None


class PayrollBatchResult(BaseModel):
    """Aggregate outcome of a batch run."""

    month: str
    total: int = 0
    completed: int = 0
    failed: int = 0
    results: list[EmployeePayrollResult] = Field(default_factory=list)
