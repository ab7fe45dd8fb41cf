"""
Compensation Schemas

Allowance/deduction master definitions, resolved rules, attendance
proration input and resolved payroll line items.
"""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class CompensationCategory(str, Enum):
    """Master category. Used as a label only; the math is shared."""

    ALLOWANCE = "allowance"
    DEDUCTION = "deduction"


class RuleKind(str, Enum):
    FIXED = "fixed"
    PERCENTAGE = "percentage"


class PercentageBase(str, Enum):
    BASIC = "basic"
    GROSS = "gross"


class CompensationRule(BaseModel):
    """
    Calculation rule for one allowance or deduction.

    Construction does not enforce the fixed/percentage invariants: rules
    come from upstream configuration, and the calculation path has to be
    able to hold a malformed rule in order to ignore it. Write-time checks
    live in ``shiftpay.services.master_validation``.
    """

    kind: RuleKind
    amount: Decimal | None = Field(default=None, description="Required iff kind is fixed")
    percentage: Decimal | None = Field(default=None, description="Required iff kind is percentage")
    percentage_base: PercentageBase | None = None
    min_amount: Decimal | None = None
    max_amount: Decimal | None = None
    prorated_by_attendance: bool | None = Field(
        default=None,
        description="Prorate by paid days (fixed rules only)",
    )

    @property
    def is_well_formed(self) -> bool:
        """True if exactly one of amount/percentage is set and matches kind."""
        if self.kind == RuleKind.FIXED:
            return self.amount is not None and self.percentage is None
        return (
            self.percentage is not None
            and self.amount is None
            and self.percentage_base is not None
        )


class DepartmentRule(CompensationRule):
    """Department-specific override of a master's global rule."""

    department_id: str


class CompensationItemMaster(BaseModel):
    """
    Organization-wide allowance or deduction definition.

    Created and edited by HR configuration; read-only to the engines.
    """

    master_id: str = Field(..., description="Unique master identifier")
    name: str = Field(..., description="Unique name, matched case-insensitively")
    category: CompensationCategory
    description: str | None = None
    is_active: bool = True
    global_rule: CompensationRule | None = None
    department_rules: list[DepartmentRule] = Field(default_factory=list)


class AttendanceProrationInput(BaseModel):
    """
    Monthly paid-day counts used to prorate fixed amounts.

    The day counts are not cross-checked against the month length.
    """

    present_days: Decimal = Field(default=Decimal("0"), ge=0)
    paid_leave_days: Decimal = Field(default=Decimal("0"), ge=0)
    od_days: Decimal = Field(default=Decimal("0"), ge=0, description="On-duty days")
    total_days_in_month: Decimal = Field(default=Decimal("30"), ge=0)

    @property
    def paid_days(self) -> Decimal:
        return self.present_days + self.paid_leave_days + self.od_days


class ResolvedLineItem(BaseModel):
    """
    One effective allowance/deduction for an employee's payslip.

    Additional attributes carried by base items or overrides (codes,
    clamps, remarks) are kept as extra fields.
    """

    model_config = ConfigDict(extra="allow")

    master_key: str | None = None
    name: str
    amount: Decimal = Decimal("0")
    kind: RuleKind | None = None
    percentage_base: PercentageBase | None = None
    prorated_by_attendance: bool = False
    is_employee_override: bool = False
    category: CompensationCategory | None = None


class EmployeeOverride(BaseModel):
    """
    Partial, employee-specific adjustment of a line item.

    Only the fields actually supplied overwrite the matched base item.
    ``override_amount`` is the legacy alias of ``amount``.
    """

    model_config = ConfigDict(extra="allow")

    master_key: str | None = None
    name: str | None = None
    amount: Decimal | None = None
    override_amount: Decimal | None = None
    kind: RuleKind | None = None
    percentage_base: PercentageBase | None = None
    prorated_by_attendance: bool | None = None
