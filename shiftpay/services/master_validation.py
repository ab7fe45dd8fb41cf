"""
Compensation Master Validation

Write-time invariant checks for allowance/deduction masters. The
master-data layer calls these before saving; the calculation engines
never do, they ignore malformed rules instead.
"""

from shiftpay.exceptions import MasterValidationError
from shiftpay.schemas.compensation import (
    CompensationItemMaster,
    CompensationRule,
    RuleKind,
)


def validate_rule(rule: CompensationRule, context: str = "global rule") -> None:
    """
    Check the fixed/percentage invariants of one rule.

    Raises:
        MasterValidationError: on the first violated invariant
    """
    if rule.kind == RuleKind.FIXED:
        if rule.amount is None:
            raise MasterValidationError(f"Amount is required for {context} when type is fixed")
        if rule.percentage is not None:
            raise MasterValidationError(f"Percentage should be null for {context} when type is fixed")
        if rule.percentage_base is not None:
            raise MasterValidationError(f"Percentage base should be null for {context} when type is fixed")
    else:
        if rule.percentage is None:
            raise MasterValidationError(f"Percentage is required for {context} when type is percentage")
        if rule.percentage_base is None:
            raise MasterValidationError(f"Percentage base is required for {context} when type is percentage")
        if rule.amount is not None:
            raise MasterValidationError(f"Amount should be null for {context} when type is percentage")

    for field in ("amount", "percentage", "min_amount", "max_amount"):
        value = getattr(rule, field)
        if value is not None and value < 0:
            raise MasterValidationError(f"{field} cannot be negative for {context}")

    if rule.percentage is not None and rule.percentage > 100:
        raise MasterValidationError(f"Percentage cannot exceed 100 for {context}")

    if rule.min_amount is not None and rule.max_amount is not None:
        if rule.min_amount > rule.max_amount:
            raise MasterValidationError(f"Min amount cannot be greater than max amount for {context}")


def validate_master(master: CompensationItemMaster) -> None:
    """
    Check a master's global rule and department overrides.

    Raises:
        MasterValidationError: invalid rule or duplicate department ids
    """
    if not master.name or not master.name.strip():
        raise MasterValidationError("Name is required")

    if master.global_rule is not None:
        validate_rule(master.global_rule)

    seen: set[str] = set()
    for dept_rule in master.department_rules:
        department_id = str(dept_rule.department_id)
        if department_id in seen:
            raise MasterValidationError("Duplicate department IDs found in department rules")
        seen.add(department_id)
        validate_rule(dept_rule, context=f"department rule {department_id}")


def find_duplicate_names(masters: list[CompensationItemMaster]) -> list[str]:
    """Master names that collide case-insensitively."""
    seen: set[str] = set()
    reported: set[str] = set()
    duplicates: list[str] = []
    for master in masters:
        key = master.name.strip().lower()
        if key in seen and key not in reported:
            duplicates.append(master.name)
            reported.add(key)
        seen.add(key)
    return duplicates
