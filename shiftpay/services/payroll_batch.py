"""
Payroll Batch Runner

Computes a month's compensation figures for a list of employees. Each
employee is computed independently; one failing employee is recorded
and reported without aborting the run.
"""

import logging

from shiftpay.schemas.bonus import BonusPolicy
from shiftpay.schemas.compensation import CompensationCategory, CompensationItemMaster
from shiftpay.schemas.payroll import (
    EmployeePayrollInput,
    EmployeePayrollResult,
    OvertimeSettings,
    PayrollBatchResult,
)
from shiftpay.services.amount_calculator import calculate_line_items, calculate_total
from shiftpay.services.basic_pay import calculate_basic_pay
from shiftpay.services.bonus_tiers import calculate_policy_bonus
from shiftpay.services.override_merge import merge_with_overrides
from shiftpay.services.overtime_pay import calculate_ot_pay, resolve_ot_settings

logger = logging.getLogger(__name__)


def calculate_employee_payroll(
    emp: EmployeePayrollInput,
    masters: list[CompensationItemMaster],
    bonus_policy: BonusPolicy | None = None,
    global_ot_settings: OvertimeSettings | None = None,
) -> EmployeePayrollResult:
    """
    Compute one employee's month.

    Steps:
    1. Apportion basic pay over payable shifts
    2. First-pass allowances (fixed and basic-based)
    3. Gross = basic + first-pass allowances
    4. Second-pass allowances (gross-based), merged with overrides
    5. Deductions, both passes, merged with overrides
    6. OT pay and attendance bonus

    Raises whatever the engines raise for missing required input.
    """
    basic = calculate_basic_pay(
        emp.gross_salary,
        emp.total_days_in_month,
        emp.total_payable_shifts,
    )
    basic_pay = basic.basic_pay

    first_allowances = calculate_line_items(
        masters, CompensationCategory.ALLOWANCE, emp.department_id, basic_pay,
        attendance=emp.attendance,
    )
    gross_salary = basic_pay + calculate_total(first_allowances)
    gross_allowances = calculate_line_items(
        masters, CompensationCategory.ALLOWANCE, emp.department_id, basic_pay,
        gross_salary=gross_salary,
        attendance=emp.attendance,
        use_gross_base=True,
    )
    allowances = merge_with_overrides(
        first_allowances + gross_allowances,
        emp.allowance_overrides,
        emp.include_missing,
    )

    first_deductions = calculate_line_items(
        masters, CompensationCategory.DEDUCTION, emp.department_id, basic_pay,
        attendance=emp.attendance,
    )
    gross_deductions = calculate_line_items(
        masters, CompensationCategory.DEDUCTION, emp.department_id, basic_pay,
        gross_salary=gross_salary,
        attendance=emp.attendance,
        use_gross_base=True,
    )
    deductions = merge_with_overrides(
        first_deductions + gross_deductions,
        emp.deduction_overrides,
        emp.include_missing,
    )

    ot_pay = None
    if emp.ot_hours is not None:
        settings = resolve_ot_settings(emp.ot_settings, global_ot_settings)
        ot_pay = calculate_ot_pay(emp.ot_hours, settings)

    bonus = None
    if bonus_policy is not None and emp.monthly_totals is not None:
        bonus = calculate_policy_bonus(
            emp.employee_id,
            emp.month,
            emp.monthly_totals,
            bonus_policy,
            gross_salary=emp.gross_salary,
        )

    return EmployeePayrollResult(
        employee_id=emp.employee_id,
        basic_pay=basic,
        allowances=allowances,
        deductions=deductions,
        total_allowances=calculate_total(allowances),
        total_deductions=calculate_total(deductions),
        gross_salary=gross_salary,
        ot_pay=ot_pay,
        bonus=bonus,
    )


def run_payroll_batch(
    month: str,
    employees: list[EmployeePayrollInput],
    masters: list[CompensationItemMaster],
    bonus_policy: BonusPolicy | None = None,
    global_ot_settings: OvertimeSettings | None = None,
) -> PayrollBatchResult:
    """
    Compute every employee for ``month``.

    Errors are caught per employee and recorded as ``error`` results;
    the run always covers the whole list.
    """
    logger.info(f"Starting payroll batch for {month}: {len(employees)} employee(s)")

    batch = PayrollBatchResult(month=month, total=len(employees))

    for emp in employees:
        try:
            result = calculate_employee_payroll(emp, masters, bonus_policy, global_ot_settings)
            batch.completed += 1
        except Exception as e:
            batch.failed += 1
            logger.error(f"Payroll calculation failed for employee {emp.employee_id}: {e}")
            result = EmployeePayrollResult(
                employee_id=emp.employee_id,
                status="error",
                error=str(e),
            )
        batch.results.append(result)

    logger.info(
        f"Payroll batch {month} finished: {batch.completed} completed, {batch.failed} failed"
    )
    return batch
