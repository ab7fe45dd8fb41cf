"""
Payroll Tasks

Background tasks running the compensation engines for a month.
Payloads are JSON documents already fetched from the store by the caller.
"""

import logging

from shiftpay.schemas.bonus import BonusPolicy
from shiftpay.schemas.compensation import CompensationItemMaster
from shiftpay.schemas.payroll import EmployeePayrollInput, OvertimeSettings
from shiftpay.services.payroll_batch import run_payroll_batch
from workers.celery_app import app

logger = logging.getLogger(__name__)


def _parse_shared(payload: dict) -> tuple[list, BonusPolicy | None, OvertimeSettings | None]:
    masters = [CompensationItemMaster.model_validate(m) for m in payload.get("masters", [])]
    policy = payload.get("bonus_policy")
    ot_settings = payload.get("global_ot_settings")
    return (
        masters,
        BonusPolicy.model_validate(policy) if policy else None,
        OvertimeSettings.model_validate(ot_settings) if ot_settings else None,
    )


@app.task
def run_payroll_batch_task(payload: dict) -> dict:
    """
    Compute a whole month in one task.

    Payload keys: ``month``, ``employees``, ``masters`` and optionally
    ``bonus_policy`` and ``global_ot_settings``. Employee failures are
    reported in the result, not raised.
    """
    month = payload["month"]
    logger.info(f"Running payroll batch task for {month}")

    masters, policy, ot_settings = _parse_shared(payload)
    employees = [EmployeePayrollInput.model_validate(e) for e in payload.get("employees", [])]

    batch = run_payroll_batch(month, employees, masters, policy, ot_settings)
    return batch.model_dump(mode="json")


@app.task
def calculate_employee_task(payload: dict) -> dict:
    """
    Compute a single employee, for fanning a month out across workers.

    Payload keys: ``month``, ``employee``, ``masters`` and optionally
    ``bonus_policy`` and ``global_ot_settings``.
    """
    masters, policy, ot_settings = _parse_shared(payload)
    employee = EmployeePayrollInput.model_validate(payload["employee"])

    batch = run_payroll_batch(payload["month"], [employee], masters, policy, ot_settings)
    return batch.results[0].model_dump(mode="json")
