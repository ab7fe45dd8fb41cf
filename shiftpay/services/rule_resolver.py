"""
Compensation Rule Resolver

Picks the single effective rule of an allowance/deduction master for a
department: the department override if one exists, else the global rule.
"""

import logging

from shiftpay.schemas.compensation import CompensationItemMaster, CompensationRule

logger = logging.getLogger(__name__)


def resolve_rule(
    master: CompensationItemMaster | None,
    department_id: str | None = None,
) -> CompensationRule | None:
    """
    Resolve the effective rule of ``master`` for ``department_id``.

    The department rule wins entirely; fields are never merged with the
    global rule. Inactive or absent masters, and malformed rules,
    resolve to None so the item contributes nothing.
    """
    if master is None or not master.is_active:
        return None

    rule: CompensationRule | None = None
    if department_id is not None:
        for dept_rule in master.department_rules:
            if str(dept_rule.department_id) == str(department_id):
                rule = CompensationRule(
                    **dept_rule.model_dump(exclude={"department_id"})
                )
                break

    if rule is None:
        rule = master.global_rule

    if rule is None:
        return None

    if not rule.is_well_formed:
        logger.warning(
            f"Ignoring malformed {rule.kind.value} rule on master '{master.name}' "
            f"(department={department_id})"
        )
        return None

    return rule.model_copy(
        update={"prorated_by_attendance": bool(rule.prorated_by_attendance)}
    )
