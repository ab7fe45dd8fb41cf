"""
Employee Override Merge

Combines organization-wide resolved line items with employee-specific
overrides without touching the master data.
"""

import logging
from typing import Any

from shiftpay.schemas.compensation import EmployeeOverride, ResolvedLineItem

logger = logging.getLogger(__name__)


def _name_key(name: str | None) -> str | None:
    if not name:
        return None
    return name.strip().lower()


def _override_fields(override: EmployeeOverride) -> dict[str, Any]:
    """Fields the override actually supplies, with the legacy amount alias folded in."""
    fields = override.model_dump(exclude_unset=True, exclude_none=True)
    legacy_amount = fields.pop("override_amount", None)
    if "amount" not in fields and legacy_amount is not None:
        fields["amount"] = legacy_amount
    return fields


def _index_item(
    by_key: dict[str, int],
    by_name: dict[str, int],
    master_key: str | None,
    name: str | None,
    index: int,
) -> None:
    if master_key is not None:
        by_key.setdefault(str(master_key), index)
    name = _name_key(name)
    if name is not None:
        by_name.setdefault(name, index)


def _find_index(
    by_key: dict[str, int],
    by_name: dict[str, int],
    override: EmployeeOverride,
) -> int | None:
    """Position matched by master key, else by case-insensitive name."""
    if override.master_key is not None:
        index = by_key.get(str(override.master_key))
        if index is not None:
            return index
    name = _name_key(override.name)
    if name is not None:
        return by_name.get(name)
    return None


def merge_with_overrides(
    base_list: list[ResolvedLineItem],
    overrides: list[EmployeeOverride | dict | None] | None,
    include_missing: bool = True,
) -> list[ResolvedLineItem]:
    """
    Merge employee overrides into the base line items.

    Each override is matched to a base item by ``master_key``, else by
    case-insensitive name. A match produces the base item with the
    override's supplied fields written over it. Unmatched overrides are
    emitted as standalone items. Both are flagged ``is_employee_override``.
    Base items without an override are kept only when
    ``include_missing`` is true.

    A matched item keeps the base key and name. Standalone items are
    matched against each other the same way, so every key and every name
    appears at most once; a later override for the same item replaces an
    earlier one.
    """
    by_key: dict[str, int] = {}
    by_name: dict[str, int] = {}
    for index, item in enumerate(base_list):
        _index_item(by_key, by_name, item.master_key, item.name, index)

    merged: dict[int, ResolvedLineItem] = {}
    standalone: list[ResolvedLineItem] = []
    standalone_by_key: dict[str, int] = {}
    standalone_by_name: dict[str, int] = {}

    for raw in overrides or []:
        if raw is None:
            continue
        override = raw if isinstance(raw, EmployeeOverride) else EmployeeOverride.model_validate(raw)

        fields = _override_fields(override)
        index = _find_index(by_key, by_name, override)

        if index is not None:
            base = base_list[index]
            data = base.model_dump()
            data.update(fields)
            # Identity always comes from the base item
            data["master_key"] = base.master_key
            data["name"] = base.name
            data["is_employee_override"] = True
            merged[index] = ResolvedLineItem.model_validate(data)
            continue

        if override.master_key is None and _name_key(override.name) is None:
            logger.warning("Skipping employee override with neither master key nor name")
            continue

        fields.setdefault("name", override.name or str(override.master_key))
        fields["is_employee_override"] = True
        item = ResolvedLineItem.model_validate(fields)

        slot = _find_index(standalone_by_key, standalone_by_name, override)
        if slot is None:
            slot = len(standalone)
            standalone.append(item)
        else:
            standalone[slot] = item
        _index_item(standalone_by_key, standalone_by_name, override.master_key, override.name, slot)

    result: list[ResolvedLineItem] = []
    for index, item in enumerate(base_list):
        if index in merged:
            result.append(merged[index])
        elif include_missing:
            result.append(item.model_copy(update={"is_employee_override": False}))

    result.extend(standalone)
    return result
