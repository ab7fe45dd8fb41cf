"""
Punch Log Adapter

Normalizes heterogeneous biometric device payloads into PunchEvents so
the pairing engine only ever sees a clean IN/OUT direction.

Devices report direction as ``punch_state`` (0/1, numeric or string),
``type`` ("IN"/"OUT") or ADMS ``inOutMode`` (0/1).
"""

import logging
from datetime import datetime

from shiftpay.schemas.attendance import PunchDirection, PunchEvent
from shiftpay.services.shift_pairing import local_zone, to_local_naive

logger = logging.getLogger(__name__)

ADMS_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

_STATE_DIRECTIONS = {
    "0": PunchDirection.IN,
    "1": PunchDirection.OUT,
}


def normalize_direction(raw: dict) -> PunchDirection | None:
    """Map a raw device record's direction fields to a PunchDirection."""
    for field in ("punch_state", "inOutMode", "in_out_mode"):
        value = raw.get(field)
        if value is None or isinstance(value, bool):
            continue
        direction = _STATE_DIRECTIONS.get(str(value).strip())
        if direction is not None:
            return direction

    for field in ("type", "direction"):
        value = raw.get(field)
        if isinstance(value, str) and value.strip().upper() in PunchDirection.__members__:
            return PunchDirection[value.strip().upper()]

    return None


def _parse_timestamp(value) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    try:
        if isinstance(value, (int, float)):
            return datetime.fromtimestamp(value)
        if isinstance(value, str):
            text = value.strip().replace("/", "-")
            if text.endswith("Z"):
                text = text[:-1] + "+00:00"
            return datetime.fromisoformat(text)
    except (ValueError, TypeError, OSError):
        return None
    return None


def _source_id(raw: dict, timestamp: datetime, direction: PunchDirection) -> str:
    for field in ("_id", "id", "source_id"):
        value = raw.get(field)
        if value is not None and str(value) != "":
            return str(value)
    # No device id: derive a stable one so duplicates still collapse
    user = raw.get("userId") or raw.get("employee_number") or raw.get("user_id") or ""
    return f"{user}:{timestamp.isoformat()}:{direction.value}"


def normalize_punch(raw: dict) -> PunchEvent | None:
    """
    Build a PunchEvent from a raw device record.

    Timestamps carrying an offset are converted to local wall-clock
    time, so every punch from a mixed-format batch is naive local time.
    Returns None (and logs) for records without a usable timestamp or
    direction.
    """
    timestamp = _parse_timestamp(raw.get("timestamp"))
    if timestamp is None:
        logger.warning(f"Dropping punch without a valid timestamp: {raw!r}")
        return None
    timestamp = to_local_naive(timestamp, local_zone())

    direction = normalize_direction(raw)
    if direction is None:
        logger.warning(f"Dropping punch with unknown direction: {raw!r}")
        return None

    return PunchEvent(
        timestamp=timestamp,
        direction=direction,
        source_id=_source_id(raw, timestamp, direction),
    )


def normalize_punches(raw_logs: list[dict] | None) -> list[PunchEvent]:
    """Normalize a batch of raw records, dropping the unusable ones."""
    punches: list[PunchEvent] = []
    for raw in raw_logs or []:
        punch = normalize_punch(raw)
        if punch is not None:
            punches.append(punch)
    return punches


def parse_adms_text_records(text: str) -> list[dict]:
    """
    Parse ADMS push-protocol attendance lines.

    Lines are tab-separated: user id, timestamp, inOutMode, status, ...
    Blank lines, ``table=`` headers and lines with an unreadable
    timestamp are skipped.

    Example line: ``1\t2025-12-23 00:50:00\t0\t0\t0\t0``
    """
    records: list[dict] = []

    for line in text.splitlines():
        if not line.strip() or line.startswith("table="):
            continue

        parts = line.split("\t")
        if len(parts) < 2:
            continue

        try:
            timestamp = datetime.strptime(parts[1].strip(), ADMS_TIMESTAMP_FORMAT)
        except ValueError:
            logger.warning(f"Skipping ADMS record with bad timestamp: {line!r}")
            continue

        records.append({
            "userId": parts[0].strip(),
            "timestamp": timestamp,
            "inOutMode": _to_int(parts[2]) if len(parts) > 2 else 0,
            "status": _to_int(parts[3]) if len(parts) > 3 else 0,
        })

    return records


def _to_int(value: str) -> int:
    try:
        return int(value.strip())
    except (ValueError, AttributeError):
        return 0
