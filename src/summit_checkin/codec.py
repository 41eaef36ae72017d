"""Snapshot encoding for persisted check-in state.

The persisted blob is a JSON object::

    {"total": 3,
     "teamCounts": {"water": 2, "netzero": 1, "renewables": 0},
     "records": [{"name": "Ana", "team": "netzero"}, ...]}

``records`` is newest first. Decoding is deliberately forgiving: every field
is rebuilt on its own, bad records are dropped, and anything unreadable is
treated as "no prior state" instead of an error. Snapshots written by the
browser version of the widget (``teams`` / ``attendees``) are read as well.
"""

from __future__ import annotations

import json
import math
from typing import Any, Dict, Optional

from .logger import get_logger
from .models import CheckInRecord, CheckInState
from .teams import TeamCatalog, TeamId

log = get_logger("codec")

_LEGACY_FIELDS = {"teamCounts": "teams", "records": "attendees"}


def encode(state: CheckInState) -> str:
    payload = {
        "total": state.total,
        "teamCounts": {team.value: int(state.team_counts.get(team, 0)) for team in TeamId},
        "records": [{"name": record.name, "team": record.team.value} for record in state.records],
    }
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))


def decode(raw: Any) -> Optional[CheckInState]:
    """Parse a persisted snapshot; return ``None`` when there is nothing usable."""
    if not isinstance(raw, (str, bytes, bytearray)) or not raw:
        return None
    try:
        payload = json.loads(raw)
    except (ValueError, TypeError, RecursionError) as exc:
        log.debug("Ignoring unreadable check-in snapshot: %s", exc)
        return None
    if not isinstance(payload, dict):
        log.debug("Ignoring check-in snapshot of type %s", type(payload).__name__)
        return None
    try:
        return _rebuild(payload)
    except Exception as exc:  # noqa: BLE001
        log.debug("Ignoring malformed check-in snapshot: %s", exc)
        return None


def coerce_count(value: Any) -> int:
    """Coerce to a non-negative int; anything that is not a usable number is 0."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        try:
            value = float(text)
        except ValueError:
            return 0
    if isinstance(value, int):
        return value if value > 0 else 0
    if isinstance(value, float):
        if not math.isfinite(value) or value <= 0:
            return 0
        return int(value)
    return 0


def _field(payload: Dict[str, Any], name: str) -> Any:
    if name in payload:
        return payload[name]
    legacy = _LEGACY_FIELDS.get(name)
    return payload.get(legacy) if legacy else None


def _decode_record(item: Any) -> Optional[CheckInRecord]:
    if not isinstance(item, dict):
        return None
    name = item.get("name")
    if not isinstance(name, str) or not name.strip():
        return None
    team = TeamCatalog.from_key(item.get("team"))
    if team is None:
        return None
    return CheckInRecord(name=name.strip(), team=team)


def _rebuild(payload: Dict[str, Any]) -> CheckInState:
    counts_raw = _field(payload, "teamCounts")
    if not isinstance(counts_raw, dict):
        counts_raw = {}
    counts = {team: coerce_count(counts_raw.get(team.value)) for team in TeamId}

    records_raw = _field(payload, "records")
    records = []
    if isinstance(records_raw, list):
        for item in records_raw:
            record = _decode_record(item)
            if record is not None:
                records.append(record)

    state = CheckInState(
        total=coerce_count(payload.get("total")),
        team_counts=counts,
        records=tuple(records),
    )
    if state.is_consistent():
        return state

    log.debug(
        "Snapshot counters disagree with records (total=%s, counts=%s, records=%s); rebuilding",
        state.total,
        {team.value: count for team, count in counts.items()},
        len(records),
    )
    return _from_records(state.records)


def _from_records(records) -> CheckInState:
    counts = {team: 0 for team in TeamId}
    for record in records:
        counts[record.team] += 1
    return CheckInState(total=len(records), team_counts=counts, records=tuple(records))


__all__ = ["encode", "decode", "coerce_count"]
