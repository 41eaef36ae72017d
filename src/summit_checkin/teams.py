"""Team catalog: raw form codes, canonical team ids and display labels."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional, Tuple


class TeamId(str, Enum):
    """Canonical team identifiers; the value doubles as the persisted key."""

    WATER = "water"
    NET_ZERO = "netzero"
    RENEWABLES = "renewables"


class TeamCatalog:
    """Fixed lookup tables for the three summit teams."""

    _RAW_CODES: Dict[str, TeamId] = {
        "water": TeamId.WATER,
        "zero": TeamId.NET_ZERO,
        "power": TeamId.RENEWABLES,
    }

    _LABELS: Dict[TeamId, str] = {
        TeamId.WATER: "Team Water Wise",
        TeamId.NET_ZERO: "Team Net Zero",
        TeamId.RENEWABLES: "Team Renewables",
    }

    @classmethod
    def normalize(cls, raw: Any) -> Optional[TeamId]:
        """Map a raw form code to a team, or ``None`` when it is not one of ours."""
        if not isinstance(raw, str):
            return None
        return cls._RAW_CODES.get(raw)

    @classmethod
    def from_key(cls, key: Any) -> Optional[TeamId]:
        """Map a canonical (persisted) key back to a team."""
        if not isinstance(key, str):
            return None
        try:
            return TeamId(key)
        except ValueError:
            return None

    @classmethod
    def label(cls, team: TeamId) -> str:
        return cls._LABELS[team]

    @classmethod
    def codes(cls) -> Tuple[str, ...]:
        return tuple(cls._RAW_CODES)


__all__ = ["TeamId", "TeamCatalog"]
