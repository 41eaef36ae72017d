"""Value objects shared by the store, the codec and the view."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

from .teams import TeamId


@dataclass(frozen=True)
class CheckInRecord:
    """A single attendee check-in."""

    name: str
    team: TeamId


def empty_counts() -> Dict[TeamId, int]:
    return {team: 0 for team in TeamId}


@dataclass(frozen=True)
class CheckInState:
    """Snapshot of every check-in so far; ``records`` is newest first."""

    total: int = 0
    team_counts: Dict[TeamId, int] = field(default_factory=empty_counts)
    records: Tuple[CheckInRecord, ...] = ()

    @classmethod
    def empty(cls) -> "CheckInState":
        return cls()

    def with_check_in(self, record: CheckInRecord) -> "CheckInState":
        counts = dict(self.team_counts)
        counts[record.team] = counts.get(record.team, 0) + 1
        return CheckInState(
            total=self.total + 1,
            team_counts=counts,
            records=(record,) + self.records,
        )

    def is_consistent(self) -> bool:
        return self.total == sum(self.team_counts.values()) == len(self.records)


@dataclass(frozen=True)
class Progress:
    """Progress toward the goal; ``percent`` is clamped to 0..100."""

    percent: int
    reached_goal: bool
    total: int
    goal: int


@dataclass(frozen=True)
class LeaderResult:
    team: Optional[TeamId]
    is_tie: bool


class ValidationError(str, Enum):
    """User input errors reported back from a check-in attempt."""

    EMPTY_NAME = "empty_name"
    UNKNOWN_TEAM = "unknown_team"

    @property
    def field(self) -> str:
        return "name" if self is ValidationError.EMPTY_NAME else "team"

    @property
    def hint(self) -> str:
        if self is ValidationError.EMPTY_NAME:
            return "Please enter a name."
        return "Please select a team."


@dataclass(frozen=True)
class CheckInOutcome:
    """Result of ``CheckInStore.apply_check_in``: either a record or an error."""

    record: Optional[CheckInRecord] = None
    error: Optional[ValidationError] = None

    @property
    def ok(self) -> bool:
        return self.record is not None

    @classmethod
    def success(cls, record: CheckInRecord) -> "CheckInOutcome":
        return cls(record=record)

    @classmethod
    def failure(cls, error: ValidationError) -> "CheckInOutcome":
        return cls(error=error)


__all__ = [
    "CheckInRecord",
    "CheckInState",
    "CheckInOutcome",
    "LeaderResult",
    "Progress",
    "ValidationError",
    "empty_counts",
]
