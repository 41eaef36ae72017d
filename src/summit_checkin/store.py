"""Check-in state store: validation, mutation, derived values and notifications."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Protocol, Union

from .logger import get_logger
from .models import (
    CheckInOutcome,
    CheckInRecord,
    CheckInState,
    LeaderResult,
    Progress,
    ValidationError,
)
from .teams import TeamCatalog, TeamId

DEFAULT_GOAL = 50

log = get_logger("store")


@dataclass(frozen=True)
class StateChanged:
    """Emitted on hydration (``replay=True``) and after every accepted check-in."""

    state: CheckInState
    progress: Progress
    leader: LeaderResult
    record: Optional[CheckInRecord] = None
    replay: bool = False


@dataclass(frozen=True)
class CheckInRejected:
    """Emitted when a submission fails validation."""

    error: ValidationError

    @property
    def field(self) -> str:
        return self.error.field

    @property
    def hint(self) -> str:
        return self.error.hint


StoreEvent = Union[StateChanged, CheckInRejected]
Listener = Callable[[StoreEvent], None]


class StatePersister(Protocol):
    """Anything that can persist a snapshot (see ``storage.StatePersistence``)."""

    def save(self, state: CheckInState) -> bool:
        """Persist ``state``; never raises."""


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class CheckInStore:
    """Owns the canonical ``CheckInState``; ``apply_check_in`` is the only mutation."""

    def __init__(
        self,
        persistence: Optional[StatePersister] = None,
        goal_source: Union[Callable[[], int], int] = DEFAULT_GOAL,
    ) -> None:
        self._persistence = persistence
        if callable(goal_source):
            self._goal_source = goal_source
        else:
            fixed_goal = goal_source
            self._goal_source = lambda: fixed_goal
        self._state = CheckInState.empty()
        self._ready = False
        self._listeners: List[Listener] = []

    @property
    def state(self) -> CheckInState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._ready

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; the returned callable unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def hydrate(self, persisted: Optional[CheckInState]) -> None:
        if self._ready:
            log.debug("Check-in store already hydrated; ignoring replay")
            return
        self._state = persisted if persisted is not None else CheckInState.empty()
        self._ready = True
        log.debug(
            "Hydrated check-in store with %s record(s)",
            len(self._state.records),
        )
        self._notify(self._changed(record=None, replay=True, goal=self.current_goal()))

    def apply_check_in(self, raw_name: Any, raw_team: Any) -> CheckInOutcome:
        if not self._ready:
            log.debug("Check-in received before hydration; starting from an empty state")
            self._ready = True

        name = raw_name.strip() if isinstance(raw_name, str) else ""
        if not name:
            return self._reject(ValidationError.EMPTY_NAME)
        team = TeamCatalog.normalize(raw_team)
        if team is None:
            return self._reject(ValidationError.UNKNOWN_TEAM)

        goal = self.current_goal()
        record = CheckInRecord(name=name, team=team)
        self._state = self._state.with_check_in(record)
        if self._persistence is not None:
            self._persistence.save(self._state)
        log.debug("Checked in %s for %s (total %s)", name, team.value, self._state.total)
        self._notify(self._changed(record=record, replay=False, goal=goal))
        return CheckInOutcome.success(record)

    def compute_progress(self, goal: int) -> Progress:
        if goal < 1:
            raise ValueError(f"goal must be a positive integer, got {goal!r}")
        total = self._state.total
        percent = _round_half_up(100 * total / goal)
        percent = min(max(percent, 0), 100)
        return Progress(percent=percent, reached_goal=total >= goal, total=total, goal=goal)

    def compute_leader(self) -> LeaderResult:
        counts = self._state.team_counts
        top = max(counts.get(team, 0) for team in TeamId)
        leaders = [team for team in TeamId if counts.get(team, 0) == top]
        if len(leaders) == 1:
            return LeaderResult(team=leaders[0], is_tie=False)
        return LeaderResult(team=None, is_tie=True)

    def current_goal(self) -> int:
        """Goal for the next render; anything but a positive int falls back to the default."""
        goal = self._goal_source()
        if isinstance(goal, bool) or not isinstance(goal, int) or goal < 1:
            log.debug("Ignoring unusable goal %r; using %s", goal, DEFAULT_GOAL)
            return DEFAULT_GOAL
        return goal

    def _changed(self, *, record: Optional[CheckInRecord], replay: bool, goal: int) -> StateChanged:
        return StateChanged(
            state=self._state,
            progress=self.compute_progress(goal),
            leader=self.compute_leader(),
            record=record,
            replay=replay,
        )

    def _reject(self, error: ValidationError) -> CheckInOutcome:
        log.debug("Rejected check-in: %s", error.value)
        self._notify(CheckInRejected(error=error))
        return CheckInOutcome.failure(error)

    def _notify(self, event: StoreEvent) -> None:
        # Listener failures are logged; the remaining listeners still run.
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as exc:  # noqa: BLE001
                log.error("Check-in listener %r failed: %s", listener, exc, exc_info=True)


__all__ = [
    "DEFAULT_GOAL",
    "CheckInStore",
    "CheckInRejected",
    "StateChanged",
    "StoreEvent",
]
