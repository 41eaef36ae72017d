"""Wiring for a check-in session: storage, store and view."""

from __future__ import annotations

from typing import Optional

from .config import CheckInSettings
from .console import CheckInConsole
from .logger import get_logger
from .models import CheckInOutcome
from .storage import JsonFileStorage, KeyValueStorage, MemoryStorage, StatePersistence
from .store import CheckInStore


class CheckInSession:
    """Boot the store from persisted state once, then forward submissions to it."""

    def __init__(self, store: CheckInStore, persistence: StatePersistence, logger=None) -> None:
        self.store = store
        self.persistence = persistence
        self._logger = logger or get_logger("session")
        self._started = False

    def start(self) -> None:
        if self._started:
            return
        self._started = True
        snapshot = self.persistence.load()
        if snapshot is None:
            self._logger.debug("No saved check-ins found; starting empty")
        self.store.hydrate(snapshot)

    def submit(self, name: str, team_raw: str) -> CheckInOutcome:
        outcome = self.store.apply_check_in(name, team_raw)
        if outcome.ok:
            self._logger.debug("Check-in #%s recorded", self.store.state.total)
        return outcome

    def export(self, path):
        return self.persistence.export(self.store.state, path)

    def clear(self) -> None:
        self.persistence.clear()


def build_session(
    settings: CheckInSettings,
    *,
    view: Optional[CheckInConsole] = None,
    storage: Optional[KeyValueStorage] = None,
) -> CheckInSession:
    if storage is None:
        storage = MemoryStorage() if settings.ephemeral else JsonFileStorage(settings.state_file)
    persistence = StatePersistence(storage, key=settings.storage_key)
    store = CheckInStore(persistence=persistence, goal_source=settings.goal_source())
    if view is not None:
        view.attach(store)
    return CheckInSession(store, persistence)


__all__ = ["CheckInSession", "build_session"]
