"""Event check-in tracking: team counts, progress toward a goal, and a newest-first attendee list."""

from .codec import decode, encode
from .models import CheckInOutcome, CheckInRecord, CheckInState, LeaderResult, Progress, ValidationError
from .storage import JsonFileStorage, MemoryStorage, StatePersistence
from .store import CheckInRejected, CheckInStore, StateChanged
from .teams import TeamCatalog, TeamId

__all__ = [
    "CheckInOutcome",
    "CheckInRecord",
    "CheckInRejected",
    "CheckInState",
    "CheckInStore",
    "JsonFileStorage",
    "LeaderResult",
    "MemoryStorage",
    "Progress",
    "StateChanged",
    "StatePersistence",
    "TeamCatalog",
    "TeamId",
    "ValidationError",
    "decode",
    "encode",
]
