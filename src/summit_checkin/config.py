"""Environment-driven settings for the check-in tool."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional

from .storage import STORAGE_KEY
from .store import DEFAULT_GOAL

DEFAULT_STATE_FILE = ".checkin_state.json"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def load_env(path: str = ".env") -> None:
    """Populate :data:`os.environ` with values from a ``.env`` file.

    Existing environment variables are not overridden. Lines beginning with
    ``#`` or without an ``=`` are ignored. Values wrapped in single or double
    quotes are unwrapped before assignment.
    """
    try:
        if not os.path.exists(path):
            return
        with open(path, "r", encoding="utf-8") as file:
            for raw in file:
                line = raw.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip().strip('"').strip("'")
                if key and key not in os.environ:
                    os.environ[key] = value
    except (OSError, UnicodeDecodeError):
        # A broken .env must not stop check-ins.
        pass


def parse_goal(raw: Any, default: int = DEFAULT_GOAL) -> int:
    """Read a goal the way ``parseInt`` would; fall back to ``default`` unless positive."""
    if raw is None or isinstance(raw, bool):
        return default
    if isinstance(raw, int):
        return raw if raw > 0 else default
    match = _LEADING_INT.match(str(raw))
    if not match:
        return default
    goal = int(match.group(1))
    return goal if goal > 0 else default


@dataclass
class CheckInSettings:
    """Resolved configuration; ``goal_raw`` is parsed on every render."""

    state_file: Path = Path(DEFAULT_STATE_FILE)
    storage_key: str = STORAGE_KEY
    goal_raw: Optional[str] = None
    ephemeral: bool = False

    @classmethod
    def from_env(cls) -> "CheckInSettings":
        return cls(
            state_file=Path(os.getenv("CHECKIN_STATE_FILE") or DEFAULT_STATE_FILE),
            storage_key=os.getenv("CHECKIN_STORAGE_KEY") or STORAGE_KEY,
            goal_raw=os.getenv("CHECKIN_GOAL"),
        )

    @property
    def goal(self) -> int:
        return parse_goal(self.goal_raw)

    def goal_source(self) -> Callable[[], int]:
        return lambda: parse_goal(self.goal_raw)


__all__ = [
    "DEFAULT_GOAL",
    "DEFAULT_STATE_FILE",
    "CheckInSettings",
    "load_env",
    "parse_goal",
]
