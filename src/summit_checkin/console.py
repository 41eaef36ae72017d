"""Rich terminal view for the check-in store.

``CheckInConsole`` subscribes to a ``CheckInStore`` and renders what the
browser widget used to show: team counters, the progress bar, the attendee
list, the welcome greeting, the completion message and field-level hints.
Each region can be switched off, in which case it is simply not drawn.
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Column, Table
from rich.text import Text

from .models import CheckInRecord, CheckInState, LeaderResult, Progress
from .store import CheckInRejected, CheckInStore, StateChanged, StoreEvent
from .teams import TeamCatalog, TeamId


def greeting_for(full_name: str) -> Optional[str]:
    parts = (full_name or "").split()
    if not parts:
        return None
    return f"Welcome, {parts[0]}!"


def attendee_line(record: CheckInRecord) -> str:
    return f"{record.name} — {TeamCatalog.label(record.team)}"


def completion_message(progress: Progress, leader: LeaderResult) -> Optional[str]:
    """Message shown once the goal is reached; ``None`` before that."""
    if not progress.reached_goal:
        return None
    if leader.is_tie or leader.team is None:
        return "Goal reached! It's a tie. Great job, teams!"
    return f"Goal reached! {TeamCatalog.label(leader.team)} is in the lead!"


def progress_bar(progress: Progress, width: int = 28) -> Text:
    width = max(width, 1)
    filled = int(width * progress.percent / 100)
    text = Text("╭", style="blue")
    if filled:
        text.append("█" * filled, style="bright_green" if progress.reached_goal else "bright_blue")
    if width - filled:
        text.append("░" * (width - filled), style="dim white")
    text.append("╮ ", style="blue")
    text.append(f"{progress.percent:>3d}%", style="bold")
    text.append(f" ({progress.total}/{progress.goal})", style="dim")
    return text


class CheckInConsole:
    """Render store notifications to a rich ``Console``."""

    def __init__(
        self,
        console: Optional[Console] = None,
        *,
        show_counters: bool = True,
        show_progress: bool = True,
        show_list: bool = True,
        show_greeting: bool = True,
        bar_width: int = 28,
    ) -> None:
        self.console = console or Console()
        self.show_counters = show_counters
        self.show_progress = show_progress
        self.show_list = show_list
        self.show_greeting = show_greeting
        self.bar_width = bar_width

    def attach(self, store: CheckInStore) -> Callable[[], None]:
        return store.subscribe(self)

    def __call__(self, event: StoreEvent) -> None:
        if isinstance(event, CheckInRejected):
            self.render_hint(event)
        elif event.replay:
            self.render_snapshot(event)
        else:
            self.render_check_in(event)

    # ------------------------------------------------------------------
    # Event renderers

    def render_snapshot(self, event: StateChanged) -> None:
        self._render_status(event.state, event.progress)
        if self.show_list:
            self.console.print(self.attendee_table(event.state.records))
        self._render_completion(event)

    def render_check_in(self, event: StateChanged) -> None:
        if self.show_greeting and event.record is not None:
            greeting = greeting_for(event.record.name)
            if greeting:
                self.console.print(Panel.fit(Text(greeting, style="bold green"), border_style="green", padding=(0, 2)))
        if self.show_list and event.record is not None:
            line = Text("+ ", style="bright_blue")
            line.append(attendee_line(event.record))
            self.console.print(line)
        self._render_status(event.state, event.progress)
        self._render_completion(event)

    def render_hint(self, event: CheckInRejected) -> None:
        hint = Text(f"{event.field}: ", style="bold red")
        hint.append(event.hint, style="red")
        self.console.print(hint)

    # ------------------------------------------------------------------
    # Building blocks

    def counters_table(self, state: CheckInState) -> Table:
        table = Table(
            Column(header="Team", style="bold"),
            Column(header="Checked in", justify="right", style="bright_blue"),
            box=None,
            show_header=True,
            header_style="bold blue",
            expand=False,
        )
        for team in TeamId:
            table.add_row(TeamCatalog.label(team), str(state.team_counts.get(team, 0)))
        table.add_row(Text("Total", style="bold"), Text(str(state.total), style="bold"))
        return table

    def attendee_table(self, records: Iterable[CheckInRecord]) -> Table:
        table = Table(
            Column(header="#", justify="right", style="blue"),
            Column(header="Attendee"),
            box=None,
            show_header=True,
            header_style="bold blue",
            expand=False,
        )
        for index, record in enumerate(records, 1):
            table.add_row(str(index), Text(attendee_line(record)))
        return table

    def _render_status(self, state: CheckInState, progress: Progress) -> None:
        if self.show_counters:
            self.console.print(self.counters_table(state))
        if self.show_progress:
            self.console.print(progress_bar(progress, self.bar_width))

    def _render_completion(self, event: StateChanged) -> None:
        if not self.show_greeting:
            return
        message = completion_message(event.progress, event.leader)
        if message:
            self.console.print(Panel.fit(Text(message, style="bold green"), border_style="blue", padding=(0, 2)))


__all__ = [
    "CheckInConsole",
    "attendee_line",
    "completion_message",
    "greeting_for",
    "progress_bar",
]
