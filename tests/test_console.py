from io import StringIO

import pytest
from rich.console import Console

from summit_checkin.console import (
    CheckInConsole,
    attendee_line,
    completion_message,
    greeting_for,
    progress_bar,
)
from summit_checkin.models import CheckInRecord, LeaderResult, Progress
from summit_checkin.store import CheckInStore
from summit_checkin.teams import TeamId


def _view(**kwargs):
    console = Console(file=StringIO(), width=100, color_system=None)
    return CheckInConsole(console, **kwargs), console


def _output(console: Console) -> str:
    return console.file.getvalue()


def test_greeting_uses_first_name():
    assert greeting_for("Ana  Maria Lopez") == "Welcome, Ana!"
    assert greeting_for("   ") is None


def test_attendee_line_uses_team_label():
    record = CheckInRecord(name="Ana", team=TeamId.NET_ZERO)

    assert attendee_line(record) == "Ana — Team Net Zero"


@pytest.mark.parametrize(
    "leader,expected",
    [
        (LeaderResult(team=TeamId.WATER, is_tie=False), "Goal reached! Team Water Wise is in the lead!"),
        (LeaderResult(team=None, is_tie=True), "Goal reached! It's a tie. Great job, teams!"),
    ],
)
def test_completion_message_once_goal_reached(leader, expected):
    progress = Progress(percent=100, reached_goal=True, total=50, goal=50)

    assert completion_message(progress, leader) == expected


def test_no_completion_message_before_goal():
    progress = Progress(percent=20, reached_goal=False, total=10, goal=50)

    assert completion_message(progress, LeaderResult(team=TeamId.WATER, is_tie=False)) is None


def test_progress_bar_shows_percent_and_counts():
    bar = progress_bar(Progress(percent=50, reached_goal=False, total=5, goal=10), width=10)

    assert bar.plain == "╭█████░░░░░╮  50% (5/10)"


def test_replay_renders_counters_and_full_list():
    view, console = _view()
    store = CheckInStore(goal_source=lambda: 50)
    view.attach(store)
    store.apply_check_in("Ana", "water")
    console.file.truncate(0)
    console.file.seek(0)

    fresh = CheckInStore(goal_source=lambda: 50)
    view.attach(fresh)
    fresh.hydrate(store.state)

    output = _output(console)
    assert "Team Water Wise" in output
    assert "Ana — Team Water Wise" in output
    assert "Total" in output
    assert "Goal reached" not in output


def test_check_in_renders_greeting_and_completion():
    view, console = _view()
    store = CheckInStore(goal_source=lambda: 1)
    view.attach(store)
    store.hydrate(None)

    store.apply_check_in("Ben Ortiz", "power")

    output = _output(console)
    assert "Welcome, Ben!" in output
    assert "Ben Ortiz — Team Renewables" in output
    assert "Goal reached! Team Renewables is in the lead!" in output


def test_rejection_renders_field_hint():
    view, console = _view()
    store = CheckInStore()
    view.attach(store)
    store.hydrate(None)

    store.apply_check_in("Ana", "bogus")

    assert "team: Please select a team." in _output(console)


def test_disabled_regions_are_skipped():
    view, console = _view(show_list=False, show_greeting=False, show_counters=False)
    store = CheckInStore(goal_source=lambda: 1)
    view.attach(store)
    store.hydrate(None)

    store.apply_check_in("Ana", "water")

    output = _output(console)
    assert "Welcome" not in output
    assert "Ana" not in output
    assert "100%" in output


def test_names_are_not_treated_as_markup():
    view, console = _view()
    store = CheckInStore()
    view.attach(store)
    store.hydrate(None)

    store.apply_check_in("[bold]Ana[/bold]", "water")

    assert "[bold]Ana[/bold] — Team Water Wise" in _output(console)
