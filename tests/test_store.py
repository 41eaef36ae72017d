from unittest.mock import MagicMock

import pytest

from summit_checkin.models import CheckInRecord, CheckInState, ValidationError
from summit_checkin.store import CheckInRejected, CheckInStore, StateChanged
from summit_checkin.teams import TeamId


def _ready_store(**kwargs) -> CheckInStore:
    store = CheckInStore(**kwargs)
    store.hydrate(None)
    return store


def _state_with_counts(water: int, netzero: int, renewables: int) -> CheckInState:
    records = (
        [CheckInRecord(name=f"w{i}", team=TeamId.WATER) for i in range(water)]
        + [CheckInRecord(name=f"z{i}", team=TeamId.NET_ZERO) for i in range(netzero)]
        + [CheckInRecord(name=f"r{i}", team=TeamId.RENEWABLES) for i in range(renewables)]
    )
    return CheckInState(
        total=len(records),
        team_counts={TeamId.WATER: water, TeamId.NET_ZERO: netzero, TeamId.RENEWABLES: renewables},
        records=tuple(records),
    )


def test_hydrate_without_snapshot_starts_empty_and_replays_once() -> None:
    store = CheckInStore()
    events = []
    store.subscribe(events.append)

    store.hydrate(None)

    assert store.is_ready
    assert store.state == CheckInState.empty()
    assert len(events) == 1
    assert isinstance(events[0], StateChanged)
    assert events[0].replay is True
    assert events[0].record is None


def test_hydrate_adopts_snapshot_and_ignores_second_call() -> None:
    snapshot = _state_with_counts(2, 1, 0)
    store = CheckInStore()
    events = []
    store.subscribe(events.append)

    store.hydrate(snapshot)
    store.hydrate(None)

    assert store.state is snapshot
    assert len(events) == 1


def test_trimmed_check_in_is_prepended_and_persisted() -> None:
    persistence = MagicMock()
    store = _ready_store(persistence=persistence)
    store.apply_check_in("Ben", "water")

    outcome = store.apply_check_in("  Ana  ", "zero")

    assert outcome.ok
    assert outcome.record == CheckInRecord(name="Ana", team=TeamId.NET_ZERO)
    assert store.state.records[0] == outcome.record
    assert store.state.total == 2
    assert store.state.team_counts[TeamId.NET_ZERO] == 1
    assert persistence.save.call_count == 2
    persistence.save.assert_called_with(store.state)


@pytest.mark.parametrize(
    "name,team,error",
    [
        ("", "water", ValidationError.EMPTY_NAME),
        ("   ", "water", ValidationError.EMPTY_NAME),
        (None, "water", ValidationError.EMPTY_NAME),
        ("", "bogus", ValidationError.EMPTY_NAME),
        ("Ana", "bogus", ValidationError.UNKNOWN_TEAM),
        ("Ana", "", ValidationError.UNKNOWN_TEAM),
        ("Ana", "netzero", ValidationError.UNKNOWN_TEAM),
    ],
)
def test_invalid_check_ins_leave_state_untouched(name, team, error) -> None:
    persistence = MagicMock()
    store = _ready_store(persistence=persistence)
    store.apply_check_in("Cy", "power")
    before = store.state
    events = []
    store.subscribe(events.append)

    outcome = store.apply_check_in(name, team)

    assert not outcome.ok
    assert outcome.error is error
    assert store.state is before
    assert persistence.save.call_count == 1
    assert events == [CheckInRejected(error=error)]


def test_records_are_newest_first() -> None:
    store = _ready_store()
    for name in ("A", "B", "C"):
        store.apply_check_in(name, "water")

    assert [record.name for record in store.state.records] == ["C", "B", "A"]


def test_totals_stay_consistent_after_every_operation() -> None:
    store = _ready_store()
    submissions = [("A", "water"), ("", "zero"), ("B", "zero"), ("C", "nope"), ("D", "power"), ("E", "zero")]
    for name, team in submissions:
        store.apply_check_in(name, team)
        state = store.state
        assert state.total == sum(state.team_counts.values()) == len(state.records)
    assert store.state.total == 4


def test_check_in_before_hydrate_acts_on_empty_state() -> None:
    store = CheckInStore()
    events = []
    store.subscribe(events.append)

    outcome = store.apply_check_in("Ana", "water")

    assert outcome.ok
    assert store.is_ready
    assert store.state.total == 1
    assert [event.replay for event in events] == [False]


def test_check_in_survives_failed_persistence() -> None:
    persistence = MagicMock()
    persistence.save.return_value = False
    store = _ready_store(persistence=persistence)

    outcome = store.apply_check_in("Ana", "water")

    assert outcome.ok
    assert store.state.total == 1


def test_success_event_carries_record_progress_and_leader() -> None:
    store = _ready_store(goal_source=lambda: 2)
    events = []
    store.subscribe(events.append)

    store.apply_check_in("Ana", "water")
    store.apply_check_in("Ben", "water")

    last = events[-1]
    assert last.replay is False
    assert last.record == CheckInRecord(name="Ben", team=TeamId.WATER)
    assert last.progress.percent == 100
    assert last.progress.reached_goal is True
    assert last.leader.team is TeamId.WATER


def test_unsubscribe_stops_notifications() -> None:
    store = _ready_store()
    listener = MagicMock()
    unsubscribe = store.subscribe(listener)

    unsubscribe()
    store.apply_check_in("Ana", "water")

    listener.assert_not_called()


@pytest.mark.parametrize(
    "counts,team,is_tie",
    [
        ((3, 3, 1), None, True),
        ((0, 0, 0), None, True),
        ((5, 2, 2), TeamId.WATER, False),
        ((1, 4, 4), None, True),
        ((0, 0, 1), TeamId.RENEWABLES, False),
    ],
)
def test_compute_leader(counts, team, is_tie) -> None:
    store = CheckInStore()
    store.hydrate(_state_with_counts(*counts))

    leader = store.compute_leader()

    assert leader.team is team
    assert leader.is_tie is is_tie


@pytest.mark.parametrize(
    "total,percent,reached",
    [
        (0, 0, False),
        (10, 20, False),
        (49, 98, False),
        (50, 100, True),
        (75, 100, True),
    ],
)
def test_compute_progress_against_goal_of_fifty(total, percent, reached) -> None:
    store = CheckInStore()
    store.hydrate(_state_with_counts(total, 0, 0))

    progress = store.compute_progress(50)

    assert progress.percent == percent
    assert progress.reached_goal is reached
    assert progress.total == total
    assert progress.goal == 50


def test_compute_progress_rounds_half_up() -> None:
    store = CheckInStore()
    store.hydrate(_state_with_counts(1, 0, 0))

    assert store.compute_progress(8).percent == 13
    assert store.compute_progress(200).percent == 1


@pytest.mark.parametrize("goal", [0, -5])
def test_compute_progress_refuses_non_positive_goal(goal) -> None:
    store = _ready_store()

    with pytest.raises(ValueError):
        store.compute_progress(goal)


@pytest.mark.parametrize("goal_source", [lambda: 0, lambda: -3, lambda: "ten", lambda: None, 0])
def test_unusable_goal_falls_back_before_state_changes(goal_source) -> None:
    persistence = MagicMock()
    store = _ready_store(persistence=persistence, goal_source=goal_source)
    events = []
    store.subscribe(events.append)

    outcome = store.apply_check_in("Ana", "water")

    assert outcome.ok
    assert store.state.total == 1
    persistence.save.assert_called_once_with(store.state)
    assert events[-1].progress.goal == 50
    assert events[-1].progress.percent == 2


def test_failing_listener_does_not_break_check_in() -> None:
    store = _ready_store()
    broken = MagicMock(side_effect=RuntimeError("view crashed"))
    healthy = MagicMock()
    store.subscribe(broken)
    store.subscribe(healthy)

    outcome = store.apply_check_in("Ana", "water")

    assert outcome.ok
    assert store.state.total == 1
    broken.assert_called_once()
    healthy.assert_called_once()
    assert healthy.call_args.args[0].record == outcome.record
