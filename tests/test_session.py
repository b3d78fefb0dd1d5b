from __future__ import annotations

import sys
from datetime import date
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from models import Routine  # noqa: E402
from repo_json import JSONRepo  # noqa: E402
from session import CalendarSession  # noqa: E402
from store import LocalStore  # noqa: E402


class _FakeStore:
    """Records subscriptions and writes without delivering anything on its own."""

    def __init__(self):
        self.routine_callbacks = []
        self.completion_subs = {}
        self.toggles = []
        self._token = 0

    def subscribe_routines(self, on_change):
        self.routine_callbacks.append(on_change)
        return lambda: self.routine_callbacks.remove(on_change)

    def subscribe_completions(self, year, month, on_change):
        self._token += 1
        token = self._token
        self.completion_subs[token] = (year, month, on_change)
        return lambda: self.completion_subs.pop(token, None)

    def toggle_completion(self, date_str, routine_id, currently_done):
        self.toggles.append((date_str, routine_id, currently_done))
        return True


def _subscribed_months(store):
    return [(y, m) for y, m, _ in store._completion_listeners.values()]


def _local_session(tmp_path):
    store = LocalStore(JSONRepo(str(tmp_path / "routines.json")))
    session = CalendarSession(store, today=date(2024, 3, 15))
    return session, store


def test_starts_on_todays_month_with_one_subscription(tmp_path):
    session, store = _local_session(tmp_path)
    session.start()
    assert (session.year, session.month) == (2024, 3)
    assert _subscribed_months(store) == [(2024, 3)]
    assert session.label == "March 2024"


def test_navigation_keeps_at_most_one_completion_subscription(tmp_path):
    session, store = _local_session(tmp_path)
    session.start()
    session.next_month()
    assert _subscribed_months(store) == [(2024, 4)]
    session.prev_month()
    session.prev_month()
    assert _subscribed_months(store) == [(2024, 2)]
    session.show_month(2023, 12)
    assert _subscribed_months(store) == [(2023, 12)]
    session.stop()
    assert _subscribed_months(store) == []


def test_stale_month_delivery_is_dropped():
    store = _FakeStore()
    session = CalendarSession(store, today=date(2024, 3, 15))
    session.start()
    [(_, _, march_callback)] = store.completion_subs.values()

    session.next_month()
    assert [(y, m) for y, m, _ in store.completion_subs.values()] == [(2024, 4)]

    march_callback({"2024-03-05": {"r1": True}})
    assert session.completions == {}

    [(_, _, april_callback)] = store.completion_subs.values()
    april_callback({"2024-04-02": {"r1": True}})
    assert session.completions == {"2024-04-02": {"r1": True}}


def test_toggle_uses_snapshot_value_and_leaves_it_alone():
    store = _FakeStore()
    session = CalendarSession(store, today=date(2024, 3, 15))
    session.start()
    [(_, _, callback)] = store.completion_subs.values()
    callback({"2024-03-05": {"r1": True}})

    session.toggle("2024-03-05", "r1")
    session.toggle("2024-03-06", "r1")
    assert store.toggles == [("2024-03-05", "r1", True), ("2024-03-06", "r1", False)]
    assert session.completions == {"2024-03-05": {"r1": True}}


def test_toggle_round_trip_through_local_store(tmp_path):
    session, store = _local_session(tmp_path)
    rid = store.create_routine({"name": "Hydrate", "days": [1, 2, 3, 4, 5]})
    session.start()

    session.toggle("2024-03-05", rid)
    assert session.completions == {"2024-03-05": {rid: True}}
    session.toggle("2024-03-05", rid)
    assert session.completions == {"2024-03-05": {rid: False}}


def test_listeners_fire_on_snapshots_and_navigation():
    store = _FakeStore()
    session = CalendarSession(store, today=date(2024, 3, 15))
    calls = []
    session.add_listener(lambda: calls.append((session.year, session.month)))
    session.start()

    store.routine_callbacks[0]([Routine(id="r1", name="Read", days=(0,))])
    session.next_month()
    assert calls == [(2024, 3), (2024, 4)]
    assert [r.id for r in session.routines] == ["r1"]


def test_derived_views_follow_the_latest_snapshots():
    store = _FakeStore()
    session = CalendarSession(store, today=date(2024, 3, 15))
    session.start()
    hydrate = Routine(id="hydrate", name="Hydrate", days=(1, 2, 3, 4, 5))
    store.routine_callbacks[0]([hydrate])
    [(_, _, callback)] = store.completion_subs.values()
    callback({"2024-03-01": {"hydrate": True}})

    weeks = session.weeks()
    assert (weeks[0].expected, weeks[0].completed) == (1, 1)
    assert session.milestones().completed_week_numbers == (1,)
    assert session.grid(today=date(2024, 3, 1)).cells[0].inline[0].done is True
    assert session.legend()[0].times_per_week == 5
    assert session.everyday(today=date(2024, 3, 1)) == []
