"""Tests for debounced, token-guarded search cycles."""

from __future__ import annotations

import pytest

from geodrink.services import QueryState, SearchOutcome, SearchSession


class FakeTimer:
    """Stand-in for threading.Timer that only fires when told to."""

    created = []

    def __init__(self, interval, function, args=None, kwargs=None):
        self.interval = interval
        self.function = function
        self.args = args or ()
        self.kwargs = kwargs or {}
        self.daemon = False
        self.started = False
        self.cancelled = False
        FakeTimer.created.append(self)

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def is_alive(self):
        return False

    def fire(self):
        if not self.cancelled:
            self.function(*self.args, **self.kwargs)


@pytest.fixture(autouse=True)
def reset_timers():
    FakeTimer.created = []
    yield


@pytest.fixture
def session_factory(make_service, node_factory):
    def _make(**kwargs):
        elements = [node_factory(1, 48.0, 2.05, amenity="drinking_water")]
        service, client = make_service(elements=elements)
        updates = []
        session = SearchSession(
            service,
            debounce_seconds=0.5,
            on_update=updates.append,
            timer_factory=FakeTimer,
            **kwargs,
        )
        return session, client, updates

    return _make


def test_burst_of_requests_fetches_once(session_factory, straight_route):
    session, client, updates = session_factory()
    session.load_route(straight_route)
    for buffer_m in (10, 20, 30, 40):
        session.request(buffer_m, "all-sources")

    assert len(FakeTimer.created) == 4
    assert all(t.cancelled for t in FakeTimer.created[:-1])
    assert FakeTimer.created[-1].interval == 0.5
    assert FakeTimer.created[-1].daemon

    for timer in FakeTimer.created:
        timer.fire()
    assert len(client.queries) == 1
    assert len(updates) == 1
    assert session.current_token.buffer_m == 40
    assert [p.id for p in session.points] == ["1"]


def test_stale_outcome_is_discarded(session_factory, straight_route):
    session, _, updates = session_factory()
    session.load_route(straight_route)
    stale = session.issue_token(15, "potable-only")
    fresh = session.issue_token(50, "potable-only")

    late = SearchOutcome((), QueryState.FULFILLED, "k-stale")
    assert not session.is_current(stale)
    assert session.apply(stale, late) is False
    assert session.last_outcome is None

    current = SearchOutcome((), QueryState.CACHED, "k-fresh")
    assert session.apply(fresh, current) is True
    assert session.last_outcome is current
    assert updates == [current]


def test_new_route_supersedes_pending_request(session_factory, straight_route):
    session, client, _ = session_factory()
    session.load_route(straight_route)
    token = session.request(15, "all-sources")
    session.load_route(straight_route)

    pending = FakeTimer.created[0]
    assert pending.cancelled
    assert pending.args == (token,)
    # Even if the timer had already been dispatched, the token is stale.
    assert pending.function(*pending.args) is None
    assert client.queries == []


def test_run_now_without_route_does_nothing(session_factory):
    session, client, _ = session_factory()
    assert session.run_now(15, "potable-only") is None
    assert client.queries == []


def test_run_now_applies_outcome(session_factory, straight_route):
    session, client, updates = session_factory()
    session.load_route(straight_route)
    outcome = session.run_now(100, "all-sources")

    assert outcome.state is QueryState.FULFILLED
    assert session.points == outcome.points
    assert updates == [outcome]
    assert len(client.queries) == 1


def test_clear_route_drops_results(session_factory, straight_route):
    session, _, _ = session_factory()
    session.load_route(straight_route)
    session.run_now(100, "all-sources")
    session.clear_route()
    assert session.route is None
    assert session.points == ()
    assert session.current_token is None


def test_clear_results_keeps_route(session_factory, straight_route):
    session, _, _ = session_factory()
    session.load_route(straight_route)
    session.run_now(100, "all-sources")
    session.clear_results()
    assert session.route is straight_route
    assert session.points == ()


def test_cancel_stops_pending_timer(session_factory, straight_route):
    session, client, _ = session_factory()
    session.load_route(straight_route)
    session.request(15, "all-sources")
    session.cancel()
    FakeTimer.created[0].fire()
    assert client.queries == []
    session.wait(0.1)


def test_real_timer_runs_debounced_search(make_service, straight_route, node_factory):
    service, client = make_service(
        elements=[node_factory(1, 48.0, 2.05, amenity="drinking_water")]
    )
    session = SearchSession(service, debounce_seconds=0.01)
    session.load_route(straight_route)
    session.request(15, "all-sources")
    session.wait(5)
    assert len(client.queries) == 1
    assert [p.id for p in session.points] == ["1"]
