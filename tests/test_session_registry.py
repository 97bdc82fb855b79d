from __future__ import annotations

import pytest

from src.class_attendance.class_attendance.session import SessionRegistry


class FakeSession:
    def __init__(self, session_id: str):
        self.session_id = session_id
        self.closed = False

    def close(self) -> None:
        self.closed = True


class Clock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> Clock:
    return Clock()


def _registry(clock, idle_seconds=60):
    opened: list[FakeSession] = []

    def factory(session_id):
        session = FakeSession(session_id)
        opened.append(session)
        return session

    return SessionRegistry(factory, idle_seconds=idle_seconds, clock=clock), opened


def test_get_or_open_reuses_live_session(clock):
    registry, opened = _registry(clock)

    first = registry.get_or_open("s1")
    clock.now = 59
    assert registry.get_or_open("s1") is first
    assert len(opened) == 1


def test_idle_sessions_are_closed_on_next_access(clock):
    registry, opened = _registry(clock)
    stale = registry.get_or_open("stale")
    clock.now = 30
    busy = registry.get_or_open("busy")

    clock.now = 61
    registry.get_or_open("busy")

    assert stale.closed
    assert registry.get("stale") is None
    assert not busy.closed
    assert len(registry) == 1


def test_expired_session_reopens_fresh(clock):
    registry, opened = _registry(clock)
    old = registry.get_or_open("s1")

    clock.now = 120
    new = registry.get_or_open("s1")

    assert old.closed
    assert new is not old
    assert not new.closed


def test_access_refreshes_idle_timer(clock):
    registry, _ = _registry(clock)
    session = registry.get_or_open("s1")

    for t in (50, 100, 150):
        clock.now = t
        registry.get_or_open("s1")

    assert not session.closed
    assert registry.evict_idle(now=211) == ["s1"]
    assert session.closed


def test_zero_idle_limit_keeps_sessions(clock):
    registry, _ = _registry(clock, idle_seconds=0)
    session = registry.get_or_open("s1")

    clock.now = 10_000
    registry.get_or_open("s2")

    assert not session.closed
    assert registry.evict_idle() == []
    assert len(registry) == 2


def test_close_forgets_session(clock):
    registry, _ = _registry(clock)
    session = registry.get_or_open("s1")

    assert registry.close("s1")
    assert session.closed
    assert not registry.close("s1")
    assert registry.evict_idle(now=1_000) == []
