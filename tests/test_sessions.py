from __future__ import annotations

import pytest

from app.mashup.controller import AppController
from app.mashup.sessions import SessionStore


def test_get_or_create_reuses_controller() -> None:
    store = SessionStore()
    created: list[AppController] = []

    def factory() -> AppController:
        controller = AppController(requester=None)
        created.append(controller)
        return controller

    first = store.get_or_create("abc", factory)
    second = store.get_or_create("abc", factory)

    assert first is second
    assert len(created) == 1
    assert len(store) == 1
    assert store.get("abc") is first


def test_discard() -> None:
    store = SessionStore()
    store.get_or_create("abc", lambda: AppController(requester=None))

    store.discard("abc")
    store.discard("missing")

    assert store.get("abc") is None
    assert len(store) == 0


def test_least_recently_used_idle_session_is_evicted() -> None:
    store = SessionStore(max_sessions=2)
    store.get_or_create("a", lambda: AppController(requester=None))
    store.get_or_create("b", lambda: AppController(requester=None))
    store.get("a")

    store.get_or_create("c", lambda: AppController(requester=None))

    assert "a" in store
    assert "b" not in store
    assert "c" in store
    assert len(store) == 2


def test_busy_sessions_are_not_evicted() -> None:
    store = SessionStore(max_sessions=2)
    busy = store.get_or_create("a", lambda: AppController(requester=None))
    busy.busy = True
    store.get_or_create("b", lambda: AppController(requester=None))

    store.get_or_create("c", lambda: AppController(requester=None))

    assert store.get("a") is busy
    assert "b" not in store


def test_store_overflows_only_when_every_session_is_busy() -> None:
    store = SessionStore(max_sessions=1)
    store.get_or_create("a", lambda: AppController(requester=None)).busy = True

    store.get_or_create("b", lambda: AppController(requester=None))

    assert len(store) == 2


def test_max_sessions_must_be_positive() -> None:
    with pytest.raises(ValueError):
        SessionStore(max_sessions=0)
