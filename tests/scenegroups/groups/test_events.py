# tests/scenegroups/groups/test_events.py
from __future__ import annotations

import pytest

from scenegroups.groups.definition import ResourceKind
from scenegroups.groups.events import EventHook, GroupLifecycleListener


def test_subscribers_run_in_registration_order():
    calls: list[str] = []
    hook = EventHook("onGroupLoaded")
    hook.subscribe(lambda: calls.append("first"))
    hook.subscribe(lambda: calls.append("second"))

    hook.emit()

    assert calls == ["first", "second"]
    assert len(hook) == 2


def test_subscribe_works_as_decorator_and_unsubscribe_handle():
    seen: list[str] = []
    hook = EventHook("onResourceUnloaded")

    @hook.subscribe
    def onUnloaded(name: str) -> None:
        seen.append(name)

    hook.emit("Menu")
    assert hook.unsubscribe(onUnloaded) is True
    assert hook.unsubscribe(onUnloaded) is False
    hook.emit("Level01")

    assert seen == ["Menu"]


def test_non_callable_subscriber_is_rejected():
    with pytest.raises(TypeError):
        EventHook("x").subscribe("not callable")  # type: ignore[arg-type]


def test_subscriber_may_unsubscribe_during_emit():
    calls: list[str] = []
    hook = EventHook("x")

    def once() -> None:
        calls.append("once")
        hook.unsubscribe(once)

    hook.subscribe(once)
    hook.subscribe(lambda: calls.append("always"))
    hook.emit()
    hook.emit()

    assert calls == ["once", "always", "always"]


def test_clear_removes_everything():
    hook = EventHook("x")
    hook.subscribe(lambda: None)
    hook.clear()
    assert len(hook) == 0


def test_listener_defaults_are_no_ops():
    listener = GroupLifecycleListener()
    assert listener.onResourceLoaded("A", ResourceKind.DIRECT) is None
    assert listener.onResourceUnloaded("A") is None
    assert listener.onGroupLoaded() is None
