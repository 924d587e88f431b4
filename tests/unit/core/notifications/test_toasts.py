"""Tests for the dashboard toast queue."""

from __future__ import annotations

from flowstate.core.notifications.toasts import Toast, ToastQueue


def test_drain_returns_oldest_first_and_empties():
    queue = ToastQueue()
    queue.info("first", panel="schedule")
    queue.error("second", panel="workout")

    drained = queue.drain()
    assert [t.message for t in drained] == ["first", "second"]
    assert [t.level for t in drained] == ["info", "error"]
    assert len(queue) == 0


def test_subscribers_see_every_toast_until_unsubscribed():
    queue = ToastQueue()
    seen: list[Toast] = []
    unsubscribe = queue.subscribe(seen.append)

    queue.info("one")
    unsubscribe()
    queue.info("two")

    assert [t.message for t in seen] == ["one"]
    assert len(queue) == 2


def test_queue_is_bounded():
    queue = ToastQueue(maxlen=3)
    for i in range(5):
        queue.info(f"toast {i}")
    assert [t.message for t in queue.peek()] == ["toast 2", "toast 3", "toast 4"]


def test_error_flag():
    assert Toast(level="error", message="x").is_error
    assert not Toast(level="info", message="x").is_error
