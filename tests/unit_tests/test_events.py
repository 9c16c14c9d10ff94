from unittest.mock import MagicMock

import pytest

from mongo_controller.controller.events import EventEmitter


def test_emit_calls_listeners_in_order():
    emitter = EventEmitter()
    calls = []
    emitter.on("ping", lambda value: calls.append(("first", value)))
    emitter.on("ping", lambda value: calls.append(("second", value)))

    assert emitter.emit("ping", 1) is True
    assert calls == [("first", 1), ("second", 1)]


def test_emit_without_listeners():
    assert EventEmitter().emit("nothing") is False


def test_once_listener_runs_once():
    emitter = EventEmitter()
    listener = MagicMock()
    emitter.once("ping", listener)

    emitter.emit("ping", "a")
    emitter.emit("ping", "b")

    listener.assert_called_once_with("a")


def test_off_removes_listener():
    emitter = EventEmitter()
    listener = MagicMock()
    emitter.on("ping", listener).off("ping", listener)
    emitter.off("ping", MagicMock())

    emitter.emit("ping")
    listener.assert_not_called()


def test_remove_all_listeners():
    emitter = EventEmitter()
    emitter.on("a", MagicMock()).on("b", MagicMock())

    emitter.remove_all_listeners("a")
    assert emitter.listeners("a") == []
    assert len(emitter.listeners("b")) == 1

    emitter.remove_all_listeners()
    assert emitter.listeners("b") == []


def test_listener_errors_propagate():
    emitter = EventEmitter()
    emitter.on("pre-insert", MagicMock(side_effect=ValueError("rejected")))

    with pytest.raises(ValueError, match="rejected"):
        emitter.emit("pre-insert", {})


def test_once_on_another_event_keeps_persistent_listener():
    emitter = EventEmitter()
    listener = MagicMock()
    emitter.on("a", listener).once("b", listener)

    emitter.emit("a")
    emitter.emit("a")

    assert listener.call_count == 2
    assert emitter.listeners("b") == [listener]


def test_off_on_another_event_keeps_once_behaviour():
    emitter = EventEmitter()
    listener = MagicMock()
    emitter.once("b", listener).on("a", listener)
    emitter.off("a", listener)

    emitter.emit("b")
    emitter.emit("b")

    assert listener.call_count == 1
    assert emitter.listeners("a") == []
    assert emitter.listeners("b") == []


def test_same_listener_on_and_once_for_one_event():
    emitter = EventEmitter()
    listener = MagicMock()
    emitter.on("a", listener).once("a", listener)

    emitter.emit("a")
    emitter.emit("a")

    assert listener.call_count == 3
    assert emitter.listeners("a") == [listener]
