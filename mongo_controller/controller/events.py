"""
This module defines the `EventEmitter` used by controllers to expose hooks
around every CRUD operation (`pre-insert-one`, `post-search`, ...).

Listeners are kept in per-event lists and called synchronously, in
registration order, with the arguments given to `emit`. An exception raised by
a listener propagates to the controller call that emitted the event, which
lets `pre-*` listeners veto an operation (e.g. for validation).
"""

import logging
from collections.abc import Callable
from typing import Any, NamedTuple

Listener = Callable[..., Any]


class _Registration(NamedTuple):
    listener: Listener
    once: bool


class EventEmitter:
    """
    A registry of listeners keyed by event name.

    ```python
    controller.on("pre-insert", validate_document)
    controller.once("post-reset", lambda: print("collection reset"))
    ```
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._registrations: dict[str, list[_Registration]] = {}
        self._event_logger = logger or logging.getLogger(__name__)

    def _register(self, event_name: str, listener: Listener, once: bool) -> "EventEmitter":
        self._event_logger.debug(f"Registering {event_name} listener: {getattr(listener, '__name__', repr(listener))}")
        self._registrations.setdefault(event_name, []).append(_Registration(listener, once))
        return self

    def on(self, event_name: str, listener: Listener) -> "EventEmitter":
        """Registers `listener` for `event_name`. Returns self for chaining."""
        return self._register(event_name, listener, once=False)

    def once(self, event_name: str, listener: Listener) -> "EventEmitter":
        """Registers `listener` for the next `event_name` emission only."""
        return self._register(event_name, listener, once=True)

    def off(self, event_name: str, listener: Listener) -> "EventEmitter":
        """
        Removes the earliest registration of `listener` for `event_name`.

        Registrations for other events are left alone. Removing a listener that
        was never registered is a no-op.
        """
        registrations = self._registrations.get(event_name, [])
        for index, registration in enumerate(registrations):
            if registration.listener == listener:
                del registrations[index]
                break
        return self

    def remove_all_listeners(self, event_name: str | None = None) -> "EventEmitter":
        if event_name is None:
            self._registrations.clear()
        else:
            self._registrations.pop(event_name, None)
        return self

    def listeners(self, event_name: str) -> list[Listener]:
        """Returns the listeners registered for `event_name`, in order."""
        return [registration.listener for registration in self._registrations.get(event_name, [])]

    def emit(self, event_name: str, *args: Any) -> bool:
        """
        Calls every listener of `event_name` with `args`, in registration order.

        Returns:
            bool: True if at least one listener was called.
        """
        registrations = list(self._registrations.get(event_name, []))
        for registration in registrations:
            if registration.once:
                current = self._registrations.get(event_name, [])
                if registration in current:
                    current.remove(registration)
            registration.listener(*args)
        return len(registrations) > 0
