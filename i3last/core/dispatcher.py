"""
i3last.core.dispatcher - Dispatcher: the single consumer loop.

The Dispatcher:

  1. Owns the event queue both producers write into.
  2. Owns the NavigationState; nothing else reads or writes it.
  3. Pulls one event at a time, in arrival order, and routes it to the
     matching history operation.
  4. Applies the resulting focus directive before pulling the next event.

Focusing is delegated to a plain callable so the loop does not know
anything about i3:

    dispatcher = Dispatcher(focus=functools.partial(focus_window, conn))
    dispatcher.run()   # blocks until a TERMINATE event
"""

from __future__ import annotations

import logging
import queue
from collections.abc import Callable
from typing import Optional

from i3last.core.errors import DirectiveDeliveryFailure, InvariantViolation
from i3last.core.events import Event, EventKind
from i3last.core.history import MAX_WINDOWS, Direction, NavigationState

log = logging.getLogger(__name__)


# Focus directive sink: called with the window id to focus.  Raises
# DirectiveDeliveryFailure when the window manager refuses.
FocusFn = Callable[[int], None]

# Event handler: returns the window to focus, if any.
EventHandler = Callable[[Event], Optional[int]]


class Dispatcher:
    """
    Pull events from the queue and feed them to the history.

    Usage:
        dispatcher = Dispatcher(focus=my_focus_fn, max_windows=15)
        producer_queue = dispatcher.events
        dispatcher.run()
    """

    def __init__(
        self,
        focus: FocusFn,
        max_windows: int = MAX_WINDOWS,
        events: Optional[queue.Queue[Event]] = None,
        state: Optional[NavigationState] = None,
    ) -> None:
        self._focus = focus

        # Unbounded FIFO shared with every producer
        self._events: queue.Queue[Event] = (
            events if events is not None else queue.Queue()
        )

        self._state = state if state is not None else NavigationState(max_windows)

        # Number of events handled since start (TERMINATE excluded)
        self._processed: int = 0

        self._handlers: dict[EventKind, EventHandler] = {
            EventKind.FOCUS_CHANGED: self._on_focus_changed,
            EventKind.WINDOW_CLOSED: self._on_window_closed,
            EventKind.NAVIGATE_BACKWARD: self._on_navigate_backward,
            EventKind.NAVIGATE_FORWARD: self._on_navigate_forward,
            EventKind.REPEAT_LAST: self._on_repeat_last,
            EventKind.SOURCE_FAILED: self._on_source_failed,
        }

    # ------------------------------------------------------------------
    # Public: access
    # ------------------------------------------------------------------
    @property
    def events(self) -> queue.Queue[Event]:
        return self._events

    @property
    def state(self) -> NavigationState:
        return self._state

    @property
    def processed(self) -> int:
        return self._processed

    # ------------------------------------------------------------------
    # Public: event handling
    # ------------------------------------------------------------------
    def handle(self, event: Event) -> Optional[int]:
        """
        Route a single event to the history.

        Returns:
            The window id to focus, or None.

        Raises:
            The error carried by a SOURCE_FAILED event, or
            InvariantViolation for an event the loop cannot handle.
        """
        handler = self._handlers.get(event.kind)
        if handler is None:
            raise InvariantViolation(f"no handler for event {event}")

        log.debug("EVENT %s", event)
        target = handler(event)
        self._processed += 1
        return target

    def apply(self, window_id: int) -> bool:
        """
        Ask the window manager to focus *window_id*.

        A failed focus is not retried and does not touch the history.

        Returns:
            True if the focus command was accepted.
        """
        try:
            self._focus(window_id)
        except DirectiveDeliveryFailure as err:
            log.warning("Could not focus window %d: %s", window_id, err)
            return False
        log.debug("FOCUS -> %d", window_id)
        return True

    # ------------------------------------------------------------------
    # Public: lifecycle
    # ------------------------------------------------------------------
    def run(self) -> None:
        """
        Process events until a TERMINATE event arrives.

        Blocks indefinitely on the queue between events.  Errors from
        handle() propagate to the caller and end the loop.
        """
        log.info("Dispatcher running (max %d windows per stack)", self._state.max_windows)

        while True:
            event = self._events.get()

            if event.kind is EventKind.TERMINATE:
                log.info("Terminate requested after %d events", self._processed)
                break

            target = self.handle(event)
            if target is not None:
                self.apply(target)

            if log.isEnabledFor(logging.DEBUG):
                log.debug("\n%s", self._state.dump_state())

    def stop(self) -> None:
        """Request the loop to stop once queued events are processed."""
        self._events.put(Event(EventKind.TERMINATE))

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------
    def _on_focus_changed(self, event: Event) -> None:
        self._state.observe_focus(self._window_of(event))

    def _on_window_closed(self, event: Event) -> None:
        self._state.observe_close(self._window_of(event))

    def _on_navigate_backward(self, event: Event) -> Optional[int]:
        return self._state.navigate(Direction.BACKWARD)

    def _on_navigate_forward(self, event: Event) -> Optional[int]:
        return self._state.navigate(Direction.FORWARD)

    def _on_repeat_last(self, event: Event) -> Optional[int]:
        return self._state.repeat_last()

    def _on_source_failed(self, event: Event) -> None:
        if event.error is None:
            raise InvariantViolation("a producer failed without reporting why")
        raise event.error

    @staticmethod
    def _window_of(event: Event) -> int:
        if event.window_id is None:
            raise InvariantViolation(f"{event.kind.value} event without a window id")
        return event.window_id
