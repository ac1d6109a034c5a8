"""
i3last.core.i3 - i3 IPC glue.

Everything that talks to i3 lives here:

    connect()       open the IPC connection or fail with SourceUnavailable
    normalize()     i3ipc WindowEvent -> Event (or None for changes we ignore)
    I3Listener      producer thread feeding window events into the queue
    focus_window()  the focus directive, "[con_id=N] focus"

Windows are identified by their i3 container id (con_id).
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Any, Optional

import i3ipc
from i3ipc import Event as I3Event

from i3last.core.errors import (
    DirectiveDeliveryFailure,
    ProtocolAnomaly,
    SourceUnavailable,
    SubscriptionFailure,
)
from i3last.core.events import Event, EventKind

log = logging.getLogger(__name__)


# window::<change> values we care about.  Everything else (new, title,
# move, floating, urgent, mark, ...) is discarded.
_WINDOW_CHANGES: dict[str, EventKind] = {
    "focus": EventKind.FOCUS_CHANGED,
    "close": EventKind.WINDOW_CLOSED,
}


def connect() -> i3ipc.Connection:
    """
    Open a connection to the running i3 instance.

    auto_reconnect keeps the event subscription alive across an in-place
    ``i3-msg restart``.

    Raises:
        SourceUnavailable: If i3 cannot be reached.
    """
    try:
        connection = i3ipc.Connection(auto_reconnect=True)
    except Exception as err:
        raise SourceUnavailable(f"failed to connect to i3, is i3 running? ({err})") from err

    log.info("Connected to i3")
    return connection


def normalize(event: Any) -> Optional[Event]:
    """
    Map an i3ipc window event to an Event.

    Returns:
        The Event, or None for window changes that are not tracked.

    Raises:
        ProtocolAnomaly: If the event carries no usable container id.
    """
    change = getattr(event, "change", None)
    kind = _WINDOW_CHANGES.get(change) if isinstance(change, str) else None
    if kind is None:
        return None

    container = getattr(event, "container", None)
    window_id = getattr(container, "id", None)
    # bool is an int subclass, and never a valid container id
    if isinstance(window_id, bool) or not isinstance(window_id, int):
        raise ProtocolAnomaly(f"window::{change} event without a container id")

    return Event(kind, window_id=window_id)


def focus_window(connection: i3ipc.Connection, window_id: int) -> None:
    """
    Focus the container *window_id*.

    Raises:
        DirectiveDeliveryFailure: If the IPC call fails or i3 rejects the
                                  command (e.g. the window is already gone).
    """
    try:
        replies = connection.command(f"[con_id={window_id}] focus")
    except Exception as err:
        raise DirectiveDeliveryFailure(f"i3 command failed: {err}") from err

    for reply in replies:
        if not reply.success:
            raise DirectiveDeliveryFailure(reply.error or "i3 rejected the focus command")


class I3Listener(threading.Thread):
    """
    Producer thread: subscribes to window events and forwards them.

    Runs i3ipc's blocking event loop.  It never touches the navigation
    state; it only puts Events on the queue.  When the loop dies, the
    reason is put on the queue as a SOURCE_FAILED event so the consumer
    can shut the process down.
    """

    def __init__(self, connection: i3ipc.Connection, events: queue.Queue[Event]) -> None:
        super().__init__(name="i3-listener", daemon=True)
        self._connection = connection
        self._events = events

        # Counters for the status dump
        self._forwarded: int = 0
        self._dropped: int = 0

    @property
    def forwarded(self) -> int:
        return self._forwarded

    @property
    def dropped(self) -> int:
        return self._dropped

    def run(self) -> None:
        self._connection.on(I3Event.WINDOW_FOCUS, self._on_window_event)
        self._connection.on(I3Event.WINDOW_CLOSE, self._on_window_event)

        log.info("Listening for i3 window events")
        try:
            self._connection.main()
        except Exception as err:
            log.exception("i3 event loop failed")
            self._events.put(
                Event.source_failed(
                    SubscriptionFailure(f"failed to subscribe to i3 events: {err}")
                )
            )
            return

        log.error("i3 event loop ended")
        self._events.put(
            Event.source_failed(SourceUnavailable("lost the connection to i3"))
        )

    def _on_window_event(self, connection: i3ipc.Connection, event: Any) -> None:
        """i3ipc callback, runs on this thread."""
        try:
            normalized = normalize(event)
        except ProtocolAnomaly as err:
            self._dropped += 1
            log.warning("Dropping i3 event: %s", err)
            return

        if normalized is None:
            return

        self._forwarded += 1
        log.debug("i3 -> %s", normalized)
        self._events.put(normalized)
