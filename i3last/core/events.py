"""
i3last.core.events - Normalized events flowing through the dispatcher queue.

Both producers (the i3 listener and the signal listener) translate what
they observe into Event objects and put them on the same queue.  Nothing
else crosses thread boundaries.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional

from i3last.core.errors import I3LastError


class EventKind(enum.Enum):
    """Everything the dispatcher loop can be asked to do."""

    # From i3: a window gained focus / was destroyed.
    FOCUS_CHANGED = "focus_changed"
    WINDOW_CLOSED = "window_closed"

    # From signals: user navigation requests.
    NAVIGATE_BACKWARD = "navigate_backward"
    NAVIGATE_FORWARD = "navigate_forward"
    REPEAT_LAST = "repeat_last"

    # From signals: SIGINT / SIGTERM.
    TERMINATE = "terminate"

    # A producer thread died.  Carries the error that killed it.
    SOURCE_FAILED = "source_failed"


@dataclass(frozen=True, slots=True)
class Event:
    """A single item on the dispatcher queue."""

    kind: EventKind
    window_id: Optional[int] = None
    error: Optional[I3LastError] = None

    @classmethod
    def focus_changed(cls, window_id: int) -> Event:
        return cls(EventKind.FOCUS_CHANGED, window_id=window_id)

    @classmethod
    def window_closed(cls, window_id: int) -> Event:
        return cls(EventKind.WINDOW_CLOSED, window_id=window_id)

    @classmethod
    def source_failed(cls, error: I3LastError) -> Event:
        return cls(EventKind.SOURCE_FAILED, error=error)

    def __str__(self) -> str:
        if self.window_id is not None:
            return f"{self.kind.value}({self.window_id})"
        if self.error is not None:
            return f"{self.kind.value}({self.error})"
        return self.kind.value
