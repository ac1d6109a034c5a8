"""
i3last.core.history - Focus history: the navigation state machine.

Two bounded stacks surround the focused window:

    visited  - windows left behind while moving forward in time
    skipped  - windows stepped over while navigating backward

    visited: [A, B]   current: C   skipped: []
    back()    -> B    visited: [A]      current: B   skipped: [C]
    forward() -> C    visited: [A, B]   current: C   skipped: []

Focusing a window through i3 makes i3 report a focus event for it.  That
echo must not be recorded as a new visit, so navigate() keeps the target
in ``pending_focus`` and the matching observe_focus() only clears it.  A
focus event for any other window means the navigation did not land and
the event is handled as an ordinary (organic) focus change.

A window id is never in more than one place at a time, and neither stack
grows beyond ``max_windows`` entries (oldest dropped first).
"""

from __future__ import annotations

import enum
import logging
from typing import Optional

log = logging.getLogger(__name__)


# Default bound of each stack.  The state remembers at most
# 2 * MAX_WINDOWS + 1 windows.
MAX_WINDOWS = 15


class Direction(enum.Enum):
    """Direction of a history navigation."""

    BACKWARD = "backward"
    FORWARD = "forward"

    @property
    def opposite(self) -> Direction:
        if self is Direction.BACKWARD:
            return Direction.FORWARD
        return Direction.BACKWARD


def _remove(stack: list[int], window_id: int) -> bool:
    """Remove *window_id* from *stack*.  Returns True if it was there."""
    try:
        stack.remove(window_id)
    except ValueError:
        return False
    return True


class NavigationState:
    """
    Window focus history of the whole session.

    Owned by the dispatcher loop and only ever touched from that thread,
    so there is no locking here.  Operations return the window id that
    should be focused next, or None when nothing needs to happen.
    """

    def __init__(self, max_windows: int = MAX_WINDOWS) -> None:
        if max_windows < 1:
            raise ValueError(f"max_windows must be at least 1, got {max_windows}")

        self._max_windows = max_windows

        # Most recent last in both stacks.
        self._visited: list[int] = []
        self._skipped: list[int] = []

        self._current: Optional[int] = None

        # Window we asked i3 to focus and whose focus event has not
        # arrived yet.
        self._pending_focus: Optional[int] = None

        self._last_direction: Optional[Direction] = None

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------
    @property
    def max_windows(self) -> int:
        return self._max_windows

    @property
    def visited(self) -> list[int]:
        return list(self._visited)

    @property
    def skipped(self) -> list[int]:
        return list(self._skipped)

    @property
    def current(self) -> Optional[int]:
        return self._current

    @property
    def pending_focus(self) -> Optional[int]:
        return self._pending_focus

    @property
    def last_direction(self) -> Optional[Direction]:
        return self._last_direction

    @property
    def is_pending(self) -> bool:
        """True while a navigation waits for its focus event."""
        return self._pending_focus is not None

    # ------------------------------------------------------------------
    # Observations
    # ------------------------------------------------------------------
    def observe_focus(self, window_id: int) -> None:
        """Record that i3 reported *window_id* as focused."""
        if self._pending_focus is not None:
            pending = self._pending_focus
            self._pending_focus = None
            if pending == window_id:
                # Our own navigation landed; the stacks were updated
                # when it was issued.
                log.debug("FOCUS %d confirmed", window_id)
                return
            log.debug(
                "FOCUS %d while waiting for %d, navigation did not land",
                window_id,
                pending,
            )

        if self._current is not None:
            _remove(self._visited, self._current)
            self._visited.append(self._current)
            # A new branch: whatever was skipped cannot be reached
            # forward anymore.
            self._skipped.clear()
            self._clamp(self._visited)

        _remove(self._visited, window_id)
        _remove(self._skipped, window_id)

        self._last_direction = Direction.FORWARD
        self._current = window_id
        log.debug("FOCUS %d", window_id)

    def observe_close(self, window_id: int) -> None:
        """Forget a window that no longer exists."""
        _remove(self._visited, window_id)
        _remove(self._skipped, window_id)

        if self._current == window_id:
            self._current = None

        if self._pending_focus == window_id:
            self._pending_focus = None

        log.debug("CLOSE %d", window_id)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def navigate(self, direction: Direction) -> Optional[int]:
        """
        Step through the history.

        BACKWARD takes the most recent visited window and sets the current
        one aside on the skipped stack; FORWARD does the reverse.

        Returns:
            The window to focus, or None if there is nothing in that
            direction (state unchanged).
        """
        if direction is Direction.BACKWARD:
            source, destination = self._visited, self._skipped
        else:
            source, destination = self._skipped, self._visited

        if not source:
            log.debug("NAVIGATE %s: nothing there", direction.value)
            return None

        target = source.pop()

        if self._current is not None:
            _remove(destination, self._current)
            destination.append(self._current)
            self._clamp(destination)

        self._pending_focus = target
        self._last_direction = direction
        self._current = target

        log.debug("NAVIGATE %s -> %d", direction.value, target)
        return target

    def back(self) -> Optional[int]:
        return self.navigate(Direction.BACKWARD)

    def forward(self) -> Optional[int]:
        return self.navigate(Direction.FORWARD)

    def repeat_last(self) -> Optional[int]:
        """
        Jump back to where the last move came from.

        Undoes the last navigation by going the opposite way.  After an
        organic focus change (recorded as FORWARD) this goes back to the
        previously focused window, giving the classic alt-tab toggle.
        """
        if self._last_direction is None:
            log.debug("REPEAT_LAST: no previous move")
            return None
        return self.navigate(self._last_direction.opposite)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _clamp(self, stack: list[int]) -> None:
        """Drop the oldest entries beyond max_windows."""
        excess = len(stack) - self._max_windows
        if excess > 0:
            del stack[:excess]

    # ------------------------------------------------------------------
    # Debug helpers
    # ------------------------------------------------------------------
    def dump_state(self) -> str:
        """Return a formatted string of the history for logging."""
        direction = self._last_direction.value if self._last_direction else "-"
        lines = [
            f"=== NavigationState (max {self._max_windows} per stack) ===",
            f"    visited: {self._visited}",
            f"    current: {self._current}",
            f"    skipped: {self._skipped}",
            f"    pending: {self._pending_focus}   last: {direction}",
        ]
        return "\n".join(lines)
