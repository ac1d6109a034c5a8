"""
i3last.config.bindings - Signal bindings for the daemon.

Defines and registers every signal the daemon reacts to:
    Navigation (numbers configurable, see Settings):
        36 (SIG_FORWARD)   -> Navigate forward
        37 (SIG_BACKWARD)  -> Navigate backward
        38 (SIG_LAST)      -> Undo the last move (alt-tab toggle)

    Lifecycle:
        SIGINT / SIGTERM   -> Terminate
"""

from __future__ import annotations

import logging

from i3last.config.settings import Settings
from i3last.core.events import EventKind
from i3last.core.signal_parser import signal_to_str
from i3last.core.signals import SignalListener, TERMINATE_SIGNALS

log = logging.getLogger(__name__)


def register_all_signals(listener: SignalListener, settings: Settings) -> int:
    """
    Bind every signal of the daemon on *listener*.

    Args:
        listener: The signal listener to bind on (not started yet).
        settings: Where the navigation signal numbers come from.

    Returns:
        Number of bound signals.
    """
    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    listener.bind(settings.forward_signal, EventKind.NAVIGATE_FORWARD, "Navigate forward")
    listener.bind(settings.backward_signal, EventKind.NAVIGATE_BACKWARD, "Navigate backward")
    listener.bind(settings.last_signal, EventKind.REPEAT_LAST, "Jump to last window")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    for signum in TERMINATE_SIGNALS:
        listener.bind(signum, EventKind.TERMINATE, f"Quit ({signal_to_str(signum)})")

    log.info("Signals bound: %d", listener.count)

    return listener.count
