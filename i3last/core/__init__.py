"""
i3last.core - Window history engine and the glue around it.

This package contains:
    - errors        : Exception hierarchy and exit codes
    - events        : Event / EventKind, the items on the dispatcher queue
    - history       : NavigationState - the focus history state machine
    - dispatcher    : Dispatcher - the single consumer loop
    - i3            : i3 IPC connection, window event listener, focus command
    - signals       : SignalListener - signals to navigation commands
    - signal_parser : Signal name parsing ("SIGRTMIN+2" -> number)
"""

from i3last.core.errors import (
    I3LastError,
    SourceUnavailable,
    SubscriptionFailure,
    InvariantViolation,
    DirectiveDeliveryFailure,
    ProtocolAnomaly,
)
from i3last.core.events import Event, EventKind
from i3last.core.history import Direction, NavigationState, MAX_WINDOWS
from i3last.core.dispatcher import Dispatcher

__all__ = [
    "I3LastError", "SourceUnavailable", "SubscriptionFailure",
    "InvariantViolation", "DirectiveDeliveryFailure", "ProtocolAnomaly",
    "Event", "EventKind",
    "Direction", "NavigationState", "MAX_WINDOWS",
    "Dispatcher",
]
