"""
i3last.core.errors - Exception hierarchy for the daemon.

Fatal errors carry the exit status the process terminates with:

    SourceUnavailable    i3 or the signal machinery cannot be reached
    SubscriptionFailure  connected to i3 but the event subscription died
    InvariantViolation   a logic defect, the state can no longer be trusted

The other two are recovered where they are raised:

    DirectiveDeliveryFailure  "focus window" command failed, history untouched
    ProtocolAnomaly           malformed event from a source, event dropped
"""

from __future__ import annotations


class I3LastError(Exception):
    """Base class for every error raised by i3last."""

    exit_code: int = 1


class SourceUnavailable(I3LastError):
    """An event source cannot be reached (at startup or after losing it)."""

    exit_code = 3


class SubscriptionFailure(I3LastError):
    """The i3 connection exists but window events cannot be received."""

    exit_code = 4


class InvariantViolation(I3LastError):
    """Internal state is inconsistent. Never expected at runtime."""

    exit_code = 70


class DirectiveDeliveryFailure(I3LastError):
    """i3 refused or failed to focus the requested window."""


class ProtocolAnomaly(I3LastError):
    """An event from a source does not have the expected shape."""
