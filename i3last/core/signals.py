"""
i3last.core.signals - Signal-driven navigation commands.

Keybindings in the i3 config send signals to the daemon, e.g.:

    bindsym $mod+Tab       exec --no-startup-id pkill -36 -f i3last
    bindsym $mod+Shift+Tab exec --no-startup-id pkill -37 -f i3last

The SignalListener:
    1. Maps signal numbers to EventKinds (bind()).
    2. Blocks those signals process-wide (block(), main thread, before
       any other thread starts) so only its sigwait() receives them.
    3. Runs as a producer thread turning each received signal into an
       Event on the dispatcher queue, until a TERMINATE is sent.

Typical use:
    listener = SignalListener(events)
    listener.bind(SIG_BACKWARD, EventKind.NAVIGATE_BACKWARD, "Back")
    listener.block()
    listener.start()
"""

from __future__ import annotations

import logging
import queue
import signal
import threading
from dataclasses import dataclass

from i3last.core.errors import SourceUnavailable
from i3last.core.events import Event, EventKind
from i3last.core.signal_parser import signal_to_str

log = logging.getLogger(__name__)


# glibc reserves the first real-time signals for its threading
# implementation and may shift SIGRTMIN up to 36 to account for that, so
# hardcoding SIGRTMIN + n is unsafe.  Everything below 36 is left alone.
SIGRTMIN_SAFE = 36

SIG_FORWARD = SIGRTMIN_SAFE + 0
SIG_BACKWARD = SIGRTMIN_SAFE + 1
SIG_LAST = SIGRTMIN_SAFE + 2

# Signals that stop the daemon
TERMINATE_SIGNALS: tuple[int, ...] = (signal.SIGINT, signal.SIGTERM)


@dataclass(frozen=True, slots=True)
class SignalBinding:
    """Represents a signal bound to an event."""

    signum: int
    kind: EventKind
    description: str


class SignalListener(threading.Thread):
    """
    Producer thread that turns signals into queue events.

    Bindings must be complete before block() and start(): the set of
    signals waited on is fixed when the thread starts.
    """

    def __init__(self, events: queue.Queue[Event]) -> None:
        super().__init__(name="signal-listener", daemon=True)
        self._events = events
        # signum -> SignalBinding
        self._bindings: dict[int, SignalBinding] = {}

    @property
    def count(self) -> int:
        """Number of bound signals."""
        return len(self._bindings)

    @property
    def bindings(self) -> list[SignalBinding]:
        """All bindings, ordered by signal number."""
        return [self._bindings[s] for s in sorted(self._bindings)]

    @property
    def signals(self) -> set[int]:
        return set(self._bindings)

    def bind(self, signum: int, kind: EventKind, description: str = "") -> None:
        """
        Bind a signal to an event kind.

        An existing binding for the same signal is replaced.

        Args:
            signum:      Signal number.
            kind:        Event put on the queue when the signal arrives.
            description: Human-readable description for logging/debug.
        """
        if signum in self._bindings:
            log.info("Signal binding replaced: %s", signal_to_str(signum))

        self._bindings[signum] = SignalBinding(
            signum=signum,
            kind=kind,
            description=description,
        )
        log.debug(
            "Signal bound: %s -> %s  %s",
            signal_to_str(signum),
            kind.value,
            description,
        )

    def unbind(self, signum: int) -> bool:
        """Remove a binding. Returns True if it existed."""
        binding = self._bindings.pop(signum, None)
        if binding is None:
            return False
        log.debug("Signal unbound: %s", signal_to_str(signum))
        return True

    def block(self) -> None:
        """
        Block every bound signal in the calling thread.

        Threads inherit the signal mask of the thread that creates them,
        so calling this from the main thread before starting any thread
        leaves sigwait() in this listener as the only receiver.

        Raises:
            SourceUnavailable: If a bound signal is invalid or cannot be
                               blocked.
        """
        try:
            signal.pthread_sigmask(signal.SIG_BLOCK, self.signals)
        except (OSError, ValueError) as err:
            raise SourceUnavailable(f"failed to catch signals: {err}") from err

        log.info(
            "Signals blocked for sigwait: %s",
            ", ".join(signal_to_str(b.signum) for b in self.bindings),
        )

    def dispatch(self, signum: int) -> bool:
        """
        Put the event bound to *signum* on the queue.

        Returns:
            True if the signal was bound.
        """
        binding = self._bindings.get(signum)
        if binding is None:
            log.warning("Unbound signal received: %s", signal_to_str(signum))
            return False

        log.debug("Signal dispatched: %s -> %s", signal_to_str(signum), binding.kind.value)
        self._events.put(Event(binding.kind))
        return True

    def run(self) -> None:
        signums = self.signals
        log.info("Waiting for signals")

        while True:
            try:
                signum = signal.sigwait(signums)
            except OSError as err:
                log.exception("sigwait failed")
                self._events.put(
                    Event.source_failed(SourceUnavailable(f"stopped receiving signals: {err}"))
                )
                return
            self.dispatch(signum)

            binding = self._bindings.get(signum)
            if binding is not None and binding.kind is EventKind.TERMINATE:
                log.info("%s received, signal listener stopping", signal_to_str(signum))
                break

    def dump_state(self) -> str:
        """Return a formatted string of all signal bindings."""
        lines = [
            f"=== SignalListener: {len(self._bindings)} signals ===",
            "",
        ]
        for binding in self.bindings:
            lines.append(
                f"  {binding.signum:3d}  {signal_to_str(binding.signum):<14s}"
                f"{binding.kind.value:<18s} {binding.description}"
            )
        return "\n".join(lines)
