"""
i3last - Entry point.

Run with:  python -m i3last [--history N] [-v]
"""

from __future__ import annotations

import functools
import logging
import queue
import sys
from typing import Optional, Sequence

from i3last.config.bindings import register_all_signals
from i3last.config.settings import Settings, parse_args
from i3last.core.dispatcher import Dispatcher
from i3last.core.errors import I3LastError, InvariantViolation
from i3last.core.events import Event
from i3last.core.i3 import I3Listener, connect, focus_window
from i3last.core.signal_parser import signal_to_str
from i3last.core.signals import SignalListener

log = logging.getLogger("i3last")


class SafeStreamHandler(logging.StreamHandler):
    """Handler that replaces unencodable characters instead of crashing."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            enc = getattr(self.stream, "encoding", "utf-8") or "utf-8"
            safe = msg.encode(enc, errors="replace").decode(enc, errors="replace")
            self.stream.write(safe + self.terminator)
            self.flush()
        except Exception:
            self.handleError(record)


def setup_logging(level: int = logging.INFO) -> None:
    """Configure logging for the daemon."""
    fmt = "%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s: %(message)s"
    handler = SafeStreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt, datefmt="%H:%M:%S"))

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)

    # Quiet down noisy loggers
    logging.getLogger("i3ipc").setLevel(logging.WARNING)


def run(settings: Settings) -> int:
    """Wire the producers to the dispatcher and block until terminated."""
    events: queue.Queue[Event] = queue.Queue()

    signal_listener = SignalListener(events)
    register_all_signals(signal_listener, settings)

    # Must happen before any thread exists so every thread inherits the
    # mask and only the listener's sigwait() sees these signals.
    signal_listener.block()

    connection = connect()
    i3_listener = I3Listener(connection, events)

    dispatcher = Dispatcher(
        focus=functools.partial(focus_window, connection),
        max_windows=settings.max_history_depth,
        events=events,
    )

    log.info(
        "i3last running: %d windows per direction, "
        "back=%s forward=%s last=%s",
        settings.max_history_depth,
        signal_to_str(settings.backward_signal),
        signal_to_str(settings.forward_signal),
        signal_to_str(settings.last_signal),
    )
    log.debug("\n%s", signal_listener.dump_state())

    i3_listener.start()
    signal_listener.start()

    # Producers are daemon threads; they are abandoned, not joined.
    dispatcher.run()

    log.info(
        "i3last stopped: %d events, %d i3 events dropped\n%s",
        dispatcher.processed,
        i3_listener.dropped,
        dispatcher.state.dump_state(),
    )
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    settings = parse_args(argv)
    setup_logging(settings.log_level)

    try:
        return run(settings)
    except InvariantViolation as err:
        log.exception("Internal error, aborting")
        print(f"i3last: internal error: {err}", file=sys.stderr)
        return err.exit_code
    except I3LastError as err:
        log.debug("Fatal error", exc_info=True)
        print(f"i3last: {err}", file=sys.stderr)
        return err.exit_code


if __name__ == "__main__":
    sys.exit(main())
