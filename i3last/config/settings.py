"""
i3last.config.settings - Runtime settings and command line parsing.

    i3last                         defaults: 15 windows, signals 36/37/38
    i3last --history 30 -v
    i3last --backward-signal SIGUSR1 --forward-signal SIGUSR2

Signal options accept anything parse_signal() does ("37", "usr1",
"SIGRTMIN+3").
"""

from __future__ import annotations

import argparse
import logging
import signal
from dataclasses import dataclass
from typing import Optional, Sequence

from i3last.core.history import MAX_WINDOWS
from i3last.core.signal_parser import SignalParseError, parse_signal, signal_to_str
from i3last.core.signals import SIG_BACKWARD, SIG_FORWARD, SIG_LAST, TERMINATE_SIGNALS


@dataclass(frozen=True, slots=True)
class Settings:
    """Everything configurable about the daemon."""

    max_history_depth: int = MAX_WINDOWS
    forward_signal: int = SIG_FORWARD
    backward_signal: int = SIG_BACKWARD
    last_signal: int = SIG_LAST
    log_level: int = logging.INFO


def _history_depth(value: str) -> int:
    try:
        depth = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}") from None
    if depth < 1:
        raise argparse.ArgumentTypeError(f"history must be at least 1, got {depth}")
    return depth


def _signal(value: str) -> int:
    try:
        return parse_signal(value)
    except SignalParseError as err:
        raise argparse.ArgumentTypeError(str(err)) from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="i3last",
        description="""
        Alt-tab style window history for i3.  Tracks focused windows and
        moves backward/forward through them when signalled.  Launch it
        from the i3 config (exec_always --no-startup-id i3last) and bind
        keys to send it signals.""",
    )
    parser.add_argument(
        "--history",
        dest="max_history_depth",
        type=_history_depth,
        default=MAX_WINDOWS,
        metavar="N",
        help=f"windows remembered in each direction (default {MAX_WINDOWS})",
    )
    parser.add_argument(
        "--forward-signal",
        type=_signal,
        default=SIG_FORWARD,
        metavar="SIG",
        help=f"signal that moves forward (default {SIG_FORWARD})",
    )
    parser.add_argument(
        "--backward-signal",
        type=_signal,
        default=SIG_BACKWARD,
        metavar="SIG",
        help=f"signal that moves backward (default {SIG_BACKWARD})",
    )
    parser.add_argument(
        "--last-signal",
        type=_signal,
        default=SIG_LAST,
        metavar="SIG",
        help=f"signal that undoes the last move (default {SIG_LAST})",
    )

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v", "--verbose",
        dest="log_level",
        action="store_const",
        const=logging.DEBUG,
        default=logging.INFO,
        help="log every event and the history after it",
    )
    verbosity.add_argument(
        "-q", "--quiet",
        dest="log_level",
        action="store_const",
        const=logging.WARNING,
        help="only log warnings and errors",
    )
    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> Settings:
    """
    Parse the command line into Settings.

    Exits through argparse (status 2) on invalid options, including
    navigation signals that collide with each other or with SIGINT/SIGTERM.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    navigation = {
        "--forward-signal": args.forward_signal,
        "--backward-signal": args.backward_signal,
        "--last-signal": args.last_signal,
    }
    if len(set(navigation.values())) != len(navigation):
        parser.error("--forward-signal, --backward-signal and --last-signal must differ")
    for option, signum in navigation.items():
        if signum in TERMINATE_SIGNALS:
            parser.error(f"{option} cannot be {signal_to_str(signum)}, it stops the daemon")
        if signum in (signal.SIGKILL, signal.SIGSTOP):
            parser.error(f"{option} cannot be {signal_to_str(signum)}, it cannot be caught")

    return Settings(
        max_history_depth=args.max_history_depth,
        forward_signal=args.forward_signal,
        backward_signal=args.backward_signal,
        last_signal=args.last_signal,
        log_level=args.log_level,
    )
