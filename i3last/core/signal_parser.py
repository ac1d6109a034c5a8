"""
i3last.core.signal_parser - Parser for signal specs.

Converts human-readable signal names into signal numbers, so the
navigation signals can be configured the way ``kill``/``pkill`` spell
them:

    "37"            -> 37
    "SIGUSR1"       -> 10
    "usr1"          -> 10
    "SIGRTMIN+2"    -> signal.SIGRTMIN + 2
    "rtmax-1"       -> signal.SIGRTMAX - 1

Case-insensitive, the "SIG" prefix is optional.
"""

from __future__ import annotations

import signal

# ============================================================================
# Signal name -> number
# ============================================================================
_NAME_MAP: dict[str, int] = {}


def _build_name_map() -> None:
    """Populate the name map on first use."""
    if _NAME_MAP:
        return

    # __members__ also lists aliases such as SIGIOT / SIGABRT
    for name, member in signal.Signals.__members__.items():
        _NAME_MAP[name[3:].lower()] = int(member)


# ============================================================================
# Public API
# ============================================================================

class SignalParseError(ValueError):
    """Raised when a signal spec cannot be parsed."""
    pass


def parse_signal(spec: str) -> int:
    """
    Parse a signal spec into a signal number.

    Args:
        spec: A number ("37"), a name with or without the SIG prefix
              ("SIGUSR1", "usr1"), or a real-time signal relative to
              RTMIN/RTMAX ("SIGRTMIN+3", "RTMAX-2").

    Returns:
        The signal number.

    Raises:
        SignalParseError: If the spec is empty, names an unknown signal,
                          has a malformed offset, or falls outside
                          1..SIGRTMAX.
    """
    _build_name_map()

    if not spec or not spec.strip():
        raise SignalParseError("Empty signal spec")

    text = spec.strip().lower()

    if text.isdigit():
        signum = int(text)
    else:
        if text.startswith("sig"):
            text = text[3:]
        base, offset = _split_offset(text, spec)

        if base == "rtmin":
            signum = signal.SIGRTMIN + offset
        elif base == "rtmax":
            signum = signal.SIGRTMAX + offset
        elif offset:
            raise SignalParseError(
                f"Offsets are only allowed on RTMIN/RTMAX: {spec!r}"
            )
        elif base in _NAME_MAP:
            signum = _NAME_MAP[base]
        else:
            raise SignalParseError(f"Unknown signal: {spec!r}")

    if not 1 <= signum <= signal.SIGRTMAX:
        raise SignalParseError(
            f"Signal {spec!r} out of range (1..{int(signal.SIGRTMAX)})"
        )

    return signum


def signal_to_str(signum: int) -> str:
    """
    Convert a signal number back to a readable name.

    Useful for logging and error messages.
    """
    if signal.SIGRTMIN <= signum <= signal.SIGRTMAX:
        return f"SIGRTMIN+{signum - signal.SIGRTMIN}"
    try:
        return signal.Signals(signum).name
    except ValueError:
        return str(signum)


def is_valid_signal(spec: str) -> bool:
    """Check if a signal spec is valid without raising."""
    try:
        parse_signal(spec)
        return True
    except SignalParseError:
        return False


# ============================================================================
# Internal helpers
# ============================================================================

def _split_offset(text: str, spec: str) -> tuple[str, int]:
    """
    Split "rtmin+3" into ("rtmin", 3) and "rtmax-1" into ("rtmax", -1).

    Text without an offset comes back unchanged with offset 0.
    """
    for sep in "+-":
        if sep in text:
            base, _, raw = text.partition(sep)
            raw = raw.strip()
            if not raw.isdigit():
                raise SignalParseError(
                    f"Invalid offset {raw!r} in signal spec: {spec!r}"
                )
            value = int(raw)
            return base.strip(), value if sep == "+" else -value
    return text, 0
