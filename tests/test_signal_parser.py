import signal

import pytest

from i3last.core.signal_parser import (
    SignalParseError,
    is_valid_signal,
    parse_signal,
    signal_to_str,
)


@pytest.mark.parametrize(
    "spec, expected",
    [
        ("37", 37),
        (" 10 ", 10),
        ("SIGUSR1", signal.SIGUSR1),
        ("sigusr2", signal.SIGUSR2),
        ("usr1", signal.SIGUSR1),
        ("HUP", signal.SIGHUP),
        ("SIGIOT", signal.SIGABRT),
        ("SIGRTMIN", signal.SIGRTMIN),
        ("SIGRTMIN+2", signal.SIGRTMIN + 2),
        ("rtmin + 3", signal.SIGRTMIN + 3),
        ("RTMAX-1", signal.SIGRTMAX - 1),
    ],
)
def test_parse_signal(spec, expected):
    assert parse_signal(spec) == expected


@pytest.mark.parametrize(
    "spec",
    ["", "   ", "SIGNOPE", "usr1+1", "RTMIN+x", "RTMIN+", "0", "999", "RTMAX+1"],
)
def test_parse_signal_rejects(spec):
    with pytest.raises(SignalParseError):
        parse_signal(spec)


def test_parse_error_is_a_value_error():
    assert issubclass(SignalParseError, ValueError)


def test_is_valid_signal():
    assert is_valid_signal("SIGUSR1")
    assert not is_valid_signal("SIGNOPE")


def test_signal_to_str():
    assert signal_to_str(signal.SIGTERM) == "SIGTERM"
    assert signal_to_str(signal.SIGRTMIN + 2) == "SIGRTMIN+2"
    assert signal_to_str(signal.SIGRTMIN) == "SIGRTMIN+0"


def test_signal_to_str_round_trips_real_time_signals():
    assert parse_signal(signal_to_str(37)) == 37
