import logging
import signal

import pytest

from i3last.config.settings import Settings, parse_args
from i3last.core.signals import SIG_BACKWARD, SIG_FORWARD, SIG_LAST


def test_defaults():
    settings = parse_args([])
    assert settings == Settings()
    assert settings.max_history_depth == 15
    assert (settings.forward_signal, settings.backward_signal, settings.last_signal) == (
        SIG_FORWARD,
        SIG_BACKWARD,
        SIG_LAST,
    )
    assert settings.log_level == logging.INFO


def test_history_and_signals():
    settings = parse_args(
        [
            "--history", "30",
            "--forward-signal", "SIGUSR2",
            "--backward-signal", "usr1",
            "--last-signal", "40",
        ]
    )
    assert settings.max_history_depth == 30
    assert settings.forward_signal == signal.SIGUSR2
    assert settings.backward_signal == signal.SIGUSR1
    assert settings.last_signal == 40


@pytest.mark.parametrize(
    "argv, level",
    [(["-v"], logging.DEBUG), (["--quiet"], logging.WARNING), ([], logging.INFO)],
)
def test_verbosity(argv, level):
    assert parse_args(argv).log_level == level


@pytest.mark.parametrize(
    "argv",
    [
        ["--history", "0"],
        ["--history", "many"],
        ["--forward-signal", "SIGNOPE"],
        ["--forward-signal", "37"],
        ["--last-signal", "SIGTERM"],
        ["--backward-signal", "SIGINT"],
        ["--forward-signal", "SIGKILL"],
        ["-v", "-q"],
    ],
)
def test_invalid_options_exit(argv, capsys):
    with pytest.raises(SystemExit) as exc_info:
        parse_args(argv)
    assert exc_info.value.code == 2
    assert "i3last" in capsys.readouterr().err
