import queue
import signal

import pytest

from i3last.config.bindings import register_all_signals
from i3last.config.settings import Settings
from i3last.core import signals
from i3last.core.errors import SourceUnavailable
from i3last.core.events import Event, EventKind
from i3last.core.signals import (
    SIG_BACKWARD,
    SIG_FORWARD,
    SIG_LAST,
    SIGRTMIN_SAFE,
    SignalListener,
)


def _default_listener():
    events = queue.Queue()
    listener = SignalListener(events)
    register_all_signals(listener, Settings())
    return listener, events


def test_default_signal_numbers():
    assert SIGRTMIN_SAFE == 36
    assert (SIG_FORWARD, SIG_BACKWARD, SIG_LAST) == (36, 37, 38)


def test_register_all_signals_binds_navigation_and_lifecycle():
    listener, _ = _default_listener()

    kinds = {b.signum: b.kind for b in listener.bindings}
    assert kinds == {
        SIG_FORWARD: EventKind.NAVIGATE_FORWARD,
        SIG_BACKWARD: EventKind.NAVIGATE_BACKWARD,
        SIG_LAST: EventKind.REPEAT_LAST,
        signal.SIGINT: EventKind.TERMINATE,
        signal.SIGTERM: EventKind.TERMINATE,
    }
    assert listener.count == 5


def test_register_all_signals_uses_settings():
    listener = SignalListener(queue.Queue())
    settings = Settings(
        forward_signal=signal.SIGUSR2,
        backward_signal=signal.SIGUSR1,
        last_signal=signal.SIGHUP,
    )
    assert register_all_signals(listener, settings) == 5
    assert listener.signals == {
        signal.SIGUSR1, signal.SIGUSR2, signal.SIGHUP, signal.SIGINT, signal.SIGTERM,
    }


def test_bind_replaces_existing_binding():
    listener = SignalListener(queue.Queue())
    listener.bind(40, EventKind.NAVIGATE_FORWARD)
    listener.bind(40, EventKind.NAVIGATE_BACKWARD, "Back")
    assert listener.count == 1
    assert listener.bindings[0].kind is EventKind.NAVIGATE_BACKWARD
    assert listener.bindings[0].description == "Back"


def test_unbind():
    listener = SignalListener(queue.Queue())
    listener.bind(40, EventKind.NAVIGATE_FORWARD)
    assert listener.unbind(40) is True
    assert listener.unbind(40) is False
    assert listener.count == 0


def test_dispatch_puts_bound_event():
    listener, events = _default_listener()
    assert listener.dispatch(SIG_BACKWARD) is True
    assert events.get_nowait() == Event(EventKind.NAVIGATE_BACKWARD)


def test_dispatch_ignores_unbound_signal():
    listener, events = _default_listener()
    assert listener.dispatch(signal.SIGUSR1) is False
    assert events.empty()


def test_run_stops_after_terminate(monkeypatch):
    listener, events = _default_listener()
    received = iter([SIG_BACKWARD, SIG_LAST, signal.SIGTERM, SIG_FORWARD])
    waited_on = []

    def _sigwait(sigset):
        waited_on.append(set(sigset))
        return next(received)

    monkeypatch.setattr(signals.signal, "sigwait", _sigwait)

    listener.run()

    kinds = []
    while not events.empty():
        kinds.append(events.get_nowait().kind)
    assert kinds == [
        EventKind.NAVIGATE_BACKWARD,
        EventKind.REPEAT_LAST,
        EventKind.TERMINATE,
    ]
    assert waited_on[0] == listener.signals
    assert len(waited_on) == 3


def test_run_reports_sigwait_failure(monkeypatch):
    listener, events = _default_listener()

    def _sigwait(sigset):
        raise OSError("interrupted")

    monkeypatch.setattr(signals.signal, "sigwait", _sigwait)

    listener.run()

    failed = events.get_nowait()
    assert failed.kind is EventKind.SOURCE_FAILED
    assert isinstance(failed.error, SourceUnavailable)
    assert events.empty()


def test_block_uses_pthread_sigmask(monkeypatch):
    listener, _ = _default_listener()
    calls = []
    monkeypatch.setattr(
        signals.signal, "pthread_sigmask", lambda how, mask: calls.append((how, set(mask)))
    )

    listener.block()

    assert calls == [(signal.SIG_BLOCK, listener.signals)]


def test_block_failure_is_source_unavailable(monkeypatch):
    listener, _ = _default_listener()

    def _fail(how, mask):
        raise ValueError("signal number out of range")

    monkeypatch.setattr(signals.signal, "pthread_sigmask", _fail)

    with pytest.raises(SourceUnavailable, match="failed to catch signals"):
        listener.block()


def test_dump_state_lists_bindings():
    listener, _ = _default_listener()
    dump = listener.dump_state()
    assert "5 signals" in dump
    assert "navigate_backward" in dump
    assert "SIGTERM" in dump


def test_listener_is_a_daemon_thread():
    listener = SignalListener(queue.Queue())
    assert listener.daemon
    assert listener.name == "signal-listener"
