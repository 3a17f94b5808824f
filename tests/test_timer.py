"""Tests for the GLib timer and the headless dispatch loop."""

import threading
import time
from unittest.mock import MagicMock, patch

from gi.repository import GLib

from pasteclipboard.cli.type_main import run_dispatch
from pasteclipboard.errors import InjectionError
from pasteclipboard.gui.timer import GLibTimer


def _spin(until, timeout: float = 2.0) -> None:
    """Iterate the default main context until until() is true or time runs out."""
    context = GLib.MainContext.default()
    deadline = time.monotonic() + timeout
    while not until() and time.monotonic() < deadline:
        if not context.iteration(False):
            time.sleep(0.005)


def _drain(duration: float = 0.1) -> None:
    _spin(lambda: False, timeout=duration)


def test_call_later_fires_once() -> None:
    """Test a one-shot timeout runs its callback exactly once."""
    timer = GLibTimer()
    callback = MagicMock()

    timer.call_later(0.02, callback)
    _spin(lambda: callback.called)
    _drain()

    callback.assert_called_once_with()


def test_zero_delay_uses_idle() -> None:
    """Test a zero delay still waits for the loop instead of running inline."""
    timer = GLibTimer()
    callback = MagicMock()

    timer.call_later(0, callback)
    callback.assert_not_called()

    _spin(lambda: callback.called)
    callback.assert_called_once_with()


def test_cancel_before_fire() -> None:
    """Test a cancelled timeout never runs."""
    timer = GLibTimer()
    callback = MagicMock()

    handle = timer.call_later(0.02, callback)
    timer.cancel(handle)
    _drain(0.1)

    callback.assert_not_called()


def test_cancel_after_fire_is_noop() -> None:
    """Test cancelling a handle that already fired does not touch GLib."""
    timer = GLibTimer()
    callback = MagicMock()

    handle = timer.call_later(0, callback)
    _spin(lambda: callback.called)

    with patch.object(GLib, "source_remove") as mock_remove:
        timer.cancel(handle)

    mock_remove.assert_not_called()


def test_run_in_thread_delivers_on_loop() -> None:
    """Test background work runs off the loop and reports back on it."""
    timer = GLibTimer()
    main_thread = threading.get_ident()
    seen = {}

    def work():
        seen["work_thread"] = threading.get_ident()

    def done(error):
        seen["done_thread"] = threading.get_ident()
        seen["error"] = error

    timer.run_in_thread(work, done)
    _spin(lambda: "done_thread" in seen)

    assert seen["work_thread"] != main_thread
    assert seen["done_thread"] == main_thread
    assert seen["error"] is None


def test_run_in_thread_reports_error() -> None:
    """Test an exception in the worker is passed to done."""
    timer = GLibTimer()
    errors = []

    def work():
        raise InjectionError("no display")

    timer.run_in_thread(work, errors.append)
    _spin(lambda: errors)

    assert isinstance(errors[0], InjectionError)


@patch("pasteclipboard.cli.type_main.make_injector")
def test_run_dispatch_types(mock_make_injector: MagicMock) -> None:
    """Test a zero-delay dispatch types on a real main loop and returns ok."""
    injector = MagicMock()
    mock_make_injector.return_value = injector

    result = run_dispatch("hello", 0, "xdotool")

    assert result.ok
    injector.assert_called_once_with("hello")
    mock_make_injector.assert_called_once_with("xdotool")


@patch("pasteclipboard.cli.type_main.make_injector")
def test_run_dispatch_failure(mock_make_injector: MagicMock) -> None:
    """Test a failing backend ends the loop with an error result."""
    mock_make_injector.return_value = MagicMock(side_effect=InjectionError("no display"))

    result = run_dispatch("hello", 0, "xdotool")

    assert not result.ok
    assert "no display" in str(result.error)


@patch("pasteclipboard.cli.type_main.make_injector")
def test_run_dispatch_interrupt_cancels(mock_make_injector: MagicMock) -> None:
    """Test Ctrl+C during the countdown cancels without typing."""
    injector = MagicMock()
    mock_make_injector.return_value = injector

    def deliver_sigint_soon(priority, signum, handler):
        # Stand in for the real signal: run the handler shortly after the loop starts.
        return GLib.timeout_add(20, handler)

    with patch.object(GLib, "unix_signal_add", side_effect=deliver_sigint_soon):
        result = run_dispatch("hello", 5, "xdotool")

    assert result.cancelled
    injector.assert_not_called()
