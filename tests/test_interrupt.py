"""
Tests for the double Ctrl-C policy.
"""

import io
from typing import Callable, Iterable
import pytest
from replkit.lib.interrupt import DEFAULT_TIMEOUT, InterruptPolicy
from replkit.models.dataModel import InterruptBehavior


def clock_from(readings: Iterable[float]) -> Callable[[], float]:
    values = iter(readings)
    return lambda: next(values)


def test_default_timeout() -> None:
    assert InterruptPolicy().timeout == DEFAULT_TIMEOUT == 0.5
    assert InterruptPolicy(timeout=None).timeout == DEFAULT_TIMEOUT


def test_single_interrupt_does_not_exit(captured: io.StringIO) -> None:
    policy = InterruptPolicy(clock=clock_from([10.0]))
    assert policy.handle() is False
    assert policy.last_interrupt == 10.0
    assert "^C" in captured.getvalue()
    assert "Press Ctrl-C again quickly or Ctrl-D to exit" in captured.getvalue()


def test_two_quick_interrupts_exit(captured: io.StringIO) -> None:
    policy = InterruptPolicy(clock=clock_from([10.0, 10.3]))
    assert policy.handle() is False
    assert policy.handle() is True
    assert policy.last_interrupt is None


def test_two_slow_interrupts_do_not_exit(captured: io.StringIO) -> None:
    policy = InterruptPolicy(clock=clock_from([10.0, 11.0, 11.2]))
    assert policy.handle() is False
    assert policy.handle() is False
    assert policy.handle() is True


def test_third_interrupt_starts_a_new_window(captured: io.StringIO) -> None:
    policy = InterruptPolicy(clock=clock_from([1.0, 1.1, 1.2, 1.3]))
    assert policy.handle() is False
    assert policy.handle() is True
    assert policy.handle() is False
    assert policy.handle() is True


def test_reset_forgets_pending_interrupt(captured: io.StringIO) -> None:
    policy = InterruptPolicy(clock=clock_from([1.0, 1.1]))
    policy.handle()
    policy.reset()
    assert policy.handle() is False


def test_configurable_timeout(captured: io.StringIO) -> None:
    policy = InterruptPolicy(timeout=2.0, clock=clock_from([1.0, 2.5]))
    policy.handle()
    assert policy.handle() is True


@pytest.mark.parametrize(
    "behavior, expected",
    [
        (InterruptBehavior.SHOW_HELP, "type 'help' for commands"),
        ("show_help", "^C - Interrupt"),
    ],
)
def test_show_help_behavior(captured: io.StringIO, behavior, expected: str) -> None:
    InterruptPolicy(behavior, clock=clock_from([0.0])).handle()
    assert expected in captured.getvalue()


def test_silent_behavior(captured: io.StringIO) -> None:
    policy = InterruptPolicy(InterruptBehavior.SILENT, clock=clock_from([0.0]))
    assert policy.handle() is False
    assert captured.getvalue() == ""
