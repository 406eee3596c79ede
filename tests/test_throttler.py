import time
from inspect import Parameter, signature
from typing import Callable
from unittest.mock import Mock

import pytest

from pacer import Debouncer, Throttler, _compiled, debounced, throttled
from pacer.testing import VirtualScheduler


def test_debounced() -> None:
    mock1 = Mock()
    f1 = debounced(mock1, timeout=10)
    f2 = Mock()

    for i in range(10):
        f1(i)
        f2()

    time.sleep(0.1)
    mock1.assert_called_once_with(9)
    assert f2.call_count == 10


def test_throttled() -> None:
    mock1 = Mock()
    f1 = throttled(mock1, timeout=50)
    f2 = Mock()

    for i in range(10):
        f1(i)
        f2()

    mock1.assert_called_once_with(0)
    time.sleep(0.1)
    # calls made while closed are dropped, not replayed
    mock1.assert_called_once_with(0)
    f1(99)
    assert mock1.call_count == 2
    mock1.assert_called_with(99)
    assert f2.call_count == 10


def test_kwargs_are_forwarded() -> None:
    mock1 = Mock()
    f1 = throttled(mock1, timeout=10)
    f1(1, key="value")
    mock1.assert_called_once_with(1, key="value")


def test_with_virtual_scheduler() -> None:
    clock = VirtualScheduler()
    mock1 = Mock()
    f1 = Debouncer(mock1, interval=100, scheduler=clock)
    f1("a")
    clock.advance(50)
    f1("b")
    clock.advance(99)
    mock1.assert_not_called()
    clock.advance(1)
    mock1.assert_called_once_with("b")

    mock2 = Mock()
    f2 = Throttler(mock2, interval=100, scheduler=clock)
    f2("a")
    f2("b")
    clock.advance(100)
    f2("c")
    assert [c.args for c in mock2.call_args_list] == [("a",), ("c",)]
    assert f2.interval == 100
    assert f2.loop.limiter.delay_ms == 100


@pytest.mark.parametrize("deco", [debounced, throttled])
def test_negative_timeout(deco: Callable) -> None:
    with pytest.raises(ValueError, match="must be non-negative"):
        deco(Mock(), timeout=-1)


def test_leading_argument_warns() -> None:
    with pytest.warns(UserWarning, match="leading edge"):
        throttled(Mock(), timeout=10, leading=False)
    with pytest.warns(UserWarning, match="trailing edge"):
        debounced(Mock(), timeout=10, leading=True)


@pytest.mark.parametrize("deco", [debounced, throttled])
def test_throttled_debounced_signature(deco: Callable) -> None:
    mock = Mock()

    @deco(timeout=0)
    def f1(x: int) -> None:
        """Doc."""
        mock(x)

    # make sure we can still inspect the signature
    assert signature(f1).parameters["x"] == Parameter(
        "x", Parameter.POSITIONAL_OR_KEYWORD, annotation=int
    )

    f1(1)
    time.sleep(0.05)
    mock.assert_called_once_with(1)

    if not _compiled:
        assert f1.__doc__ == "Doc."
        assert f1.__name__ == "f1"
