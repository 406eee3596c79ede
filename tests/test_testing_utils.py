import pytest

import pacer.testing as pt
from pacer import LimiterLoop


def test_virtual_scheduler_order() -> None:
    clock = pt.VirtualScheduler()
    fired = []
    clock.call_later(20, lambda: fired.append(("b", clock.now)))
    clock.call_later(10, lambda: fired.append(("a", clock.now)))
    clock.call_later(20, lambda: fired.append(("c", clock.now)))
    assert clock.pending_count == 3

    clock.advance(15)
    assert fired == [("a", 10)]
    assert clock.now == 15

    clock.advance(5)
    assert fired == [("a", 10), ("b", 20), ("c", 20)]
    assert clock.pending_count == 0


def test_virtual_scheduler_nested() -> None:
    clock = pt.VirtualScheduler(start=100)
    fired = []

    def first() -> None:
        fired.append(clock.now)
        clock.call_later(5, lambda: fired.append(clock.now))

    clock.call_later(5, first)
    clock.call_soon(lambda: fired.append("soon"))
    assert fired == ["soon"]
    clock.advance(10)
    assert fired == ["soon", 105, 110]


def test_virtual_scheduler_backwards() -> None:
    clock = pt.VirtualScheduler()
    clock.advance(10)
    with pytest.raises(ValueError, match="backwards"):
        clock.advance_to(5)


def test_consumer_tester() -> None:
    clock = pt.VirtualScheduler()
    tester = pt.ConsumerTester(clock)
    tester.assert_not_emitted()
    with pytest.raises(AssertionError, match="Actual: not called"):
        tester.assert_emitted_with(1)

    tester(1)
    clock.advance(7)
    tester(2)
    assert tester.emit_count == 2
    assert tester.payloads == [1, 2]
    assert tester.emitted == [(0, 1), (7, 2)]
    tester.assert_emitted_with(2)

    with pytest.raises(AssertionError, match="Called 2 times"):
        tester.assert_not_emitted()
    with pytest.raises(AssertionError, match="exactly once. Called 2 times"):
        tester.assert_emitted_once_with(2)
    with pytest.raises(AssertionError, match="Actual: 2"):
        tester.assert_emitted_with(1)

    tester.reset()
    assert tester.emitted == []


def test_assert_emitted_once_with() -> None:
    clock = pt.VirtualScheduler()
    with pt.assert_emitted_once_with("B", clock) as tester:
        loop = LimiterLoop.debounce(tester, 50, scheduler=clock)
        loop.push("A")
        loop.push("B")
        clock.run_all()

    with pytest.raises(AssertionError, match="to have been called with 'A'"):
        with pt.assert_emitted_once_with("A") as tester:
            tester("B")


def test_assert_not_emitted() -> None:
    clock = pt.VirtualScheduler()
    with pt.assert_not_emitted(clock) as tester:
        loop = LimiterLoop.debounce(tester, 50, scheduler=clock)
        loop.push("A")
        clock.advance(49)

    with pytest.raises(
        AssertionError,
        match="Expected 'consumer' to not have been called. Called once.",
    ):
        with pt.assert_not_emitted() as tester:
            tester(1)
