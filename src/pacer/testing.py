"""Utilities for testing code that uses pacer limiters."""

from __future__ import annotations

import heapq
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any
from unittest.mock import Mock
from unittest.util import safe_repr

from ._scheduler import Scheduler

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from typing_extensions import Self


__all__ = [
    "ConsumerTester",
    "VirtualScheduler",
    "assert_emitted_once_with",
    "assert_not_emitted",
]


class VirtualScheduler(Scheduler):
    """A deterministic scheduler driven by a virtual millisecond clock.

    Nothing happens until the clock is advanced.  Callbacks that become due are
    invoked in order of due time, then in the order they were scheduled.
    `call_soon` callbacks run immediately.

    Examples
    --------
    ```python
    from pacer import LimiterLoop
    from pacer.testing import ConsumerTester, VirtualScheduler

    clock = VirtualScheduler()
    tester = ConsumerTester(clock)
    loop = LimiterLoop.debounce(tester, 500, scheduler=clock)

    loop.push("A")
    clock.advance(100)
    loop.push("B")
    clock.advance(500)
    tester.assert_emitted_once_with("B")
    assert tester.emitted == [(600, "B")]
    ```
    """

    kind = "virtual"

    def __init__(self, start: int = 0) -> None:
        self._now = start
        self._seq = 0
        self._heap: list[tuple[int, int, Callable[[], object]]] = []

    @property
    def now(self) -> int:
        """Current virtual time, in milliseconds."""
        return self._now

    @property
    def pending_count(self) -> int:
        """Number of callbacks that have not fired yet."""
        return len(self._heap)

    def call_later(self, delay_ms: int, fn: Callable[[], object]) -> None:
        self._seq += 1
        heapq.heappush(self._heap, (self._now + max(delay_ms, 0), self._seq, fn))

    def advance(self, ms: int) -> None:
        """Move the clock forward by `ms`, firing everything that becomes due."""
        self.advance_to(self._now + ms)

    def advance_to(self, time: int) -> None:
        """Move the clock to `time`, firing everything that becomes due."""
        if time < self._now:
            raise ValueError(f"Cannot move the clock backwards ({time} < {self._now})")
        while self._heap and self._heap[0][0] <= time:
            due, _, fn = heapq.heappop(self._heap)
            self._now = due
            fn()
        self._now = time

    def run_all(self) -> None:
        """Fire every pending callback, including ones scheduled while firing."""
        while self._heap:
            self.advance_to(self._heap[0][0])


class ConsumerTester:
    """A consumer that records the payloads it receives.

    Every call is forwarded to `mock`.  When a `VirtualScheduler` is given, the
    virtual time of each emission is recorded as well.

    Parameters
    ----------
    clock : VirtualScheduler, optional
        Clock used to timestamp emissions.
    name : str
        Name used in assertion messages, by default "consumer".
    """

    def __init__(
        self, clock: VirtualScheduler | None = None, name: str = "consumer"
    ) -> None:
        self.mock = Mock()
        self.clock = clock
        self.name = name
        self._times: list[int | None] = []

    def __call__(self, payload: Any) -> None:
        self._times.append(self.clock.now if self.clock is not None else None)
        self.mock(payload)

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *args: Any) -> None:
        pass

    def reset(self) -> None:
        """Forget all recorded emissions."""
        self.mock.reset_mock()
        self._times.clear()

    @property
    def emit_count(self) -> int:
        """Return the number of payloads received."""
        return self.mock.call_count

    @property
    def payloads(self) -> list[Any]:
        """Return every received payload, in order."""
        return [c[0][0] for c in self.mock.call_args_list]

    @property
    def emitted(self) -> list[tuple[int | None, Any]]:
        """Return `(time, payload)` for every received payload."""
        return list(zip(self._times, self.payloads))

    def assert_not_emitted(self) -> None:
        """Assert that nothing was received."""
        if self.mock.call_count != 0:
            if self.mock.call_count == 1:
                n = "once"
            else:
                n = f"{self.mock.call_count} times"
            raise AssertionError(
                f"Expected {self.name!r} to not have been called. Called {n}."
            )

    def assert_emitted_with(self, payload: Any) -> None:
        """Assert that the *last* received payload equals `payload`."""
        if self.mock.call_args is None:
            raise AssertionError(
                f"Expected {self.name!r} to have been called with {payload!r}.\n"
                "Actual: not called"
            )
        actual = self.mock.call_args[0][0]
        if actual != payload:
            raise AssertionError(
                f"Expected {self.name!r} to have been called with {payload!r}.\n"
                f"Actual: {safe_repr(actual)}"
            )

    def assert_emitted_once_with(self, payload: Any) -> None:
        """Assert that exactly one payload was received, and that it is `payload`."""
        if not self.mock.call_count == 1:
            raise AssertionError(
                f"Expected {self.name!r} to have been called exactly once. "
                f"Called {self.mock.call_count} times."
            )
        self.assert_emitted_with(payload)


@contextmanager
def assert_emitted_once_with(
    payload: Any, clock: VirtualScheduler | None = None
) -> Iterator[ConsumerTester]:
    """Yield a consumer that must receive exactly `payload`, once.

    Raises
    ------
    AssertionError
        If the consumer was not called exactly once with `payload`.
    """
    with ConsumerTester(clock) as tester:
        yield tester
        tester.assert_emitted_once_with(payload)


@contextmanager
def assert_not_emitted(
    clock: VirtualScheduler | None = None,
) -> Iterator[ConsumerTester]:
    """Yield a consumer that must never be called.

    Raises
    ------
    AssertionError
        If the consumer was called at least once.
    """
    with ConsumerTester(clock) as tester:
        yield tester
        tester.assert_not_emitted()
