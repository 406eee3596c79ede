from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, overload

if TYPE_CHECKING:
    import asyncio
    from collections.abc import Callable
    from typing import Literal

    from typing_extensions import TypeAlias

    SupportedScheduler: TypeAlias = Literal["thread", "asyncio"]


__all__ = [
    "AsyncioScheduler",
    "Scheduler",
    "ThreadScheduler",
    "clear_default_scheduler",
    "get_default_scheduler",
    "set_default_scheduler",
]

_DEFAULT_SCHEDULER: Scheduler | None = None


def get_default_scheduler() -> Scheduler:
    """Return the default scheduler, creating a `ThreadScheduler` if none is set."""
    global _DEFAULT_SCHEDULER
    if _DEFAULT_SCHEDULER is None:
        _DEFAULT_SCHEDULER = ThreadScheduler()
    return _DEFAULT_SCHEDULER


def clear_default_scheduler() -> None:
    """Clear the default scheduler. Primarily for testing purposes."""
    global _DEFAULT_SCHEDULER
    _DEFAULT_SCHEDULER = None


@overload
def set_default_scheduler(kind: Literal["thread"]) -> ThreadScheduler: ...
@overload
def set_default_scheduler(kind: Literal["asyncio"]) -> AsyncioScheduler: ...
def set_default_scheduler(kind: SupportedScheduler = "thread") -> Scheduler:
    """Set the scheduler used by loops that are not given one explicitly.

    Must be one of: 'thread', 'asyncio'.  The 'asyncio' scheduler binds to the
    running event loop, so it must be set from within a coroutine.
    """
    global _DEFAULT_SCHEDULER

    if _DEFAULT_SCHEDULER is not None and _DEFAULT_SCHEDULER.kind != kind:
        raise RuntimeError(
            f"Default scheduler already set to: {_DEFAULT_SCHEDULER.kind}"
        )

    if kind == "thread":
        _DEFAULT_SCHEDULER = ThreadScheduler()
    elif kind == "asyncio":
        _DEFAULT_SCHEDULER = AsyncioScheduler()
    else:
        raise ValueError(
            f"Scheduler not supported: {kind!r}.  Must be one of: 'thread', 'asyncio'"
        )
    return _DEFAULT_SCHEDULER


class Scheduler(ABC):
    """Fire-and-forget timer primitive.

    Every callback passed to a scheduler is invoked exactly once.  Nothing is
    returned, so scheduled callbacks can never be cancelled.
    """

    kind: str = ""

    @abstractmethod
    def call_later(self, delay_ms: int, fn: Callable[[], object]) -> None:
        """Invoke `fn` after at least `delay_ms` milliseconds."""

    def call_soon(self, fn: Callable[[], object]) -> None:
        """Invoke `fn` as soon as possible."""
        fn()


class ThreadScheduler(Scheduler):
    """Scheduler backed by `threading.Timer`.

    Delayed callbacks run on the timer's own thread.  `call_soon` runs the
    callback on the calling thread.
    """

    kind = "thread"

    def call_later(self, delay_ms: int, fn: Callable[[], object]) -> None:
        threading.Timer(max(delay_ms, 0) / 1000, fn).start()


class AsyncioScheduler(Scheduler):
    """Scheduler backed by an asyncio event loop.

    Parameters
    ----------
    loop : asyncio.AbstractEventLoop, optional
        The loop to schedule callbacks on.  Defaults to the running loop.
    """

    kind = "asyncio"

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        import asyncio

        self._asyncio = asyncio
        self._loop = loop if loop is not None else asyncio.get_running_loop()

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop

    def _in_loop(self) -> bool:
        try:
            return self._asyncio.get_running_loop() is self._loop
        except RuntimeError:
            return False

    def call_later(self, delay_ms: int, fn: Callable[[], object]) -> None:
        delay = max(delay_ms, 0) / 1000
        if self._in_loop():
            self._loop.call_later(delay, fn)
        else:
            self._loop.call_soon_threadsafe(self._loop.call_later, delay, fn)

    def call_soon(self, fn: Callable[[], object]) -> None:
        self._loop.call_soon_threadsafe(fn)
