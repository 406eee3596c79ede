from __future__ import annotations

from collections import deque
from functools import partial
from threading import RLock, Thread, current_thread, main_thread
from typing import TYPE_CHECKING, Any, ClassVar, Generic, NamedTuple, TypeVar

from ._effects import NONE, Dispatch, ScheduleAfter, iter_effects
from ._exceptions import DispatchLoopError
from ._limiter import Emit, Push, debounce, throttle, update
from ._scheduler import get_default_scheduler

if TYPE_CHECKING:
    from collections.abc import Callable
    from typing import Literal

    from ._effects import Effect
    from ._limiter import InternalMsg, Limiter
    from ._scheduler import Scheduler

__all__ = ["LimiterLoop", "MessageInfo", "MessageLoop"]

M = TypeVar("M")
T = TypeVar("T")


class MessageInfo(NamedTuple):
    """Tuple containing information about a processed message."""

    loop: MessageLoop
    msg: Any


def _identity(msg: InternalMsg) -> InternalMsg:
    return msg


class MessageLoop(Generic[M]):
    """Single message queue feeding an `update` function.

    Parameters
    ----------
    update : Callable[[M], Effect | None]
        Called with every delivered message.  May return an effect describing
        further messages to dispatch or schedule.
    scheduler : Scheduler, optional
        Used to perform effects.  If not provided, the default scheduler at the
        time of the first effect is used.
    thread : Thread | Literal["main", "current"] | None
        The thread that owns the loop.  Messages sent from any other thread are
        queued until `process_queued` is called on the owning thread.  If `None`
        (the default), messages are processed on whichever thread sends them.
    name : str, optional
        Name used when reporting messages and errors.
    """

    _debug_hook: ClassVar[Callable[[MessageInfo], Any] | None] = None

    def __init__(
        self,
        update: Callable[[M], Effect | None],
        scheduler: Scheduler | None = None,
        thread: Thread | Literal["main", "current"] | None = None,
        name: str | None = None,
    ) -> None:
        if thread == "main":
            thread = main_thread()
        elif thread == "current":
            thread = current_thread()
        elif thread is not None and not isinstance(thread, Thread):
            raise TypeError(
                f"`thread` must be a Thread instance, not {type(thread).__name__}"
            )
        self._update = update
        self._scheduler = scheduler
        self._owner: Thread | None = thread
        self._queue: deque[M] = deque()
        self._lock = RLock()
        self._draining = False
        self._monitors: list[Callable[[MessageInfo], Any]] = []
        self.name: str = name or type(self).__name__

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r} queued={len(self._queue)}>"

    @property
    def scheduler(self) -> Scheduler:
        if self._scheduler is None:
            self._scheduler = get_default_scheduler()
        return self._scheduler

    @property
    def queued_count(self) -> int:
        """Number of messages waiting to be processed."""
        return len(self._queue)

    def send(self, msg: M) -> None:
        """Deliver `msg` to the loop."""
        with self._lock:
            self._queue.append(msg)
        if self._owner is None or current_thread() is self._owner:
            self.process_queued()

    def process_queued(self) -> None:
        """Process every queued message, in order.

        Messages sent while processing are appended to the queue and handled in
        the same pass.

        Raises
        ------
        DispatchLoopError
            If `update` raises.  Messages remaining in the queue are kept.
        """
        with self._lock:
            if self._draining:
                return
            self._draining = True

        # only one thread drains at a time; the lock is never held while
        # `update` or a consumer runs
        try:
            while True:
                with self._lock:
                    if not self._queue:
                        self._draining = False
                        return
                    msg = self._queue.popleft()
                self._report(msg)
                try:
                    effect = self._update(msg)
                except Exception as e:
                    raise DispatchLoopError(exc=e, msg=msg, loop=self) from e
                if effect is not None:
                    self.perform(effect)
        except BaseException:
            with self._lock:
                self._draining = False
            raise

    def perform(self, effect: Effect) -> None:
        """Hand the requests in `effect` to the scheduler."""
        for request in iter_effects(effect):
            if isinstance(request, ScheduleAfter):
                self.scheduler.call_later(
                    request.delay_ms, partial(self.send, request.msg)
                )
            elif isinstance(request, Dispatch):
                self.scheduler.call_soon(partial(self.send, request.msg))

    def _report(self, msg: M) -> None:
        if MessageLoop._debug_hook is not None or self._monitors:
            info = MessageInfo(self, msg)
            if MessageLoop._debug_hook is not None:
                MessageLoop._debug_hook(info)
            for monitor in self._monitors:
                monitor(info)


class LimiterLoop(MessageLoop[Any], Generic[T]):
    """Host loop for a single rate-limited stream.

    The limiter is threaded through the loop: every internal message replaces
    it with the next value returned by `update`, and `Emit` messages are handed
    to `consumer`.  The limiter's callback must return internal messages
    unchanged, as the ones built by `LimiterLoop.debounce` and
    `LimiterLoop.throttle` do.

    Parameters
    ----------
    limiter : Limiter
        The initial limiter.
    consumer : Callable[[T], Any]
        Called with every emitted payload.
    scheduler, thread, name
        See `MessageLoop`.
    """

    def __init__(
        self,
        limiter: Limiter[T, InternalMsg],
        consumer: Callable[[T], Any],
        scheduler: Scheduler | None = None,
        thread: Thread | Literal["main", "current"] | None = None,
        name: str | None = None,
    ) -> None:
        super().__init__(self._step, scheduler, thread, name)
        self._limiter = limiter
        self._consumer = consumer

    @classmethod
    def debounce(
        cls, consumer: Callable[[T], Any], cooldown_ms: int, **kwargs: Any
    ) -> LimiterLoop[T]:
        """Create a loop around a debouncing limiter."""
        return cls(debounce(_identity, cooldown_ms), consumer, **kwargs)

    @classmethod
    def throttle(
        cls, consumer: Callable[[T], Any], interval_ms: int, **kwargs: Any
    ) -> LimiterLoop[T]:
        """Create a loop around a throttling limiter."""
        return cls(throttle(_identity, interval_ms), consumer, **kwargs)

    @property
    def limiter(self) -> Limiter[T, InternalMsg]:
        """The current limiter value."""
        return self._limiter

    def push(self, payload: T) -> None:
        """Push a new payload from the event source."""
        self.send(Push(payload))

    def _step(self, msg: Any) -> Effect:
        if isinstance(msg, Emit):
            self._consumer(msg.payload)
            return NONE
        self._limiter, effect = update(msg, self._limiter)
        return effect
