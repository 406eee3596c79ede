from __future__ import annotations

import warnings
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from ._loop import LimiterLoop
from ._scheduler import ThreadScheduler

if TYPE_CHECKING:
    import inspect
    from collections.abc import Callable
    from typing import Literal

    from typing_extensions import ParamSpec

    from ._scheduler import Scheduler

    Kind = Literal["throttler", "debouncer"]

    P = ParamSpec("P")
else:
    # just so that we don't have to depend on a new version of typing_extensions
    # at runtime
    P = TypeVar("P")

Call = tuple[tuple[Any, ...], dict[str, Any]]


class _ThrottlerBase(Generic[P]):
    _kind: Kind

    def __init__(
        self,
        func: Callable[P, Any],
        interval: int = 100,
        scheduler: Scheduler | None = None,
    ) -> None:
        if interval < 0:
            raise ValueError(f"interval must be non-negative, got {interval}")
        self.__wrapped__: Callable[P, Any] = func
        self._interval: int = interval
        if self._kind == "debouncer":
            factory = LimiterLoop.debounce
        else:
            factory = LimiterLoop.throttle
        self._loop: LimiterLoop[Call] = factory(
            self._actually_call,
            interval,
            scheduler=scheduler if scheduler is not None else ThreadScheduler(),
            name=getattr(func, "__qualname__", None),
        )

        # this mimics what functools.wraps does, but avoids __dict__ usage
        self.__module__: str = getattr(func, "__module__", "")
        self.__name__: str = getattr(func, "__name__", "")
        self.__qualname__: str = getattr(func, "__qualname__", "")
        self.__doc__: str | None = getattr(func, "__doc__", None)
        self.__annotations__: dict[str, Any] = getattr(func, "__annotations__", {})

    def _actually_call(self, call: Call) -> None:
        args, kwargs = call
        self.__wrapped__(*args, **kwargs)

    @property
    def interval(self) -> int:
        """The debounce cooldown or throttle interval, in milliseconds."""
        return self._interval

    @property
    def loop(self) -> LimiterLoop[Call]:
        """The loop driving the underlying limiter."""
        return self._loop

    def __call__(self, *args: P.args, **kwargs: P.kwargs) -> None:
        """Push the call arguments through the limiter."""
        self._loop.push((args, kwargs))

    @property
    def __signature__(self) -> inspect.Signature:
        import inspect

        return inspect.signature(self.__wrapped__)


class Throttler(_ThrottlerBase, Generic[P]):
    """Class that prevents calling `func` more than once per `interval`.

    The first call of a burst goes through immediately, and every further call
    is dropped until `interval` ms have passed.

    Parameters
    ----------
    func : Callable[P, Any]
        a function to wrap
    interval : int, optional
        the minimum interval in ms that must pass before the function is called again,
        by default 100
    scheduler : Scheduler, optional
        scheduler used for the reopen timer, by default a new `ThreadScheduler`
    """

    _kind: Kind = "throttler"


class Debouncer(_ThrottlerBase, Generic[P]):
    """Class that waits at least `interval` before calling `func`.

    Only the arguments of the *last* call in a burst are used.

    Parameters
    ----------
    func : Callable[P, Any]
        a function to wrap
    interval : int, optional
        the quiet period in ms that must pass after the last call before the
        function is called, by default 100
    scheduler : Scheduler, optional
        scheduler used for the settle timers, by default a new `ThreadScheduler`
    """

    _kind: Kind = "debouncer"


def _check_leading(leading: bool | None, expected: bool, name: str) -> None:
    if leading is not None and leading is not expected:
        edge = "leading" if expected else "trailing"
        warnings.warn(
            f"`{name}` always invokes on the {edge} edge; the `leading` argument "
            "is ignored.",
            stacklevel=3,
        )


def throttled(
    func: Callable[P, Any] | None = None,
    timeout: int = 100,
    leading: bool | None = None,
) -> Throttler[P] | Callable[[Callable[P, Any]], Throttler[P]]:
    """Create a throttled function that invokes func at most once per timeout.

    The first call is forwarded immediately, after which every call made within
    `timeout` milliseconds is dropped.  Dropped calls are *not* replayed when the
    window closes.

    This decorator may be used with or without parameters.

    Parameters
    ----------
    func : Callable
        A function to throttle
    timeout : int
        Timeout in milliseconds to wait before allowing another call, by default 100
    leading : bool, optional
        Only accepted for compatibility.  Throttled functions always fire on the
        leading edge.

    Examples
    --------
    ```python
    from pacer import throttled

    @throttled(timeout=50)
    def on_click(x: int, y: int) -> None:
        # do something possibly expensive
        ...

    # only the first click in any 50 millisecond window gets through
    on_click(1, 2)
    ```
    """
    _check_leading(leading, True, "throttled")

    def deco(func: Callable[P, Any]) -> Throttler[P]:
        return Throttler(func, timeout)

    return deco(func) if func is not None else deco


def debounced(
    func: Callable[P, Any] | None = None,
    timeout: int = 100,
    leading: bool | None = None,
) -> Debouncer[P] | Callable[[Callable[P, Any]], Debouncer[P]]:
    """Create a debounced function that delays invoking `func`.

    `func` will not be invoked until `timeout` ms have elapsed since the last time
    the debounced function was invoked.  It is invoked with the *last* arguments
    provided to the debounced function.

    This decorator may be used with or without parameters.

    Parameters
    ----------
    func : Callable
        A function to debounce
    timeout : int
        Quiet period in milliseconds, by default 100
    leading : bool, optional
        Only accepted for compatibility.  Debounced functions always fire on the
        trailing edge.

    Examples
    --------
    ```python
    from pacer import debounced

    @debounced(timeout=300)
    def search(text: str) -> None:
        ...

    for text in ("p", "pa", "pac", "pace"):
        search(text)  # only "pace" is searched, 300 ms after the last keystroke
    ```
    """
    _check_leading(leading, False, "debounced")

    def deco(func: Callable[P, Any]) -> Debouncer[P]:
        return Debouncer(func, timeout)

    return deco(func) if func is not None else deco
