"""These utilities may help when debugging message loops."""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from ._loop import MessageInfo, MessageLoop

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

__all__ = ["monitor_messages"]


def _default_message_monitor(info: MessageInfo) -> None:
    print(f"{info.loop.name}.update({info.msg!r})")


@contextmanager
def monitor_messages(
    loop: MessageLoop | None = None,
    logger: Callable[[MessageInfo], Any] = _default_message_monitor,
) -> Iterator[None]:
    """Context manager to print or collect messages processed by message loops.

    Parameters
    ----------
    loop : MessageLoop, optional
        The loop to monitor.  If None, all loops will be monitored.
    logger : Callable[[MessageInfo], None], optional
        A optional function to handle the logging of each message.  This function
        must take a single positional arg: a `MessageInfo` tuple holding the loop
        and the message.  The default logger simply prints the loop name and the
        message.
    """
    if loop is None:
        # install the hook globally
        before, MessageLoop._debug_hook = MessageLoop._debug_hook, logger
    else:
        loop._monitors.append(logger)

    try:
        yield
    finally:
        if loop is None:
            MessageLoop._debug_hook = before
        else:
            loop._monitors.remove(logger)
