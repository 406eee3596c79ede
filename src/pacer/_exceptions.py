from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ._loop import MessageLoop


class DispatchLoopError(Exception):
    """Error type raised when an exception occurs while processing a message."""

    __module__ = "pacer"

    def __init__(
        self,
        exc: BaseException,
        msg: Any = None,
        loop: MessageLoop | None = None,
    ) -> None:
        self.__cause__ = exc
        self.msg = msg
        self.loop = loop

        loop_name = "" if loop is None else f" in {loop.name!r}"
        text = (
            f"\n\nWhile processing message {msg!r}{loop_name}, "
            f"an error occurred: {type(exc).__name__}: {exc}"
        )
        pending = 0 if loop is None else loop.queued_count
        if pending:
            text += (
                f"\n{pending} message(s) remain queued and will be processed on the "
                "next send() or process_queued() call."
            )
        super().__init__(text)
