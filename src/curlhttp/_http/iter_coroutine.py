"""Drive non-suspending coroutines to completion from synchronous code."""

from __future__ import annotations

import typing

_T = typing.TypeVar("_T")


def iter_coroutine(coro: typing.Coroutine[None, None, _T]) -> _T:
    """
    Run a coroutine that never suspends and return its result.

    The blocking retriever shares the async-def transfer pipeline with the
    asyncio retriever; over a BlockingProcess every await completes
    immediately, so a single send() finishes the whole transfer.

    Raises:
        RuntimeError: If the coroutine suspends.
    """
    try:
        coro.send(None)
    except StopIteration as ex:
        return ex.value  # type: ignore [no-any-return]
    else:
        raise RuntimeError(f"coroutine {coro!r} suspended; it needs an event loop")
    finally:
        coro.close()


__all__ = ["iter_coroutine"]
