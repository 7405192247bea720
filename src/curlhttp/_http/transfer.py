"""Per-transfer state, the streaming header filter and the termination sentinel."""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from .buffer import ResponseBuffer
from .errors import TransferError
from .headers import extract_content_type, find_header_boundary, strip_cr
from .process import BaseProcess

logger = logging.getLogger(__name__)

_FINISHED_RE = re.compile(r"^finished\b")

# Longest blank-line marker is b"\r\n\r\n"; a marker completed by a new chunk
# starts at most this many bytes before the end of the previous pending data.
_MARKER_OVERLAP = 3


@dataclass(eq=False)
class Transfer:
    """One URL retrieval: one curl process feeding one response buffer."""

    url: str
    buffer: ResponseBuffer
    callback: Callable[..., Any] | None = None
    args: tuple[Any, ...] = ()
    head_complete: bytes | None = None
    content_type: str | None = None
    process: BaseProcess | None = None
    stderr: bytes = b""
    _pending: bytearray = field(default_factory=bytearray, repr=False)
    _completed: bool = field(default=False, repr=False)
    _task: asyncio.Task[ResponseBuffer] | None = field(default=None, repr=False)

    @property
    def completed(self) -> bool:
        """True once the sentinel has acted on the process termination."""
        return self._completed

    async def wait(self) -> ResponseBuffer:
        """Wait until the transfer finishes and return its buffer.

        Raises:
            TransferError: If the curl process terminated abnormally.
        """
        if self._task is not None:
            return await self._task
        return self.buffer


def on_chunk(transfer: Transfer, chunk: bytes) -> bytes:
    """Filter one chunk of curl output and return the bytes to forward.

    Until the end of the header block is seen, carriage returns are stripped
    from forwarded bytes. The first time the blank line is found the header
    block and its content type are recorded; from then on chunks pass through
    unchanged so binary bodies stay intact.
    """
    if transfer.head_complete is not None:
        return chunk

    previous = len(transfer._pending)
    transfer._pending += chunk
    end = find_header_boundary(transfer._pending, max(0, previous - _MARKER_OVERLAP))
    if end is None:
        return strip_cr(chunk)

    # The marker ends inside this chunk since no marker was found before it.
    split = end - previous
    transfer.head_complete = strip_cr(bytes(transfer._pending[:end]))
    transfer.content_type = extract_content_type(transfer.head_complete)
    transfer.buffer.content_type = transfer.content_type
    transfer._pending = bytearray()
    logger.debug(
        "Header block of %s complete (%d bytes, content type %s)",
        transfer.url,
        len(transfer.head_complete),
        transfer.content_type,
    )
    return strip_cr(chunk[:split]) + chunk[split:]


def on_termination(transfer: Transfer, status: str) -> None:
    """Handle a termination notification for the transfer's process.

    Notifications that arrive while the process is still live, or after the
    transfer already completed, are ignored. A ``finished`` status runs the
    callback once with the transfer buffer as the current buffer; any other
    status raises TransferError and the callback is never run.
    """
    process = transfer.process
    if process is None or process.is_alive() or transfer._completed:
        return

    transfer._completed = True
    if not _FINISHED_RE.match(status):
        error = TransferError(
            transfer.url,
            status.strip(),
            pid=process.pid,
            command=process.args,
            returncode=process.returncode,
            stderr=transfer.stderr.decode("utf-8", errors="replace").strip(),
        )
        logger.error("%s", error)
        raise error

    logger.debug("Transfer of %s finished (%d bytes)", transfer.url, len(transfer.buffer.data))
    if transfer.callback is not None:
        with transfer.buffer:
            transfer.callback(*transfer.args)


async def pump(transfer: Transfer, process: BaseProcess, chunk_size: int) -> ResponseBuffer:
    """Feed all process output through the filter, then notify the sentinel."""
    transfer.process = process
    while True:
        chunk = await process.read(chunk_size)
        if not chunk:
            break
        transfer.buffer.feed(on_chunk(transfer, chunk))
    await process.wait()
    transfer.stderr = await process.read_stderr()
    on_termination(transfer, process.status)
    return transfer.buffer


def new_transfer(
    url: str,
    callback: Callable[..., Any] | None,
    args: Sequence[Any],
    buffer: ResponseBuffer | None,
) -> Transfer:
    """Create a transfer, reusing and resetting ``buffer`` when given."""
    if buffer is None:
        buffer = ResponseBuffer(url)
    else:
        buffer.reset(url)
    return Transfer(url=url, buffer=buffer, callback=callback, args=tuple(args))


__all__ = ["Transfer", "on_chunk", "on_termination", "pump", "new_transfer"]
