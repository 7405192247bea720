"""Transfer launchers: spawn curl and wire its output to a Transfer."""

from __future__ import annotations

import asyncio
import functools
import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any

import httpx

from .buffer import ResponseBuffer
from .config import CurlConfig, resolve_executable
from .errors import TransferError
from .iter_coroutine import iter_coroutine
from .process import AsyncProcess, BlockingProcess
from .transfer import Transfer, new_transfer, pump

logger = logging.getLogger(__name__)

HeaderTypes = Mapping[str, str] | Sequence[tuple[str, str]] | httpx.Headers
TimeoutTypes = float | Mapping[str, float | None] | None

# curl computes these itself from the body it sends.
_SKIPPED_HEADERS = frozenset({"content-length", "transfer-encoding"})


def build_request_options(
    method: str = "GET",
    headers: HeaderTypes | None = None,
    *,
    has_body: bool = False,
    timeout: TimeoutTypes = None,
) -> list[str]:
    """Translate request method, headers, body and timeout into curl options.

    A numeric timeout bounds the whole transfer (``--max-time``). A mapping in
    httpx's ``{"connect": ..., "read": ...}`` form sets ``--connect-timeout``
    and aborts when no data arrives for ``read`` seconds.
    """
    options: list[str] = []
    method = method.upper()
    if method == "HEAD":
        options.append("--head")
    elif method != "GET" or has_body:
        options.extend(["--request", method])

    for raw_name, raw_value in httpx.Headers(headers).raw:
        name = raw_name.decode("latin-1")
        value = raw_value.decode("latin-1")
        if name.lower() in _SKIPPED_HEADERS:
            continue
        # "Name;" is curl's syntax for sending a header with an empty value.
        options.extend(["--header", f"{name}: {value}" if value else f"{name};"])

    if has_body:
        options.extend(["--data-binary", "@-"])

    if isinstance(timeout, (int, float)):
        options.extend(["--max-time", _format_seconds(timeout)])
    elif timeout is not None:
        connect = timeout.get("connect")
        read = timeout.get("read")
        if connect is not None:
            options.extend(["--connect-timeout", _format_seconds(connect)])
        if read is not None:
            options.extend(["--speed-limit", "1", "--speed-time", str(max(1, round(read)))])
    return options


def _format_seconds(value: float) -> str:
    return f"{value:g}"


class _BaseRetriever:
    """
    Shared launcher logic for sync and async retrievers.

    The curl executable is resolved once, when the retriever is created, so a
    missing executable fails before any transfer is attempted.
    """

    def __init__(self, config: CurlConfig | None = None) -> None:
        self._config = config or CurlConfig()
        self._executable = resolve_executable(self._config.executable)

    @property
    def executable(self) -> str:
        return self._executable

    @property
    def config(self) -> CurlConfig:
        return self._config

    def _prepare(
        self,
        url: str | httpx.URL,
        callback: Callable[..., Any] | None,
        args: Sequence[Any],
        buffer: ResponseBuffer | None,
        *,
        method: str,
        headers: HeaderTypes | None,
        content: bytes | None,
        timeout: TimeoutTypes,
    ) -> tuple[Transfer, list[str]]:
        url = str(url)
        # Callback is bound before the process exists so it can't finish first.
        transfer = new_transfer(url, callback, args, buffer)
        options = build_request_options(method, headers, has_body=bool(content), timeout=timeout)
        command = [self._executable, *self._config.build_args(url, options)]
        return transfer, command


class CurlRetriever(_BaseRetriever):
    """Blocking retriever: runs curl through subprocess.Popen."""

    def retrieve(
        self,
        url: str | httpx.URL,
        callback: Callable[..., Any] | None = None,
        args: Sequence[Any] = (),
        buffer: ResponseBuffer | None = None,
        *,
        method: str = "GET",
        headers: HeaderTypes | None = None,
        content: bytes | None = None,
        timeout: TimeoutTypes = None,
    ) -> Transfer:
        """
        Retrieve ``url`` and return the finished transfer.

        The callback has already been invoked when this returns.

        Raises:
            TransferError: If curl terminated abnormally.
        """
        transfer, command = self._prepare(
            url,
            callback,
            args,
            buffer,
            method=method,
            headers=headers,
            content=content,
            timeout=timeout,
        )
        process = BlockingProcess.spawn(command, content or None)
        logger.debug("Started curl process %s for %s", process.pid, transfer.url)
        iter_coroutine(pump(transfer, process, self._config.chunk_size))
        return transfer


class AsyncCurlRetriever(_BaseRetriever):
    """Asynchronous retriever: runs curl as an asyncio subprocess."""

    def retrieve(
        self,
        url: str | httpx.URL,
        callback: Callable[..., Any] | None = None,
        args: Sequence[Any] = (),
        buffer: ResponseBuffer | None = None,
        *,
        method: str = "GET",
        headers: HeaderTypes | None = None,
        content: bytes | None = None,
        timeout: TimeoutTypes = None,
    ) -> Transfer:
        """
        Start retrieving ``url`` and return the in-flight transfer.

        Must be called with a running event loop. The callback is invoked once
        the curl process finishes normally; ``await transfer.wait()`` to block
        on completion or to receive the TransferError of a failed process.
        """
        transfer, command = self._prepare(
            url,
            callback,
            args,
            buffer,
            method=method,
            headers=headers,
            content=content,
            timeout=timeout,
        )
        loop = asyncio.get_running_loop()
        task = loop.create_task(self._run(transfer, command, content or None))
        task.add_done_callback(functools.partial(_retrieve_task_result, transfer.url))
        transfer._task = task
        return transfer

    async def _run(
        self, transfer: Transfer, command: list[str], content: bytes | None
    ) -> ResponseBuffer:
        process = await AsyncProcess.spawn(command, content)
        logger.debug("Started curl process %s for %s", process.pid, transfer.url)
        try:
            return await pump(transfer, process, self._config.chunk_size)
        except asyncio.CancelledError:
            process.kill()
            # Reap the killed process even though this task is being cancelled.
            await asyncio.shield(process.wait())
            logger.debug("Cancelled curl process %s for %s", process.pid, transfer.url)
            raise


def _retrieve_task_result(url: str, task: asyncio.Task[ResponseBuffer]) -> None:
    """Mark a finished transfer task's exception as retrieved.

    Callers that rely on the callback alone never await ``wait()``. A
    TransferError is already logged by the sentinel; anything else is logged here.
    """
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None and not isinstance(exc, TransferError):
        logger.error("Transfer of %s failed", url, exc_info=exc)


__all__ = [
    "CurlRetriever",
    "AsyncCurlRetriever",
    "build_request_options",
]
