"""httpx transports that perform requests with the curl executable."""

from __future__ import annotations

import httpx

from .buffer import ResponseBuffer
from .config import CurlConfig
from .errors import (
    CURL_CONNECT_FAILURE,
    CURL_DNS_FAILURE,
    CURL_EMPTY_REPLY,
    CURL_RECV_FAILURE,
    CURL_TIMEOUT,
    CURL_TLS_ERRORS,
    MalformedResponseError,
    TransferError,
)
from .retriever import AsyncCurlRetriever, CurlRetriever


def _map_transfer_error(exc: TransferError, request: httpx.Request) -> httpx.TransportError:
    """Translate a failed curl process into the matching httpx exception."""
    message = str(exc)
    code = exc.returncode
    if code == CURL_TIMEOUT:
        return httpx.ReadTimeout(message, request=request)
    if code in (CURL_DNS_FAILURE, CURL_CONNECT_FAILURE) or code in CURL_TLS_ERRORS:
        return httpx.ConnectError(message, request=request)
    if code == CURL_EMPTY_REPLY:
        return httpx.RemoteProtocolError(message, request=request)
    if code == CURL_RECV_FAILURE:
        return httpx.ReadError(message, request=request)
    return httpx.NetworkError(message, request=request)


def _to_response(buffer: ResponseBuffer, request: httpx.Request) -> httpx.Response:
    try:
        return buffer.to_response(request)
    except MalformedResponseError as exc:
        raise httpx.RemoteProtocolError(str(exc), request=request) from exc


class CurlTransport(httpx.BaseTransport):
    """
    Synchronous httpx transport backed by curl.

    Use it where the built-in TLS stack is unusable:

        client = httpx.Client(transport=CurlTransport())
    """

    def __init__(self, config: CurlConfig | None = None) -> None:
        self._retriever = CurlRetriever(config)

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        content = request.read()
        try:
            transfer = self._retriever.retrieve(
                request.url,
                method=request.method,
                headers=request.headers,
                content=content,
                timeout=request.extensions.get("timeout"),
            )
        except TransferError as exc:
            raise _map_transfer_error(exc, request) from exc
        return _to_response(transfer.buffer, request)


class AsyncCurlTransport(httpx.AsyncBaseTransport):
    """Asynchronous httpx transport backed by curl."""

    def __init__(self, config: CurlConfig | None = None) -> None:
        self._retriever = AsyncCurlRetriever(config)

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        content = await request.aread()
        transfer = self._retriever.retrieve(
            request.url,
            method=request.method,
            headers=request.headers,
            content=content,
            timeout=request.extensions.get("timeout"),
        )
        try:
            buffer = await transfer.wait()
        except TransferError as exc:
            raise _map_transfer_error(exc, request) from exc
        return _to_response(buffer, request)


__all__ = ["CurlTransport", "AsyncCurlTransport"]
