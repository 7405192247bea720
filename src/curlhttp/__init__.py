"""Retrieve HTTP(S) resources through the curl executable."""

from ._http import (
    AsyncCurlRetriever,
    AsyncCurlTransport,
    CurlConfig,
    CurlHTTPError,
    CurlNotFoundError,
    CurlRetriever,
    CurlTransport,
    MalformedResponseError,
    ResponseBuffer,
    Transfer,
    TransferError,
    create_curl_async_client,
    create_curl_client,
    current_buffer,
)

__version__ = "0.1.0"

__all__ = [
    "CurlConfig",
    "CurlRetriever",
    "AsyncCurlRetriever",
    "CurlTransport",
    "AsyncCurlTransport",
    "create_curl_client",
    "create_curl_async_client",
    "ResponseBuffer",
    "current_buffer",
    "Transfer",
    "CurlHTTPError",
    "CurlNotFoundError",
    "MalformedResponseError",
    "TransferError",
]
