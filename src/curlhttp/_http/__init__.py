"""Shared curl transfer infrastructure."""

from .buffer import ResponseBuffer, current_buffer
from .clients import DEFAULT_TIMEOUT, create_curl_async_client, create_curl_client
from .config import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_EXECUTABLE,
    EXECUTABLE_ENV_VAR,
    CurlConfig,
    resolve_executable,
)
from .errors import CurlHTTPError, CurlNotFoundError, MalformedResponseError, TransferError
from .headers import extract_content_type, find_header_boundary, strip_cr
from .iter_coroutine import iter_coroutine
from .process import AsyncProcess, BaseProcess, BlockingProcess
from .retriever import AsyncCurlRetriever, CurlRetriever, build_request_options
from .transfer import Transfer, on_chunk, on_termination
from .transport import AsyncCurlTransport, CurlTransport

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "DEFAULT_EXECUTABLE",
    "DEFAULT_TIMEOUT",
    "EXECUTABLE_ENV_VAR",
    "iter_coroutine",
    "CurlConfig",
    "resolve_executable",
    "CurlHTTPError",
    "CurlNotFoundError",
    "MalformedResponseError",
    "TransferError",
    "find_header_boundary",
    "strip_cr",
    "extract_content_type",
    "ResponseBuffer",
    "current_buffer",
    "BaseProcess",
    "BlockingProcess",
    "AsyncProcess",
    "Transfer",
    "on_chunk",
    "on_termination",
    "CurlRetriever",
    "AsyncCurlRetriever",
    "build_request_options",
    "CurlTransport",
    "AsyncCurlTransport",
    "create_curl_client",
    "create_curl_async_client",
]
