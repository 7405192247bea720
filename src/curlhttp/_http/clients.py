"""Client factory functions for creating httpx clients that use curl."""

from __future__ import annotations

from typing import Any

import httpx

from .config import CurlConfig
from .transport import AsyncCurlTransport, CurlTransport

DEFAULT_TIMEOUT = 60.0


def create_curl_client(
    config: CurlConfig | None = None,
    timeout: float | None = None,
    base_url: str | None = None,
    **kwargs: Any,
) -> httpx.Client:
    """Create a sync httpx client whose requests are performed by curl.

    Args:
        config: curl configuration. Defaults to CurlConfig().
        timeout: Request timeout in seconds. Defaults to DEFAULT_TIMEOUT.
        base_url: Base URL for relative request URLs.
        **kwargs: Passed through to httpx.Client.

    Returns:
        An httpx.Client using CurlTransport.

    Raises:
        CurlNotFoundError: If the curl executable cannot be located.
    """
    effective_timeout = timeout if timeout is not None else DEFAULT_TIMEOUT
    kwargs["transport"] = CurlTransport(config)
    kwargs["timeout"] = httpx.Timeout(effective_timeout)
    if base_url is not None:
        kwargs["base_url"] = base_url
    return httpx.Client(**kwargs)


def create_curl_async_client(
    config: CurlConfig | None = None,
    timeout: float | None = None,
    base_url: str | None = None,
    **kwargs: Any,
) -> httpx.AsyncClient:
    """Create an async httpx client whose requests are performed by curl.

    Args:
        config: curl configuration. Defaults to CurlConfig().
        timeout: Request timeout in seconds. Defaults to DEFAULT_TIMEOUT.
        base_url: Base URL for relative request URLs.
        **kwargs: Passed through to httpx.AsyncClient.

    Returns:
        An httpx.AsyncClient using AsyncCurlTransport.

    Raises:
        CurlNotFoundError: If the curl executable cannot be located.
    """
    effective_timeout = timeout if timeout is not None else DEFAULT_TIMEOUT
    kwargs["transport"] = AsyncCurlTransport(config)
    kwargs["timeout"] = httpx.Timeout(effective_timeout)
    if base_url is not None:
        kwargs["base_url"] = base_url
    return httpx.AsyncClient(**kwargs)


__all__ = ["DEFAULT_TIMEOUT", "create_curl_client", "create_curl_async_client"]
