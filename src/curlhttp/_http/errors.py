"""Exceptions raised by curl-backed transfers."""

from __future__ import annotations

from collections.abc import Sequence

# Exit codes documented in curl(1), EXIT CODES.
CURL_TIMEOUT = 28
CURL_DNS_FAILURE = 6
CURL_CONNECT_FAILURE = 7
CURL_EMPTY_REPLY = 52
CURL_RECV_FAILURE = 56
CURL_TLS_ERRORS = frozenset({35, 51, 58, 60})

_EXIT_CODE_MESSAGES = {
    CURL_DNS_FAILURE: "DNS lookup failed",
    CURL_CONNECT_FAILURE: "connect failed",
    CURL_TIMEOUT: "operation timed out",
    CURL_EMPTY_REPLY: "server returned nothing",
    CURL_RECV_FAILURE: "failure receiving network data",
}


class CurlHTTPError(Exception):
    """Base class for curlhttp errors."""


class CurlNotFoundError(CurlHTTPError):
    """The curl executable could not be located."""


class MalformedResponseError(CurlHTTPError):
    """The output of a finished transfer is not an HTTP response."""


class TransferError(CurlHTTPError):
    """The curl process of a transfer terminated abnormally."""

    def __init__(
        self,
        url: str,
        status: str,
        *,
        pid: int | None = None,
        command: Sequence[str] = (),
        returncode: int | None = None,
        stderr: str = "",
    ):
        self.url = url
        self.status = status
        self.pid = pid
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        process = f"curl process {self.pid}" if self.pid is not None else "curl process"
        message = f"{process} for {self.url} {self.status}"
        reason = describe_exit_code(self.returncode)
        if reason:
            message = f"{message} ({reason})"
        if self.stderr:
            message = f"{message}: {self.stderr}"
        return message


def describe_exit_code(returncode: int | None) -> str | None:
    """Return a short description for a curl exit code, if one is known."""
    if returncode is None or returncode <= 0:
        return None
    if returncode in CURL_TLS_ERRORS:
        return "TLS/SSL error"
    return _EXIT_CODE_MESSAGES.get(returncode)


__all__ = [
    "CurlHTTPError",
    "CurlNotFoundError",
    "MalformedResponseError",
    "TransferError",
    "describe_exit_code",
]
