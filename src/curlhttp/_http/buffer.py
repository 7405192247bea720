"""Response buffer: accumulates raw transfer output and parses the HTTP head."""

from __future__ import annotations

import contextvars
import re
from typing import Any

import httpx

from .errors import MalformedResponseError

_BLOCK_END_RE = re.compile(rb"\r?\n\r?\n")
_LINE_SPLIT_RE = re.compile(rb"\r?\n")

_current_buffer: contextvars.ContextVar[ResponseBuffer] = contextvars.ContextVar(
    "current_buffer"
)


def current_buffer() -> ResponseBuffer:
    """Return the buffer of the transfer whose callback is running.

    Raises:
        LookupError: If called outside a transfer callback.
    """
    return _current_buffer.get()


class ResponseBuffer:
    """
    Binary-safe accumulator for the output of one transfer.

    Bytes are appended untouched. Once a complete header block is present the
    status line and headers are parsed; interim blocks (1xx responses and
    proxy ``Connection established`` replies) are skipped so that ``headers``
    and ``body`` describe the final response.

    ``content_type`` is different: the streaming filter sets it from the first
    header block of the transfer. When an interim block comes first it is
    that block's value (usually None), not the final response's. Read the
    final ``Content-Type`` from ``headers`` in that case.
    """

    def __init__(self, url: str = "") -> None:
        self._tokens: list[contextvars.Token[ResponseBuffer]] = []
        self.reset(url)

    def reset(self, url: str | None = None) -> None:
        """Discard accumulated output so the buffer can back a new transfer."""
        if url is not None:
            self.url = url
        self._data = bytearray()
        self._scan_offset = 0
        self._body_offset: int | None = None
        self._malformed = False
        self.http_version: str | None = None
        self.status_code: int | None = None
        self.reason_phrase = ""
        self.headers: list[tuple[str, str]] = []
        self.content_type: str | None = None

    @property
    def data(self) -> bytes:
        return bytes(self._data)

    @property
    def headers_complete(self) -> bool:
        return self._body_offset is not None

    @property
    def body(self) -> bytes:
        if self._body_offset is None:
            return b""
        return bytes(self._data[self._body_offset :])

    def feed(self, data: bytes) -> None:
        """Append forwarded transfer output and advance header parsing."""
        self._data += data
        if self._body_offset is None and not self._malformed:
            self._parse_head()

    def _parse_head(self) -> None:
        while True:
            match = _BLOCK_END_RE.search(self._data, self._scan_offset)
            if match is None:
                return
            block = bytes(self._data[self._scan_offset : match.start()])
            parsed = _parse_block(block)
            if parsed is None:
                self._malformed = True
                return
            version, status_code, reason, headers = parsed
            self._scan_offset = match.end()
            if _is_interim(status_code, reason):
                continue
            self.http_version = version
            self.status_code = status_code
            self.reason_phrase = reason
            self.headers = headers
            self._body_offset = match.end()
            return

    def to_response(self, request: httpx.Request | None = None) -> httpx.Response:
        """Build an httpx.Response from the accumulated output.

        Raises:
            MalformedResponseError: If no complete status line and header block
                was received.
        """
        if self.status_code is None:
            snippet = bytes(self._data[:200])
            raise MalformedResponseError(f"Invalid HTTP response from {self.url}: {snippet!r}")
        extensions: dict[str, Any] = {
            "http_version": (self.http_version or "HTTP/1.1").encode("ascii"),
            "reason_phrase": self.reason_phrase.encode("latin-1"),
        }
        return httpx.Response(
            self.status_code,
            headers=self.headers,
            stream=httpx.ByteStream(self.body),
            request=request,
            extensions=extensions,
        )

    def __enter__(self) -> ResponseBuffer:
        self._tokens.append(_current_buffer.set(self))
        return self

    def __exit__(self, exc_type: Any, exc_value: Any, traceback: Any) -> None:
        _current_buffer.reset(self._tokens.pop())

    def __repr__(self) -> str:
        return f"<ResponseBuffer url={self.url!r} size={len(self._data)}>"


def _parse_block(block: bytes) -> tuple[str, int, str, list[tuple[str, str]]] | None:
    """Parse a status line plus header lines; None if it is not an HTTP head."""
    lines = _LINE_SPLIT_RE.split(block)
    status_line = lines[0].decode("latin-1")
    parts = status_line.split(None, 2)
    if len(parts) < 2 or not parts[0].startswith("HTTP/") or not parts[1].isdigit():
        return None
    version = parts[0]
    status_code = int(parts[1])
    reason = parts[2] if len(parts) > 2 else ""

    headers: list[tuple[str, str]] = []
    for raw_line in lines[1:]:
        line = raw_line.decode("latin-1")
        if line[:1] in (" ", "\t") and headers:
            # obs-fold continuation
            name, value = headers[-1]
            headers[-1] = (name, f"{value} {line.strip()}")
            continue
        name, sep, value = line.partition(":")
        if not sep:
            continue
        headers.append((name.strip(), value.strip()))
    return version, status_code, reason, headers


def _is_interim(status_code: int, reason: str) -> bool:
    if 100 <= status_code < 200 and status_code != 101:
        return True
    return 200 <= status_code < 300 and reason.lower() == "connection established"


__all__ = ["ResponseBuffer", "current_buffer"]
