"""Header block helpers: boundary detection, CR stripping, content type."""

from __future__ import annotations

import re

_BOUNDARY_RE = re.compile(rb"\r?\n\r?\n")
_CONTENT_TYPE_RE = re.compile(rb"^content-type:[ \t]*(\S+)", re.IGNORECASE | re.MULTILINE)


def find_header_boundary(data: bytes | bytearray, start: int = 0) -> int | None:
    """Return the offset just past the first blank line in ``data``, or None.

    A blank line is ``\\r?\\n\\r?\\n`` so CRLF, LF and mixed endings all match.
    ``start`` lets callers skip a prefix already known not to hold a marker.
    """
    match = _BOUNDARY_RE.search(data, start)
    if match is None:
        return None
    return match.end()


def strip_cr(data: bytes) -> bytes:
    """Remove every carriage return from ``data``."""
    return data.replace(b"\r", b"")


def extract_content_type(header_block: bytes) -> str | None:
    """Return the first whitespace-delimited token of the first Content-Type value."""
    match = _CONTENT_TYPE_RE.search(header_block)
    if match is None:
        return None
    return match.group(1).decode("latin-1")


__all__ = ["find_header_boundary", "strip_cr", "extract_content_type"]
