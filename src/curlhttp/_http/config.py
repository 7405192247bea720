"""Configuration for curl-backed transfers."""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass, field

from .errors import CurlNotFoundError

DEFAULT_EXECUTABLE = "curl"
DEFAULT_CHUNK_SIZE = 65536
EXECUTABLE_ENV_VAR = "CURLHTTP_EXECUTABLE"

# Status line and headers on stdout, errors on stderr, nothing else.
# URL globbing is off so one transfer always fetches exactly one URL.
BASE_ARGS: tuple[str, ...] = (
    "--silent",
    "--show-error",
    "--globoff",
    "--include",
    "--output",
    "-",
)


@dataclass
class CurlConfig:
    """Configuration for launching the curl executable."""

    executable: str | None = None
    extra_args: list[str] = field(default_factory=list)
    chunk_size: int = DEFAULT_CHUNK_SIZE

    def build_args(self, url: str, options: list[str] | None = None) -> list[str]:
        """Build the argument vector (without the executable) for one transfer.

        The URL is passed through ``--url`` so it is never read as an option.
        """
        return [*BASE_ARGS, *self.extra_args, *(options or []), "--url", url]


def resolve_executable(executable: str | None = None) -> str:
    """Resolve the curl executable from argument or environment, raising if not found."""
    candidate = executable or os.getenv(EXECUTABLE_ENV_VAR) or DEFAULT_EXECUTABLE
    resolved = shutil.which(candidate)
    if not resolved:
        raise CurlNotFoundError(
            f"Cannot find curl executable {candidate!r}. "
            f"Install curl, pass executable=... or set {EXECUTABLE_ENV_VAR}."
        )
    return resolved


__all__ = [
    "CurlConfig",
    "BASE_ARGS",
    "DEFAULT_CHUNK_SIZE",
    "DEFAULT_EXECUTABLE",
    "EXECUTABLE_ENV_VAR",
    "resolve_executable",
]
