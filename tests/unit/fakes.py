"""In-memory process double for driving transfers without spawning curl."""

from __future__ import annotations

from collections.abc import Iterable

from curlhttp._http.process import BaseProcess


class FakeProcess(BaseProcess):
    """Replays stdout chunks, then exits with ``exit_code`` once waited on."""

    def __init__(
        self,
        chunks: Iterable[bytes] = (),
        *,
        exit_code: int = 0,
        stderr: bytes = b"",
        pid: int = 4242,
    ) -> None:
        super().__init__(["curl", "--include", "https://example.com/"])
        self._chunks = list(chunks)
        self._exit_code = exit_code
        self._stderr = stderr
        self._pid = pid
        self._returncode: int | None = None

    @property
    def pid(self) -> int | None:
        return self._pid

    @property
    def returncode(self) -> int | None:
        return self._returncode

    def exit(self) -> None:
        self._returncode = self._exit_code

    async def read(self, size: int) -> bytes:
        if self._chunks:
            return self._chunks.pop(0)
        return b""

    async def wait(self) -> int:
        self.exit()
        return self._exit_code

    async def read_stderr(self) -> bytes:
        return self._stderr

    def kill(self) -> None:
        self._exit_code = -9
        self.exit()
