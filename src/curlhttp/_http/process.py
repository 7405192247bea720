"""Process wrappers for running curl with sync and async I/O."""

from __future__ import annotations

import abc
import asyncio
import os
import signal
import subprocess
import tempfile
from collections.abc import Sequence
from typing import IO


def describe_status(returncode: int | None) -> str:
    """Describe a process state the way termination notifications report it."""
    if returncode is None:
        return "run"
    if returncode == 0:
        return "finished"
    if returncode < 0:
        try:
            name = signal.Signals(-returncode).name
        except ValueError:
            name = str(-returncode)
        return f"killed by signal {name}"
    return f"exited abnormally with code {returncode}"


class BaseProcess(abc.ABC):
    """
    Abstract handle on a running curl process.

    All I/O methods are declared async. The blocking implementation never
    suspends, which lets it run under iter_coroutine().
    """

    def __init__(self, args: Sequence[str]) -> None:
        self.args = list(args)

    @property
    @abc.abstractmethod
    def pid(self) -> int | None: ...

    @property
    @abc.abstractmethod
    def returncode(self) -> int | None: ...

    def is_alive(self) -> bool:
        return self.returncode is None

    @property
    def status(self) -> str:
        return describe_status(self.returncode)

    @abc.abstractmethod
    async def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes of stdout; b"" at end of output."""
        ...

    @abc.abstractmethod
    async def wait(self) -> int:
        """Wait for the process to exit and return its exit code."""
        ...

    @abc.abstractmethod
    async def read_stderr(self) -> bytes: ...

    @abc.abstractmethod
    def kill(self) -> None: ...


class BlockingProcess(BaseProcess):
    """curl run through subprocess.Popen. Methods are async def but don't suspend."""

    def __init__(self, args: Sequence[str], popen: subprocess.Popen[bytes], stderr: IO[bytes]):
        super().__init__(args)
        self._popen = popen
        self._stderr = stderr

    @classmethod
    def spawn(cls, args: Sequence[str], stdin_data: bytes | None = None) -> BlockingProcess:
        # A temporary file instead of a pipe so a chatty stderr can't block stdout.
        stderr = tempfile.TemporaryFile()
        popen = subprocess.Popen(
            list(args),
            stdin=subprocess.PIPE if stdin_data is not None else subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=stderr,
        )
        if stdin_data is not None:
            assert popen.stdin is not None
            try:
                popen.stdin.write(stdin_data)
            except BrokenPipeError:
                # curl exited early; its exit status reports why.
                pass
            finally:
                popen.stdin.close()
        return cls(args, popen, stderr)

    @property
    def pid(self) -> int | None:
        return self._popen.pid

    @property
    def returncode(self) -> int | None:
        return self._popen.poll()

    async def read(self, size: int) -> bytes:
        assert self._popen.stdout is not None
        return os.read(self._popen.stdout.fileno(), size)

    async def wait(self) -> int:
        returncode = self._popen.wait()
        if self._popen.stdout is not None:
            self._popen.stdout.close()
        return returncode

    async def read_stderr(self) -> bytes:
        self._stderr.seek(0)
        data = self._stderr.read()
        self._stderr.close()
        return data

    def kill(self) -> None:
        if self._popen.poll() is None:
            self._popen.kill()


class AsyncProcess(BaseProcess):
    """curl run through asyncio.create_subprocess_exec."""

    def __init__(self, args: Sequence[str], process: asyncio.subprocess.Process):
        super().__init__(args)
        self._process = process

    @classmethod
    async def spawn(cls, args: Sequence[str], stdin_data: bytes | None = None) -> AsyncProcess:
        process = await asyncio.create_subprocess_exec(
            *args,
            stdin=asyncio.subprocess.PIPE if stdin_data is not None else asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        if stdin_data is not None:
            assert process.stdin is not None
            try:
                process.stdin.write(stdin_data)
                await process.stdin.drain()
            except (BrokenPipeError, ConnectionResetError):
                # curl exited early; its exit status reports why.
                pass
            finally:
                process.stdin.close()
        return cls(args, process)

    @property
    def pid(self) -> int | None:
        return self._process.pid

    @property
    def returncode(self) -> int | None:
        return self._process.returncode

    async def read(self, size: int) -> bytes:
        assert self._process.stdout is not None
        return await self._process.stdout.read(size)

    async def wait(self) -> int:
        return await self._process.wait()

    async def read_stderr(self) -> bytes:
        assert self._process.stderr is not None
        return await self._process.stderr.read()

    def kill(self) -> None:
        if self._process.returncode is None:
            self._process.kill()


__all__ = ["BaseProcess", "BlockingProcess", "AsyncProcess", "describe_status"]
