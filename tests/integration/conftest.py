"""Fixtures for integration tests running a scripted fake curl executable."""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pytest

FAKE_CURL_SOURCE = """#!{python}
import json
import os
import signal
import sys
import time

args = sys.argv[1:]
stdin = sys.stdin.buffer.read() if "@-" in args else b""
record = os.environ.get("FAKE_CURL_RECORD")
if record:
    with open(record, "a") as f:
        f.write(json.dumps({{"args": args, "stdin": stdin.decode("latin-1")}}) + "\\n")

with open(os.environ["FAKE_CURL_RESPONSE"], "rb") as f:
    data = f.read()
size = int(os.environ.get("FAKE_CURL_CHUNK", "7"))
out = sys.stdout.buffer
for i in range(0, len(data), size):
    out.write(data[i : i + size])
    out.flush()

time.sleep(float(os.environ.get("FAKE_CURL_SLEEP", "0")))
if os.environ.get("FAKE_CURL_KILL"):
    os.kill(os.getpid(), signal.SIGKILL)
sys.stderr.write(os.environ.get("FAKE_CURL_STDERR", ""))
sys.exit(int(os.environ.get("FAKE_CURL_EXIT", "0")))
"""


@dataclass
class FakeCurl:
    """A scripted stand-in for the curl executable."""

    path: Path
    response_path: Path
    record_path: Path
    monkeypatch: pytest.MonkeyPatch

    def respond(
        self,
        data: bytes,
        *,
        exit_code: int = 0,
        stderr: str = "",
        chunk_size: int = 7,
        kill: bool = False,
        sleep: float = 0,
    ) -> None:
        self.response_path.write_bytes(data)
        self.monkeypatch.setenv("FAKE_CURL_SLEEP", str(sleep))
        self.monkeypatch.setenv("FAKE_CURL_EXIT", str(exit_code))
        self.monkeypatch.setenv("FAKE_CURL_STDERR", stderr)
        self.monkeypatch.setenv("FAKE_CURL_CHUNK", str(chunk_size))
        if kill:
            self.monkeypatch.setenv("FAKE_CURL_KILL", "1")
        else:
            self.monkeypatch.delenv("FAKE_CURL_KILL", raising=False)

    def calls(self) -> list[dict[str, Any]]:
        if not self.record_path.exists():
            return []
        lines = self.record_path.read_text().splitlines()
        return [json.loads(line) for line in lines if line]


@pytest.fixture
def fake_curl(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, mock_env_clear: None
) -> FakeCurl:
    """Install an executable fake curl that replays a canned response."""
    path = tmp_path / "fake-curl"
    path.write_text(FAKE_CURL_SOURCE.format(python=sys.executable))
    path.chmod(0o755)
    response_path = tmp_path / "response.bin"
    record_path = tmp_path / "calls.jsonl"
    monkeypatch.setenv("FAKE_CURL_RESPONSE", str(response_path))
    monkeypatch.setenv("FAKE_CURL_RECORD", str(record_path))
    fake = FakeCurl(path, response_path, record_path, monkeypatch)
    fake.respond(b"HTTP/1.1 200 OK\r\nContent-Length: 0\r\n\r\n")
    return fake


