"""Shared fixtures for all tests."""

from collections.abc import Generator

import pytest


@pytest.fixture
def mock_env_clear(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Clear curlhttp-related environment variables for testing.

    This ensures tests don't pick up a curl executable configured in the environment.
    """
    for var in ["CURLHTTP_EXECUTABLE"]:
        monkeypatch.delenv(var, raising=False)
    yield
