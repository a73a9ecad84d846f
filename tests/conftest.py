"""
Pytest configuration and shared fixtures.
"""

import os
import sys
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

# Add repository root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


# ============================================================================
# Environment Fixtures
# ============================================================================

@pytest.fixture(autouse=True)
def mock_env(monkeypatch, tmp_path):
    """Isolate settings from any local config file or environment."""
    monkeypatch.setenv("NOTIFIER_CONFIG", str(tmp_path / "missing.yml"))
    for name in ("PORT", "HOST", "ENVIRONMENT", "LOG_DIR", "LOG_LEVEL", "BRANCHES_TO_HANDLE"):
        monkeypatch.delenv(name, raising=False)


# ============================================================================
# Settings Fixtures
# ============================================================================

@pytest.fixture
def settings():
    """Settings with a plain branch list and per-status channels."""
    from notifier.core.config import Settings

    return Settings(
        branches_to_handle=["main"],
        slack={
            "webhook_url": "https://hooks.slack.test/T/B/X",
            "username": "Codeship",
            "channel": "#a",
            "channel-error": "#b",
        },
        codeship={
            "project_id": "42",
            "api_key": "secret",
            "attempted_build_finds": 5,
            "not_found_interval": 3,
            "poll_interval": 10,
            "wait_timeout": 1500,
        },
    )


@pytest.fixture
def webhook_payload():
    """A Codeship webhook body for a successful build on main."""
    return {
        "build": {
            "branch": "main",
            "status": "success",
            "message": "fix bug\nmore",
            "project_name": "org/repo",
            "committer": "alice",
            "build_url": "http://x",
            "commit_url": "http://y",
            "commit_id": "abc123",
        }
    }


@pytest.fixture
def api_build():
    """Factory for Codeship v1 API build entries."""
    def _build(commit_id: str, status: str, build_id: int = 7) -> dict:
        return {
            "id": build_id,
            "uuid": "uuid-" + commit_id,
            "project_id": 42,
            "status": status,
            "github_username": "alice",
            "commit_id": commit_id,
            "message": "fix bug\nmore",
            "branch": "main",
        }

    return _build


# ============================================================================
# Mock Fixtures
# ============================================================================

@pytest.fixture
def mock_slack():
    """Create a mock SlackClient."""
    slack = MagicMock()
    slack.post = AsyncMock()
    return slack


@pytest.fixture
def mock_codeship():
    """Create a mock CodeshipClient."""
    codeship = MagicMock()
    codeship.find_build = AsyncMock(return_value=None)
    return codeship


@pytest.fixture
def mock_httpx_client():
    """Create a mock httpx AsyncClient."""
    with patch("httpx.AsyncClient") as mock:
        client_instance = AsyncMock()
        mock.return_value.__aenter__.return_value = client_instance
        yield client_instance


@pytest.fixture
def fake_clock():
    """A clock advanced only by the fake sleep."""
    class FakeClock:
        def __init__(self):
            self.now = 1000.0
            self.sleeps: list[float] = []

        def __call__(self) -> float:
            return self.now

        async def sleep(self, seconds: float) -> None:
            self.sleeps.append(seconds)
            self.now += seconds

    return FakeClock()
