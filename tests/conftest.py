"""Test configuration and fixtures for restclient."""

import tempfile
from collections.abc import Generator
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from restclient.config import ENV_KEYS
from restclient.debug import set_debug_enabled

MULTIHEADER_RESPONSE = (
    "HTTP/1.1 200 OK\r\nContent-type: text/json\r\nContent-Type: application/json\r\n\r\nbody"
)
MULTISTATUS_RESPONSE = (
    "HTTP/1.1 100 Continue\r\n\r\n"
    "HTTP/1.1 200 OK\r\nCache-Control: no-cache\r\nContent-Type: application/json\r\n\r\nbody"
)
STATUS_ONLY_RESPONSE = "HTTP/1.1 100 Continue\r\n\r\n"


@dataclass
class RecordedRequest:
    method: str
    url: str
    headers: dict[str, str]
    body: str | bytes | None


@dataclass
class RecordingTransport:
    """Transport double that records requests and replays a canned raw response."""

    raw_response: str = 'HTTP/1.1 200 OK\r\nContent-Type: application/json\r\n\r\n{"ok": true}'
    requests: list[RecordedRequest] = field(default_factory=list)
    closed: bool = False

    def execute(self, method, url, headers, body) -> str:
        self.requests.append(RecordedRequest(method, url, dict(headers), body))
        return self.raw_response

    def close(self) -> None:
        self.closed = True

    @property
    def last(self) -> RecordedRequest:
        return self.requests[-1]


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, temp_dir: Path) -> Generator[None, None, None]:
    """Keep the user's environment and ~/.restclient out of every test."""
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(Path, "home", lambda: temp_dir)
    set_debug_enabled(False)
    yield
    set_debug_enabled(False)


@pytest.fixture
def transport() -> RecordingTransport:
    """Return a transport double answering with a small JSON response."""
    return RecordingTransport()
