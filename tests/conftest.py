"""Pytest configuration and shared fixtures.

Every test gets its own SQLite database under ``tmp_path``.  Network
access is never needed: probes are replaced by ``FakeProbe``.
"""

import os
import tempfile

# Keep the import-time application away from the user's real database.
os.environ.setdefault("DATABASE_URL", os.path.join(tempfile.mkdtemp(prefix="webworm-tests-"), "bookmarks.db"))

import pytest
from fastapi.testclient import TestClient

from webworm_api.app.core.store import BookmarkStore
from webworm_api.app.main import create_app
from webworm_api.app.services.bookmark_service import BookmarkService


class FakeProbe:
    """Probe stand-in answering from a fixed set of available URLs."""

    def __init__(self, available=()):
        self.available = set(available)
        self.calls = []

    def is_available(self, url: str) -> bool:
        self.calls.append(url)
        return url in self.available


def make_entry(name: str = "One Piece", episode: int = 12, url: str | None = None) -> dict:
    return {
        "name": name,
        "url": url or f"https://example.com/watch/episode-{episode}",
        "episode": episode,
    }


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "bookmarks.db"


@pytest.fixture
def store(db_path):
    return BookmarkStore(db_path, lock_timeout=30)


@pytest.fixture
def probe():
    return FakeProbe()


@pytest.fixture
def service(store, probe):
    return BookmarkService(store, probe)


@pytest.fixture
def client(db_path, probe):
    app = create_app(db_path, probe=probe)
    with TestClient(app) as test_client:
        yield test_client
