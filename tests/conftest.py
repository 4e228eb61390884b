# =============================================================================
# tests/conftest.py
# Pytest Configuration and Fixtures
# =============================================================================

import pytest
from typing import Dict, List, Optional
from unittest.mock import MagicMock

import requests

from mobile_core.config import CoreConfig
from mobile_core.models import Post, User
from mobile_core.offline.reachability import RawConnectivity


# =============================================================================
# FAKE COLLABORATORS
# =============================================================================

class FakeReachabilitySource:
    """Reachability source driven by the test."""

    def __init__(self, current: RawConnectivity = RawConnectivity.WIFI):
        self.current = current
        self.listener = None
        self.cancelled = False
        self.check_calls = 0

    def check(self) -> RawConnectivity:
        self.check_calls += 1
        return self.current

    def listen(self, callback) -> None:
        self.listener = callback

    def cancel(self) -> None:
        self.cancelled = True
        self.listener = None

    def emit(self, *events: RawConnectivity) -> None:
        for event in events:
            self.current = event
            self.listener(event)


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================

@pytest.fixture
def sample_post():
    """A post shaped like the API's /posts/1"""
    return Post(id=1, title="a", description="b", user_id=2)


@pytest.fixture
def sample_posts():
    return [
        Post(id=i, title=f"title {i}", description=f"body {i}", user_id=i % 3)
        for i in range(1, 6)
    ]


@pytest.fixture
def sample_user():
    return User(id=2, name="Ervin Howell", username="Antonette", email="shanna@melissa.tv")


# =============================================================================
# CONFIG / STORAGE FIXTURES
# =============================================================================

@pytest.fixture
def storage_dir(tmp_path):
    path = tmp_path / "documents"
    path.mkdir()
    return path


@pytest.fixture
def core_config(storage_dir):
    return CoreConfig(
        base_url="https://api.example.test",
        request_timeout=5.0,
        storage_dir=storage_dir,
    )


@pytest.fixture
def store(storage_dir):
    from mobile_core.offline.local_store import LocalStore

    local_store = LocalStore(storage_dir)
    local_store.init()
    yield local_store
    local_store.close()


@pytest.fixture
def reachability():
    return FakeReachabilitySource()


# =============================================================================
# MOCK FIXTURES
# =============================================================================

def make_response(
    status: int = 200,
    chunks: Optional[List[bytes]] = None,
    headers: Optional[Dict[str, str]] = None,
    url: str = "https://api.example.test/",
):
    """Build a mocked streaming requests.Response"""
    chunks = chunks if chunks is not None else []
    response = MagicMock(spec=requests.Response)
    response.status_code = status
    response.url = url
    if headers is None:
        headers = {"Content-Length": str(sum(len(c) for c in chunks))}
    response.headers = headers
    response.iter_content.return_value = iter(chunks)
    return response


@pytest.fixture
def mock_session():
    """Mock requests.Session whose request() returns an empty 200 by default"""
    session = MagicMock(spec=requests.Session)
    session.request.return_value = make_response(chunks=[b"{}"])
    return session


@pytest.fixture
def http_service(mock_session, core_config):
    from mobile_core.network.http_service import HttpService

    return HttpService.from_config(core_config, session=mock_session)
