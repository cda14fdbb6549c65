"""Shared fixtures for client tests."""

from collections.abc import AsyncIterator

import pytest
from aiohttp.test_utils import TestServer
from torf import Torrent

from qbitctl import QBittorrent

from .mock_daemon import MockDaemon


@pytest.fixture
async def daemon(anyio_backend: str) -> AsyncIterator[MockDaemon]:
    """Start a mock daemon on a local port."""
    mock = MockDaemon()
    server = TestServer(mock.app())
    await server.start_server()
    mock.base_url = str(server.make_url("/"))
    yield mock
    await server.close()


@pytest.fixture
async def client(daemon: MockDaemon) -> AsyncIterator[QBittorrent]:
    """Create a client pointed at the mock daemon, not yet logged in."""
    qbt = QBittorrent(
        base_url=daemon.base_url,
        username=daemon.username,
        password=daemon.password,
    )
    yield qbt
    await qbt.close()


@pytest.fixture
def sample_torrent(tmp_path) -> Torrent:
    """Create a sample Torrent object for testing."""
    content_dir = tmp_path / "test_album"
    content_dir.mkdir()
    (content_dir / "01 - Track.flac").write_bytes(b"\x00" * 1024)
    t = Torrent(
        path=str(content_dir), trackers=["https://tracker.example.com/announce"]
    )
    t.generate()
    return t
