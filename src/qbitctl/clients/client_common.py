"""
Common torrent client functionality.

Provides the cross-client torrent model, the exception hierarchy and the
abstract base class that torrent client implementations follow.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from enum import StrEnum
from typing import Any

import msgspec

ALL_TORRENTS = "all"


def normalize_hashes(hashes: str | Iterable[str]) -> str:
    """Join one or more hashes into the pipe-delimited form the Web API expects.

    Args:
        hashes: A single hash, the literal "all", or an iterable of hashes.

    Returns:
        str: Hashes separated by "|". Strings are returned unchanged.
    """
    if isinstance(hashes, str):
        return hashes
    return "|".join(hashes)


class TorrentState(StrEnum):
    """Torrent state shared by all client implementations."""

    UNKNOWN = "unknown"
    DOWNLOADING = "downloading"
    SEEDING = "seeding"
    CHECKING = "checking"
    ERROR = "error"
    QUEUED = "queued"
    PAUSED = "paused"


class TorrentClientError(Exception):
    """Base class for all errors raised by torrent clients."""


class AuthError(TorrentClientError):
    """Exception raised when the daemon does not hand out a valid session."""


class NotFoundError(TorrentClientError):
    """Exception raised when a lookup by hash matches no torrent."""


class UploadRejected(TorrentClientError):
    """Exception raised when the daemon refuses a new torrent."""


class TransportError(TorrentClientError):
    """Exception raised for non-2xx responses and network failures.

    Attributes:
        status: HTTP status code, or None when no response was received.
        body: Start of the response body, if any.
    """

    def __init__(self, message: str, status: int | None = None, body: str = ""):
        super().__init__(message)
        self.status = status
        self.body = body


class SessionExpiredError(TransportError):
    """Exception raised when an authenticated call is answered with 403."""


class NormalizedTorrent(msgspec.Struct):
    """Represents a torrent in the cross-client model."""

    id: str
    name: str = ""
    state_message: str = ""
    state: TorrentState = TorrentState.UNKNOWN
    date_added: str = ""
    date_completed: str = ""
    is_completed: bool = False
    progress: float = 0.0
    label: str = ""
    save_path: str = ""
    upload_speed: int = 0
    download_speed: int = 0
    eta: int = 0
    queue_position: int = 0
    connected_peers: int = 0
    connected_seeds: int = 0
    total_peers: int = 0
    total_seeds: int = 0
    total_selected: int = 0
    total_size: int = 0
    total_uploaded: int = 0
    total_downloaded: int = 0
    ratio: float = 0.0


class Label(msgspec.Struct):
    """A label (category) and the number of torrents carrying it."""

    id: str
    name: str
    count: int = 0


class AllClientData(msgspec.Struct):
    """Snapshot of every torrent and label known to a client."""

    torrents: list[NormalizedTorrent] = msgspec.field(default_factory=list)
    labels: list[Label] = msgspec.field(default_factory=list)


class TorrentClient(ABC):
    """Abstract base class for torrent clients."""

    @abstractmethod
    async def get_torrent(self, torrent_hash: str) -> NormalizedTorrent:
        """Get a single torrent.

        Args:
            torrent_hash (str): Torrent hash.

        Returns:
            NormalizedTorrent: The torrent in the cross-client model.

        Raises:
            NotFoundError: If no torrent has this hash.
        """

    @abstractmethod
    async def get_all_data(self) -> AllClientData:
        """Get every torrent and label from the client.

        Returns:
            AllClientData: Normalized torrents and label counts.
        """

    @abstractmethod
    async def pause_torrent(self, hashes: str | list[str]) -> bool:
        """Pause one or more torrents, or "all"."""

    @abstractmethod
    async def resume_torrent(self, hashes: str | list[str]) -> bool:
        """Resume one or more torrents, or "all"."""

    @abstractmethod
    async def remove_torrent(
        self, hashes: str | list[str], delete_files: bool = True
    ) -> bool:
        """Remove one or more torrents, or "all".

        Args:
            hashes (str | list[str]): Torrent hash(es) or "all".
            delete_files (bool): Whether downloaded data is deleted too.

        Returns:
            bool: True once the daemon accepted the request.
        """

    @abstractmethod
    async def normalized_add_torrent(
        self, torrent: str | bytes, options: Any = None
    ) -> NormalizedTorrent:
        """Add a torrent and return it in the cross-client model.

        Args:
            torrent (str | bytes): Path to a .torrent file, base64 string or
                raw metainfo bytes.
            options: Client-specific add options.

        Returns:
            NormalizedTorrent: The newly added torrent.
        """
