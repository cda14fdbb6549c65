"""Torrent client implementations for qbitctl."""

from .client_common import (
    ALL_TORRENTS,
    AllClientData,
    AuthError,
    Label,
    NormalizedTorrent,
    NotFoundError,
    SessionExpiredError,
    TorrentClient,
    TorrentClientError,
    TorrentState,
    TransportError,
    UploadRejected,
    normalize_hashes,
)
from .normalizer import normalize_state, normalize_torrent
from .qbittorrent import QBittorrent
from .session import Session
from .types import (
    AddTorrentOptions,
    Category,
    QbtTorrentState,
    RawTorrent,
    TorrentFile,
    TorrentFilePriority,
    TorrentFilter,
    TorrentPieceState,
    TorrentProperties,
    TorrentTracker,
    TrackerStatus,
    WebSeed,
)

__all__ = [
    "ALL_TORRENTS",
    "AddTorrentOptions",
    "AllClientData",
    "AuthError",
    "Category",
    "Label",
    "NormalizedTorrent",
    "NotFoundError",
    "QBittorrent",
    "QbtTorrentState",
    "RawTorrent",
    "Session",
    "SessionExpiredError",
    "TorrentClient",
    "TorrentClientError",
    "TorrentFile",
    "TorrentFilePriority",
    "TorrentFilter",
    "TorrentPieceState",
    "TorrentProperties",
    "TorrentState",
    "TorrentTracker",
    "TrackerStatus",
    "TransportError",
    "UploadRejected",
    "WebSeed",
    "normalize_hashes",
    "normalize_state",
    "normalize_torrent",
]
