"""Async client for the qBittorrent Web API."""

from .clients import (
    AddTorrentOptions,
    AllClientData,
    AuthError,
    NormalizedTorrent,
    NotFoundError,
    QBittorrent,
    SessionExpiredError,
    TorrentClientError,
    TorrentState,
    TransportError,
    UploadRejected,
)
from .config import ClientConfig

__all__ = [
    "AddTorrentOptions",
    "AllClientData",
    "AuthError",
    "ClientConfig",
    "NormalizedTorrent",
    "NotFoundError",
    "QBittorrent",
    "SessionExpiredError",
    "TorrentClientError",
    "TorrentState",
    "TransportError",
    "UploadRejected",
]
