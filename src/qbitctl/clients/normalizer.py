"""Conversion of raw qBittorrent records into the cross-client torrent model.

All functions in this module are pure: same input always produces same output,
no side effects, no I/O operations.
"""

from datetime import UTC, datetime

from .client_common import NormalizedTorrent, TorrentState
from .types import QbtTorrentState, RawTorrent

# State mapping for qBittorrent torrent client
QBITTORRENT_STATE_MAPPING = {
    QbtTorrentState.UPLOADING: TorrentState.SEEDING,
    QbtTorrentState.CHECKING_UP: TorrentState.SEEDING,
    QbtTorrentState.DOWNLOADING: TorrentState.DOWNLOADING,
    QbtTorrentState.CHECKING_DL: TorrentState.CHECKING,
    QbtTorrentState.ERROR: TorrentState.ERROR,
    QbtTorrentState.STALLED_DL: TorrentState.ERROR,
    QbtTorrentState.QUEUED_DL: TorrentState.QUEUED,
    QbtTorrentState.QUEUED_UP: TorrentState.QUEUED,
    QbtTorrentState.PAUSED_DL: TorrentState.PAUSED,
    QbtTorrentState.PAUSED_UP: TorrentState.PAUSED,
}


def normalize_state(state: str) -> TorrentState:
    """Map a qBittorrent state string to a TorrentState.

    Args:
        state: Raw state as reported by the daemon.

    Returns:
        TorrentState: Mapped state, UNKNOWN for anything not in the table.
    """
    return QBITTORRENT_STATE_MAPPING.get(state, TorrentState.UNKNOWN)


def epoch_to_iso(seconds: int | float) -> str:
    """Render epoch seconds as an ISO-8601 UTC timestamp with millisecond precision.

    Zero renders as 1970-01-01T00:00:00.000Z.
    """
    moment = datetime.fromtimestamp(seconds, tz=UTC)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def normalize_torrent(torrent: RawTorrent) -> NormalizedTorrent:
    """Convert a /torrents/info record into a NormalizedTorrent.

    Args:
        torrent: Raw record from the daemon. `progress` is a percentage.

    Returns:
        NormalizedTorrent: The record in the cross-client model.
    """
    return NormalizedTorrent(
        id=torrent.hash,
        name=torrent.name,
        state_message="",
        state=normalize_state(torrent.state),
        date_added=epoch_to_iso(torrent.added_on),
        date_completed=epoch_to_iso(torrent.completion_on),
        is_completed=torrent.progress >= 100,
        progress=torrent.progress,
        label=torrent.category,
        save_path=torrent.save_path,
        upload_speed=torrent.upspeed,
        download_speed=torrent.dlspeed,
        eta=torrent.eta,
        queue_position=torrent.priority,
        connected_peers=torrent.num_leechs,
        connected_seeds=torrent.num_seeds,
        total_peers=torrent.num_incomplete,
        total_seeds=torrent.num_complete,
        total_selected=torrent.size,
        total_size=torrent.total_size,
        total_uploaded=torrent.uploaded,
        total_downloaded=torrent.downloaded,
        ratio=torrent.ratio,
    )
