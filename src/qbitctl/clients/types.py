"""Raw qBittorrent Web API types.

Field names follow the JSON keys the daemon sends. Every field has a default
and unknown keys are ignored, so records from older or newer daemon versions
still decode.
"""

from enum import IntEnum, StrEnum

import msgspec


class QbtTorrentState(StrEnum):
    """Torrent states reported by qBittorrent."""

    ERROR = "error"
    MISSING_FILES = "missingFiles"
    UPLOADING = "uploading"
    PAUSED_UP = "pausedUP"
    QUEUED_UP = "queuedUP"
    STALLED_UP = "stalledUP"
    CHECKING_UP = "checkingUP"
    FORCED_UP = "forcedUP"
    ALLOCATING = "allocating"
    DOWNLOADING = "downloading"
    META_DL = "metaDL"
    PAUSED_DL = "pausedDL"
    QUEUED_DL = "queuedDL"
    STALLED_DL = "stalledDL"
    CHECKING_DL = "checkingDL"
    FORCED_DL = "forcedDL"
    CHECKING_RESUME_DATA = "checkingResumeData"
    MOVING = "moving"
    UNKNOWN = "unknown"


class TorrentFilter(StrEnum):
    """Values accepted by the `filter` parameter of /torrents/info."""

    ALL = "all"
    DOWNLOADING = "downloading"
    SEEDING = "seeding"
    COMPLETED = "completed"
    PAUSED = "paused"
    ACTIVE = "active"
    INACTIVE = "inactive"
    RESUMED = "resumed"
    STALLED = "stalled"
    STALLED_UPLOADING = "stalled_uploading"
    STALLED_DOWNLOADING = "stalled_downloading"
    ERRORED = "errored"


class TorrentFilePriority(IntEnum):
    DO_NOT_DOWNLOAD = 0
    NORMAL = 1
    HIGH = 6
    MAXIMUM = 7


class TorrentPieceState(IntEnum):
    NOT_DOWNLOADED = 0
    DOWNLOADING = 1
    DOWNLOADED = 2


class TrackerStatus(IntEnum):
    DISABLED = 0
    NOT_CONTACTED = 1
    WORKING = 2
    UPDATING = 3
    NOT_WORKING = 4


class RawTorrent(msgspec.Struct):
    """One entry of /torrents/info."""

    hash: str = ""
    name: str = ""
    state: str = QbtTorrentState.UNKNOWN
    # Percentage, 0 to 100
    progress: float = 0.0
    size: int = 0
    total_size: int = 0
    dlspeed: int = 0
    upspeed: int = 0
    eta: int = 0
    added_on: int = 0
    completion_on: int = 0
    last_activity: int = 0
    priority: int = 0
    num_seeds: int = 0
    num_complete: int = 0
    num_leechs: int = 0
    num_incomplete: int = 0
    ratio: float = 0.0
    category: str = ""
    tags: str = ""
    save_path: str = ""
    uploaded: int = 0
    downloaded: int = 0
    amount_left: int = 0
    tracker: str = ""
    dl_limit: int = 0
    up_limit: int = 0
    seq_dl: bool = False
    f_l_piece_prio: bool = False
    force_start: bool = False
    super_seeding: bool = False
    auto_tmm: bool = False


class TorrentProperties(msgspec.Struct):
    """Generic properties of a torrent, from /torrents/properties."""

    save_path: str = ""
    creation_date: int = 0
    piece_size: int = 0
    comment: str = ""
    total_wasted: int = 0
    total_uploaded: int = 0
    total_uploaded_session: int = 0
    total_downloaded: int = 0
    total_downloaded_session: int = 0
    up_limit: int = 0
    dl_limit: int = 0
    time_elapsed: int = 0
    seeding_time: int = 0
    nb_connections: int = 0
    nb_connections_limit: int = 0
    share_ratio: float = 0.0
    addition_date: int = 0
    completion_date: int = 0
    created_by: str = ""
    dl_speed_avg: int = 0
    dl_speed: int = 0
    eta: int = 0
    last_seen: int = 0
    peers: int = 0
    peers_total: int = 0
    pieces_have: int = 0
    pieces_num: int = 0
    reannounce: int = 0
    seeds: int = 0
    seeds_total: int = 0
    total_size: int = 0
    up_speed_avg: int = 0
    up_speed: int = 0


class TorrentTracker(msgspec.Struct):
    """One entry of /torrents/trackers."""

    url: str = ""
    status: int = TrackerStatus.NOT_CONTACTED
    tier: int | str = 0
    num_peers: int = 0
    num_seeds: int = 0
    num_leeches: int = 0
    num_downloaded: int = 0
    msg: str = ""


class WebSeed(msgspec.Struct):
    url: str = ""


class TorrentFile(msgspec.Struct):
    """One entry of /torrents/files."""

    name: str = ""
    size: int = 0
    progress: float = 0.0
    priority: int = TorrentFilePriority.NORMAL
    is_seed: bool = False
    piece_range: list[int] = msgspec.field(default_factory=list)
    availability: float = 0.0
    index: int | None = None


class Category(msgspec.Struct, rename="camel"):
    """One value of /torrents/categories."""

    name: str = ""
    save_path: str = ""


class AddTorrentOptions(msgspec.Struct, omit_defaults=True):
    """Optional form fields for /torrents/add.

    Attributes are encoded under the daemon's own form field names. Fields
    left as None are not sent.
    """

    save_path: str | None = msgspec.field(default=None, name="savepath")
    cookie: str | None = None
    category: str | None = None
    tags: str | None = None
    skip_checking: bool | None = None
    paused: bool | None = None
    root_folder: bool | None = None
    rename: str | None = None
    up_limit: int | None = msgspec.field(default=None, name="upLimit")
    dl_limit: int | None = msgspec.field(default=None, name="dlLimit")
    ratio_limit: float | None = msgspec.field(default=None, name="ratioLimit")
    seeding_time_limit: int | None = msgspec.field(
        default=None, name="seedingTimeLimit"
    )
    auto_tmm: bool | None = msgspec.field(default=None, name="autoTMM")
    sequential_download: bool | None = msgspec.field(
        default=None, name="sequentialDownload"
    )
    first_last_piece_prio: bool | None = msgspec.field(
        default=None, name="firstLastPiecePrio"
    )
