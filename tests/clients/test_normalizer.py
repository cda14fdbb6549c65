"""Unit tests for the qBittorrent state normalizer."""

import pytest

from qbitctl.clients import QbtTorrentState, RawTorrent, TorrentState
from qbitctl.clients.normalizer import (
    QBITTORRENT_STATE_MAPPING,
    epoch_to_iso,
    normalize_state,
    normalize_torrent,
)

# --- Tests for normalize_state ---


class TestNormalizeState:
    """Tests for normalize_state."""

    @pytest.mark.parametrize(
        ("raw_state", "expected"),
        [
            ("uploading", TorrentState.SEEDING),
            ("checkingUP", TorrentState.SEEDING),
            ("downloading", TorrentState.DOWNLOADING),
            ("checkingDL", TorrentState.CHECKING),
            ("error", TorrentState.ERROR),
            ("stalledDL", TorrentState.ERROR),
            ("queuedDL", TorrentState.QUEUED),
            ("queuedUP", TorrentState.QUEUED),
            ("pausedDL", TorrentState.PAUSED),
            ("pausedUP", TorrentState.PAUSED),
        ],
    )
    def test_mapped_states(self, raw_state: str, expected: TorrentState) -> None:
        """Should map every state of the table to its target."""
        assert normalize_state(raw_state) == expected

    @pytest.mark.parametrize(
        "raw_state",
        [
            "missingFiles",
            "stalledUP",
            "forcedUP",
            "allocating",
            "metaDL",
            "forcedDL",
            "checkingResumeData",
            "moving",
            "unknown",
            "stoppedUP",
            "",
        ],
    )
    def test_unlisted_states_are_unknown(self, raw_state: str) -> None:
        """Should fall back to UNKNOWN for states outside the table."""
        assert normalize_state(raw_state) == TorrentState.UNKNOWN

    def test_mapping_is_total(self) -> None:
        """Should yield exactly one TorrentState for every daemon state."""
        for raw_state in QbtTorrentState:
            assert isinstance(normalize_state(raw_state), TorrentState)

    def test_each_target_reached(self) -> None:
        """Should reach every normalized state except UNKNOWN through the table."""
        assert set(QBITTORRENT_STATE_MAPPING.values()) == set(TorrentState) - {
            TorrentState.UNKNOWN
        }


# --- Tests for epoch_to_iso ---


class TestEpochToIso:
    """Tests for epoch_to_iso."""

    def test_zero_is_epoch_start(self) -> None:
        """Should render zero as the start of the epoch."""
        assert epoch_to_iso(0) == "1970-01-01T00:00:00.000Z"

    def test_renders_utc_milliseconds(self) -> None:
        """Should render seconds in UTC with millisecond precision."""
        assert epoch_to_iso(1_700_000_000) == "2023-11-14T22:13:20.000Z"


# --- Tests for normalize_torrent ---


class TestNormalizeTorrent:
    """Tests for normalize_torrent."""

    @pytest.mark.parametrize(
        ("progress", "completed"),
        [(0, False), (50, False), (99, False), (99.9, False), (100, True), (150, True)],
    )
    def test_is_completed(self, progress: float, completed: bool) -> None:
        """Should be complete exactly when progress reaches 100."""
        torrent = normalize_torrent(RawTorrent(hash="abc", progress=progress))

        assert torrent.is_completed is completed
        assert torrent.progress == progress

    def test_field_mapping(self) -> None:
        """Should copy counters and names into the normalized fields."""
        raw = RawTorrent(
            hash="abc123",
            name="Test Album",
            state="uploading",
            progress=100,
            size=900,
            total_size=1000,
            dlspeed=0,
            upspeed=2048,
            eta=8640000,
            added_on=1_700_000_000,
            completion_on=1_700_003_600,
            priority=0,
            num_seeds=4,
            num_complete=40,
            num_leechs=2,
            num_incomplete=20,
            ratio=1.5,
            category="music",
            save_path="/downloads/",
            uploaded=1500,
            downloaded=1000,
        )

        torrent = normalize_torrent(raw)

        assert torrent.id == "abc123"
        assert torrent.name == "Test Album"
        assert torrent.state == TorrentState.SEEDING
        assert torrent.state_message == ""
        assert torrent.date_added == "2023-11-14T22:13:20.000Z"
        assert torrent.date_completed == "2023-11-14T23:13:20.000Z"
        assert torrent.label == "music"
        assert torrent.save_path == "/downloads/"
        assert torrent.upload_speed == 2048
        assert torrent.download_speed == 0
        assert torrent.eta == 8640000
        assert torrent.queue_position == 0
        assert torrent.connected_peers == 2
        assert torrent.connected_seeds == 4
        assert torrent.total_peers == 20
        assert torrent.total_seeds == 40
        assert torrent.total_selected == 900
        assert torrent.total_size == 1000
        assert torrent.total_uploaded == 1500
        assert torrent.total_downloaded == 1000
        assert torrent.ratio == 1.5

    def test_never_completed_has_epoch_timestamp(self) -> None:
        """Should still render a timestamp when completion_on is zero."""
        torrent = normalize_torrent(RawTorrent(hash="abc", progress=10))

        assert torrent.date_completed == "1970-01-01T00:00:00.000Z"
        assert torrent.is_completed is False

    def test_empty_category_is_kept(self) -> None:
        """Should pass an empty category through as an empty label."""
        assert normalize_torrent(RawTorrent(hash="abc", category="")).label == ""
