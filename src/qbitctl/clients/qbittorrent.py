"""
qBittorrent client implementation.
Provides control of a qBittorrent daemon via its Web API (v2).
"""

import base64
import binascii
import io
import logging
import os
from typing import Any

import msgspec
import torf
from aiohttp import ClientSession
from anyio import Path
from asyncer import asyncify
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from .. import logger
from ..config import ClientConfig
from ..logger import LOGGER_NAME
from .client_common import (
    AllClientData,
    Label,
    NormalizedTorrent,
    NotFoundError,
    TorrentClient,
    UploadRejected,
    normalize_hashes,
)
from .normalizer import normalize_torrent
from .session import Session
from .types import (
    AddTorrentOptions,
    Category,
    RawTorrent,
    TorrentFile,
    TorrentFilePriority,
    TorrentFilter,
    TorrentPieceState,
    TorrentProperties,
    TorrentTracker,
    WebSeed,
)

TORRENT_CONTENT_TYPE = "application/x-bittorrent"
# Body of a 200 response from /torrents/add that added nothing
UPLOAD_FAILED_BODY = "Fails."

Hashes = str | list[str]

# A freshly added torrent may take a moment to show up in /torrents/info
_lookup_retry = retry(
    stop=stop_after_attempt(5),
    wait=wait_fixed(0.5),
    before_sleep=before_sleep_log(logging.getLogger(LOGGER_NAME), logging.DEBUG),
    retry=retry_if_exception_type(NotFoundError),
    reraise=True,
)


async def read_torrent_input(torrent: str | bytes) -> bytes:
    """Resolve the accepted torrent inputs to metainfo bytes.

    Args:
        torrent (str | bytes): Path to an existing .torrent file, a base64
            encoded .torrent, or the raw metainfo.

    Returns:
        bytes: Torrent file content.

    Raises:
        ValueError: If a string is neither an existing file nor valid base64.
    """
    if isinstance(torrent, bytes | bytearray):
        return bytes(torrent)

    if await asyncify(os.path.isfile)(torrent):
        return await Path(torrent).read_bytes()

    try:
        # Line-wrapped base64 is accepted
        return base64.b64decode("".join(torrent.split()), validate=True)
    except binascii.Error as e:
        raise ValueError(
            "Torrent is neither an existing file nor base64 encoded data"
        ) from e


def read_info_hash(torrent_data: bytes) -> str:
    """Get the info hash of a torrent from its metainfo.

    Raises:
        ValueError: If the data is not valid torrent metainfo.
    """
    try:
        return torf.Torrent.read_stream(io.BytesIO(torrent_data)).infohash
    except torf.TorfError as e:
        raise ValueError(f"Invalid torrent metainfo: {e}") from e


class QBittorrent(TorrentClient):
    """qBittorrent torrent client implementation."""

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        session: ClientSession | None = None,
        **options: Any,
    ) -> None:
        """Create a client.

        Args:
            config: Connection settings. Defaults to a local daemon.
            session: aiohttp session to use instead of creating one.
            **options: ClientConfig fields overriding those of config.
        """
        if config is None:
            config = ClientConfig(**options)
        elif options:
            config = msgspec.structs.replace(config, **options)
        self.session = Session(config, session)

    @property
    def config(self) -> ClientConfig:
        return self.session.config

    async def close(self) -> None:
        await self.session.close()

    async def __aenter__(self) -> "QBittorrent":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # region Session

    async def login(self) -> bool:
        """Log in explicitly. Other calls log in on demand."""
        return await self.session.login()

    def logout(self) -> bool:
        return self.session.logout()

    async def request(self, path: str, method: str = "GET", **kwargs: Any) -> Any:
        """Send an authenticated request. See Session.request."""
        return await self.session.request(path, method, **kwargs)

    # endregion

    # region Application

    async def version(self) -> str:
        """Get application version, e.g. v4.1.3."""
        return await self.request("/app/version", json=False)

    async def api_version(self) -> str:
        """Get Web API version, e.g. 2.0."""
        return await self.request("/app/webapiVersion", json=False)

    # endregion

    # region Torrent listing

    async def list_torrents(
        self,
        hashes: Hashes | None = None,
        filter: TorrentFilter | str | None = None,
        category: str | None = None,
    ) -> list[RawTorrent]:
        """Get the torrent list.

        Args:
            hashes: Only include these torrents.
            filter: Only include torrents in this state group.
            category: Only include torrents in this category. An empty string
                selects torrents without a category, None any category.

        Returns:
            list[RawTorrent]: Torrents as reported by the daemon.
        """
        params: dict[str, Any] = {}
        if hashes:
            params["hashes"] = normalize_hashes(hashes)
        if filter:
            params["filter"] = filter
        if category is not None:
            params["category"] = category

        return await self.request(
            "/torrents/info", params=params, response_type=list[RawTorrent]
        )

    async def get_torrent(self, torrent_hash: str) -> NormalizedTorrent:
        # An empty hash would list every torrent
        if not torrent_hash:
            raise NotFoundError("Torrent not found: empty hash")

        wanted = torrent_hash.lower()
        for torrent in await self.list_torrents(torrent_hash):
            if torrent.hash.lower() == wanted:
                return normalize_torrent(torrent)
        raise NotFoundError(f"Torrent not found: {torrent_hash}")

    async def get_all_data(self) -> AllClientData:
        result = AllClientData()
        labels: dict[str, Label] = {}
        for raw_torrent in await self.list_torrents():
            torrent = normalize_torrent(raw_torrent)
            result.torrents.append(torrent)

            if torrent.label:
                if torrent.label not in labels:
                    labels[torrent.label] = Label(id=torrent.label, name=torrent.label)
                labels[torrent.label].count += 1

        result.labels = list(labels.values())
        return result

    # endregion

    # region Torrent details

    async def torrent_properties(self, torrent_hash: str) -> TorrentProperties:
        return await self.request(
            "/torrents/properties",
            params={"hash": torrent_hash},
            response_type=TorrentProperties,
        )

    async def torrent_trackers(self, torrent_hash: str) -> list[TorrentTracker]:
        return await self.request(
            "/torrents/trackers",
            params={"hash": torrent_hash},
            response_type=list[TorrentTracker],
        )

    async def torrent_web_seeds(self, torrent_hash: str) -> list[WebSeed]:
        return await self.request(
            "/torrents/webseeds",
            params={"hash": torrent_hash},
            response_type=list[WebSeed],
        )

    async def torrent_files(self, torrent_hash: str) -> list[TorrentFile]:
        return await self.request(
            "/torrents/files",
            params={"hash": torrent_hash},
            response_type=list[TorrentFile],
        )

    async def torrent_piece_states(self, torrent_hash: str) -> list[TorrentPieceState]:
        return await self.request(
            "/torrents/pieceStates",
            params={"hash": torrent_hash},
            response_type=list[TorrentPieceState],
        )

    async def torrent_piece_hashes(self, torrent_hash: str) -> list[str]:
        """Get the hashes of all pieces of a torrent, in order."""
        return await self.request(
            "/torrents/pieceHashes",
            params={"hash": torrent_hash},
            response_type=list[str],
        )

    async def set_file_priority(
        self,
        torrent_hash: str,
        file_ids: str | int | list[str] | list[int],
        priority: TorrentFilePriority | int,
    ) -> bool:
        """Set the download priority of files within a torrent.

        Args:
            torrent_hash: Torrent hash.
            file_ids: File index or indices, as listed by torrent_files().
            priority: New priority.
        """
        if isinstance(file_ids, int):
            file_ids = str(file_ids)
        elif not isinstance(file_ids, str):
            file_ids = [str(file_id) for file_id in file_ids]

        await self.request(
            "/torrents/filePrio",
            params={
                "hash": torrent_hash,
                "id": normalize_hashes(file_ids),
                "priority": int(priority),
            },
        )
        return True

    # endregion

    # region Torrent mutation

    async def set_torrent_location(self, hashes: Hashes, location: str) -> bool:
        await self.request(
            "/torrents/setLocation",
            "POST",
            data={"hashes": normalize_hashes(hashes), "location": location},
        )
        return True

    async def set_torrent_name(self, torrent_hash: str, name: str) -> bool:
        await self.request(
            "/torrents/rename",
            "POST",
            data={"hash": torrent_hash, "name": name},
        )
        return True

    async def categories(self) -> dict[str, Category]:
        """Get all categories, keyed by name."""
        return await self.request(
            "/torrents/categories", response_type=dict[str, Category]
        )

    async def create_category(self, category: str, save_path: str = "") -> bool:
        await self.request(
            "/torrents/createCategory",
            "POST",
            data={"category": category, "savePath": save_path},
        )
        return True

    async def remove_category(self, categories: str | list[str]) -> bool:
        if not isinstance(categories, str):
            categories = "\n".join(categories)
        await self.request(
            "/torrents/removeCategories", "POST", data={"categories": categories}
        )
        return True

    async def set_torrent_category(self, hashes: Hashes, category: str) -> bool:
        await self.request(
            "/torrents/setCategory",
            "POST",
            data={"hashes": normalize_hashes(hashes), "category": category},
        )
        return True

    async def pause_torrent(self, hashes: Hashes) -> bool:
        await self.request(
            "/torrents/pause", params={"hashes": normalize_hashes(hashes)}
        )
        return True

    async def resume_torrent(self, hashes: Hashes) -> bool:
        await self.request(
            "/torrents/resume", params={"hashes": normalize_hashes(hashes)}
        )
        return True

    async def remove_torrent(self, hashes: Hashes, delete_files: bool = True) -> bool:
        await self.request(
            "/torrents/delete",
            params={"hashes": normalize_hashes(hashes), "deleteFiles": delete_files},
        )
        return True

    async def recheck_torrent(self, hashes: Hashes) -> bool:
        await self.request(
            "/torrents/recheck", params={"hashes": normalize_hashes(hashes)}
        )
        return True

    async def reannounce_torrent(self, hashes: Hashes) -> bool:
        await self.request(
            "/torrents/reannounce", params={"hashes": normalize_hashes(hashes)}
        )
        return True

    # endregion

    # region Adding torrents

    async def add_torrent(
        self,
        torrent: str | bytes,
        filename: str = "torrent",
        options: AddTorrentOptions | None = None,
    ) -> bool:
        """Upload a torrent file.

        Args:
            torrent (str | bytes): Path to an existing .torrent file, a base64
                encoded .torrent, or the raw metainfo.
            filename (str): File name sent with the upload.
            options (AddTorrentOptions | None): Extra form fields.

        Returns:
            bool: True if the daemon accepted the torrent.

        Raises:
            UploadRejected: If the daemon answers "Fails.".
        """
        torrent_data = await read_torrent_input(torrent)
        return await self._add(
            files={"torrents": (filename, torrent_data, TORRENT_CONTENT_TYPE)},
            options=options,
        )

    async def add_magnet(
        self, magnet: str, options: AddTorrentOptions | None = None
    ) -> bool:
        """Add a torrent from a magnet link or URL.

        Raises:
            UploadRejected: If the daemon answers "Fails.".
        """
        return await self._add(fields={"urls": magnet}, options=options)

    async def normalized_add_torrent(
        self, torrent: str | bytes, options: AddTorrentOptions | None = None
    ) -> NormalizedTorrent:
        torrent_data = await read_torrent_input(torrent)
        info_hash = await asyncify(read_info_hash)(torrent_data)
        await self.add_torrent(torrent_data, options=options)
        return await self._wait_for_torrent(info_hash)

    async def _add(
        self,
        fields: dict[str, str] | None = None,
        files: dict[str, tuple[str, bytes, str]] | None = None,
        options: AddTorrentOptions | None = None,
    ) -> bool:
        data = dict(fields or {})
        if options is not None:
            data.update(msgspec.to_builtins(options))

        result = await self.request(
            "/torrents/add", "POST", data=data, files=files, json=False
        )
        if result.strip() == UPLOAD_FAILED_BODY:
            logger.error("qBittorrent rejected the torrent")
            raise UploadRejected("Failed to add torrent")
        return True

    @_lookup_retry
    async def _wait_for_torrent(self, info_hash: str) -> NormalizedTorrent:
        return await self.get_torrent(info_hash)

    # endregion

    # region Trackers

    async def add_trackers(self, torrent_hash: str, urls: str | list[str]) -> bool:
        if not isinstance(urls, str):
            urls = "\n".join(urls)
        await self.request(
            "/torrents/addTrackers", params={"hash": torrent_hash, "urls": urls}
        )
        return True

    async def edit_trackers(
        self, torrent_hash: str, orig_url: str, new_url: str
    ) -> bool:
        await self.request(
            "/torrents/editTrackers",
            params={"hash": torrent_hash, "origUrl": orig_url, "newUrl": new_url},
        )
        return True

    async def remove_trackers(self, torrent_hash: str, urls: str | list[str]) -> bool:
        await self.request(
            "/torrents/removeTrackers",
            params={"hash": torrent_hash, "urls": normalize_hashes(urls)},
        )
        return True

    # endregion

    # region Queue

    async def queue_up(self, hashes: Hashes) -> bool:
        await self.request(
            "/torrents/increasePrio", params={"hashes": normalize_hashes(hashes)}
        )
        return True

    async def queue_down(self, hashes: Hashes) -> bool:
        await self.request(
            "/torrents/decreasePrio", params={"hashes": normalize_hashes(hashes)}
        )
        return True

    async def top_priority(self, hashes: Hashes) -> bool:
        await self.request(
            "/torrents/topPrio", params={"hashes": normalize_hashes(hashes)}
        )
        return True

    async def bottom_priority(self, hashes: Hashes) -> bool:
        await self.request(
            "/torrents/bottomPrio", params={"hashes": normalize_hashes(hashes)}
        )
        return True

    # endregion
