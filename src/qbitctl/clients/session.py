"""
Session handling for the qBittorrent Web API.

Owns the aiohttp ClientSession and the SID cookie, logs in lazily before the
first authenticated call and attaches the cookie to every request.
"""

from collections.abc import Mapping
from http.cookies import CookieError, SimpleCookie
from typing import Any

import anyio
import msgspec
from aiohttp import ClientError, ClientSession, ClientTimeout, DummyCookieJar, FormData
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
)

from .. import logger
from ..config import ClientConfig
from .client_common import AuthError, SessionExpiredError, TransportError

SESSION_COOKIE = "SID"

# (filename, content, content type) of a multipart file part
FilePart = tuple[str, bytes, str]


def encode_value(value: Any) -> str:
    """Render a parameter value the way the Web API parses it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def encode_params(params: Mapping[str, Any] | None) -> dict[str, str]:
    """Stringify query or form parameters, dropping those set to None."""
    if not params:
        return {}
    return {key: encode_value(value) for key, value in params.items() if value is not None}


class Session:
    """Authenticated connection to one qBittorrent daemon.

    The session token is the value of the SID cookie handed out by
    /auth/login. It is absent until the first request and cleared by logout().
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        client: ClientSession | None = None,
    ) -> None:
        self.config = config or ClientConfig()
        self._client = client
        self._owns_client = client is None
        self._sid: str | None = None
        self._login_lock = anyio.Lock()

    @property
    def sid(self) -> str | None:
        """Current session token, or None when not authenticated."""
        return self._sid

    @property
    def client(self) -> ClientSession:
        """Get or create the aiohttp session."""
        if self._client is None or self._client.closed:
            # The SID header is set explicitly, so the jar must not add cookies
            self._client = ClientSession(
                timeout=self._timeout, cookie_jar=DummyCookieJar()
            )
            self._owns_client = True
        return self._client

    @property
    def _timeout(self) -> ClientTimeout:
        return ClientTimeout(total=self.config.timeout or None)

    async def close(self) -> None:
        """Close the aiohttp ClientSession if this object created it."""
        if self._owns_client and self._client is not None and not self._client.closed:
            await self._client.close()

    async def __aenter__(self) -> "Session":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def login(self) -> bool:
        """Log in with the configured credentials and store the session token.

        Returns:
            bool: True once a session token is stored.

        Raises:
            AuthError: If the daemon sets no cookie or a cookie other than SID.
            TransportError: If the request fails or returns a non-2xx status.
        """
        url = self.config.api_url("/auth/login")
        form = {"username": self.config.username, "password": self.config.password}
        logger.debug("Logging in to qBittorrent at %s", url)

        try:
            async with self.client.post(
                url,
                data=form,
                allow_redirects=False,
                proxy=self.config.proxy,
                timeout=self._timeout,
            ) as response:
                status = response.status
                body = await response.text()
                set_cookies = response.headers.getall("Set-Cookie", [])
        except (ClientError, TimeoutError) as e:
            raise TransportError(f"Login request failed: {e}") from e

        if not 200 <= status < 300:
            raise TransportError(
                f"Login failed with HTTP {status}", status=status, body=body[:500]
            )

        if not set_cookies:
            raise AuthError("Cookie not found. Auth Failed.")

        cookie = SimpleCookie()
        try:
            cookie.load(set_cookies[0])
        except CookieError as e:
            raise AuthError("Invalid cookie") from e

        morsel = next(iter(cookie.values()), None)
        if morsel is None or morsel.key != SESSION_COOKIE:
            raise AuthError("Invalid cookie")

        self._sid = morsel.value
        logger.info("Logged in to qBittorrent as '%s'", self.config.username)
        return True

    def logout(self) -> bool:
        """Forget the session token. No request is sent to the daemon."""
        self._sid = None
        logger.debug("Cleared qBittorrent session")
        return True

    async def request(
        self,
        path: str,
        method: str = "GET",
        params: Mapping[str, Any] | None = None,
        data: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        json: bool = True,
        files: Mapping[str, FilePart] | None = None,
        response_type: Any = Any,
    ) -> Any:
        """Send an authenticated request to an API endpoint.

        Logs in first when no session token is present. When the daemon
        answers 403 and relogin_on_forbidden is set, the token is dropped and
        the request is sent once more after a fresh login.

        Args:
            path: Endpoint path below the API prefix, e.g. /torrents/info.
            method: HTTP method.
            params: Query parameters. None values are dropped.
            data: Form fields. Sent form-encoded, or as multipart when files
                are given.
            headers: Extra headers, merged over the session cookie header.
            json: Decode the response as JSON when True, return text otherwise.
            files: Multipart file parts keyed by form field name.
            response_type: Type the JSON body is decoded into.

        Returns:
            Any: Decoded JSON (None for an empty body) or response text.

        Raises:
            AuthError: If the implicit login fails.
            TransportError: On network failure, non-2xx status or invalid JSON.
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(2 if self.config.relogin_on_forbidden else 1),
            retry=retry_if_exception_type(SessionExpiredError),
            before_sleep=self._forget_session,
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                return await self._send(
                    path, method, params, data, headers, json, files, response_type
                )

    async def _ensure_session(self) -> None:
        if self._sid is not None:
            return
        # Concurrent callers wait for a single login
        async with self._login_lock:
            if self._sid is None:
                await self.login()

    def _forget_session(self, retry_state: RetryCallState) -> None:
        logger.warning("qBittorrent answered 403, logging in again")
        self._sid = None

    async def _send(
        self,
        path: str,
        method: str,
        params: Mapping[str, Any] | None,
        data: Mapping[str, Any] | None,
        headers: Mapping[str, str] | None,
        json: bool,
        files: Mapping[str, FilePart] | None,
        response_type: Any,
    ) -> Any:
        await self._ensure_session()

        url = self.config.api_url(path)
        request_headers = {"Cookie": f"{SESSION_COOKIE}={self._sid}"}
        if headers:
            request_headers.update(headers)

        try:
            async with self.client.request(
                method,
                url,
                params=encode_params(params),
                data=self._build_body(data, files),
                headers=request_headers,
                proxy=self.config.proxy,
                timeout=self._timeout,
            ) as response:
                status = response.status
                content = await response.read()
        except (ClientError, TimeoutError) as e:
            raise TransportError(f"{method} {path} failed: {e}") from e

        if status == 403:
            raise SessionExpiredError(
                f"HTTP 403 for {method} {path}",
                status=status,
                body=content[:500].decode("utf-8", errors="replace"),
            )
        if not 200 <= status < 300:
            logger.debug("Status of %s %s is %s", method, path, status)
            raise TransportError(
                f"HTTP {status} for {method} {path}",
                status=status,
                body=content[:500].decode("utf-8", errors="replace"),
            )

        if not json:
            return content.decode("utf-8", errors="replace")
        if not content.strip():
            return None
        try:
            return msgspec.json.decode(content, type=response_type)
        except msgspec.DecodeError as e:
            raise TransportError(
                f"Invalid JSON from {path}: {e}",
                status=status,
                body=content[:500].decode("utf-8", errors="replace"),
            ) from e

    @staticmethod
    def _build_body(
        data: Mapping[str, Any] | None, files: Mapping[str, FilePart] | None
    ) -> FormData | dict[str, str] | None:
        # FormData can only be serialized once, so it is rebuilt per attempt
        if not files:
            return encode_params(data) if data is not None else None

        form = FormData()
        for field, (filename, content, content_type) in files.items():
            form.add_field(field, content, filename=filename, content_type=content_type)
        for key, value in encode_params(data).items():
            form.add_field(key, value)
        return form
