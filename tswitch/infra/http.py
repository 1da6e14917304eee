from __future__ import annotations

import json as jsonlib
from typing import Any, Protocol, runtime_checkable

import aiohttp
from loguru import logger

from tswitch.errors import ApiError, DecodeError, TransportError

# ─── Auth ────────────────────────────────────────────────────────────


@runtime_checkable
class Auth(Protocol):
    def headers(self) -> dict[str, str]: ...


class BearerAuth:
    def __init__(self, token: str) -> None:
        self._token = token

    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/json",
        }

    def __repr__(self) -> str:
        return "BearerAuth(token=***)"


# ─── Client ──────────────────────────────────────────────────────────


class HttpClient:
    """JSON-over-HTTP session bound to one base URL.

    Non-2xx responses raise ``ApiError`` with the body attached, connection
    failures raise ``TransportError`` and undecodable bodies raise
    ``DecodeError``. Nothing is retried here.
    """

    def __init__(
        self,
        base_url: str,
        auth: Auth | None = None,
        *,
        timeout: float = 30,
        default_headers: dict[str, str] | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._auth = auth
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._default_headers = default_headers or {}
        self._session: aiohttp.ClientSession | None = None
        self._log = logger.bind(component="http")

    @property
    def base_url(self) -> str:
        return self._base_url

    def _url(self, path: str) -> str:
        return f"{self._base_url}{path}"

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session

    def _build_headers(self) -> dict[str, str]:
        headers = dict(self._default_headers)
        if self._auth:
            headers.update(self._auth.headers())
        return headers

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | list[Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        session = await self._ensure_session()
        headers = self._build_headers()
        self._log.debug("{method} {path}", method=method, path=path)

        try:
            async with session.request(
                method, self._url(path), headers=headers, json=json, params=params
            ) as resp:
                return await self._parse(resp)
        except aiohttp.ClientError as e:
            self._log.warning(
                "{method} {path} failed: {err}", method=method, path=path, err=e,
            )
            raise TransportError(f"{method} {path}: {e}") from e
        except TimeoutError as e:
            raise TransportError(f"{method} {path}: timed out") from e

    async def _parse(self, resp: aiohttp.ClientResponse) -> Any:
        raw = await resp.read()
        if not 200 <= resp.status < 300:
            body = raw.decode(errors="replace")
            self._log.warning(
                "HTTP {status} from {url}: {body}",
                status=resp.status, url=str(resp.url), body=body[:500],
            )
            raise ApiError(status=resp.status, body=body)
        if not raw:
            return None
        try:
            return jsonlib.loads(raw)
        except ValueError as e:
            raise DecodeError(f"Invalid JSON from {resp.url}: {e}") from e

    # ─── Lifecycle ───────────────────────────────────────────────────

    async def close(self) -> None:
        if self._session and not self._session.closed:
            self._log.debug("Closing HTTP session")
            await self._session.close()

    async def __aenter__(self) -> HttpClient:
        await self._ensure_session()
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()
