"""
HTTP transport for the Remote Store (storefront REST API).

Responses use the envelope ``{"message": str, "data": ...}``. Successful calls
return ``data``; non-2xx responses and transport failures raise
RemoteStoreException carrying the server's ``message`` when there is one.
Timeouts are owned by aiohttp (ClientTimeout); the engine runs no timers.
"""

import asyncio
import logging
from typing import Any

import aiohttp

import config
from exceptions.remote import RemoteStoreException

logger = logging.getLogger(__name__)


class ApiClient:
    """
    Thin aiohttp wrapper holding the bearer token of the current user.

    Usage:
        client = ApiClient()
        client.set_access_token(token)
        cart = await client.get("/cart")
        await client.close()
    """

    def __init__(self, base_url: str | None = None, timeout_seconds: float | None = None,
                 session: aiohttp.ClientSession | None = None, access_token: str | None = None):
        self.base_url = (base_url or config.API_BASE_URL).rstrip("/")
        self.timeout_seconds = timeout_seconds or config.API_TIMEOUT_SECONDS
        self._session = session
        self._access_token = access_token

    def set_access_token(self, token: str | None) -> None:
        self._access_token = token

    def clear_access_token(self) -> None:
        self._access_token = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self._access_token)

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._access_token:
            headers["Authorization"] = f"Bearer {self._access_token}"
        return headers

    @staticmethod
    async def _read_body(response: aiohttp.ClientResponse) -> Any:
        try:
            return await response.json(content_type=None)
        except (aiohttp.ContentTypeError, ValueError):
            return None

    async def request(self, method: str, path: str, payload: dict | None = None) -> Any:
        """
        Send a request and unwrap the response envelope.

        Args:
            method: HTTP method
            path: Path relative to the API base URL (e.g., "/cart/add")
            payload: JSON body, if any

        Returns:
            The ``data`` field of the envelope (or the raw body when there is no envelope)

        Raises:
            RemoteStoreException: Non-2xx status, timeout or connection failure
        """
        session = await self._get_session()
        url = f"{self.base_url}/{path.lstrip('/')}"

        try:
            async with session.request(method, url, json=payload, headers=self._headers()) as response:
                body = await self._read_body(response)
                if response.status >= 400:
                    server_message = body.get("message") if isinstance(body, dict) else None
                    logger.warning(f"[ApiClient] {method} {path} -> HTTP {response.status}: {server_message}")
                    raise RemoteStoreException(method, path, response.status, server_message)
        except asyncio.TimeoutError as e:
            logger.error(f"[ApiClient] {method} {path} timed out after {self.timeout_seconds}s")
            raise RemoteStoreException(method, path, None, "request timed out") from e
        except aiohttp.ClientError as e:
            logger.error(f"[ApiClient] {method} {path} transport error: {e}")
            raise RemoteStoreException(method, path, None, str(e)) from e

        if isinstance(body, dict) and "data" in body:
            return body["data"]
        return body

    async def get(self, path: str) -> Any:
        return await self.request("GET", path)

    async def post(self, path: str, payload: dict | None = None) -> Any:
        return await self.request("POST", path, payload)

    async def put(self, path: str, payload: dict | None = None) -> Any:
        return await self.request("PUT", path, payload)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)
