"""HTTP adapter implementing the host request capability."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from ..protocols import FileField

logger = logging.getLogger(__name__)


class HTTPRequester:
    """
    httpx client adapter for provider calls.

    Implements IHttpRequester protocol. Single attempt per call: transport
    and status errors surface as httpx.HTTPError.
    """

    def __init__(self, timeout: float = 60, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        self._client = httpx.AsyncClient(
            timeout=self._timeout,
            transport=self._transport,
            follow_redirects=True,
        )
        return self

    async def __aexit__(self, *args):
        if self._client:
            await self._client.aclose()
            self._client = None

    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        data: Optional[Dict[str, Any]] = None,
        files: Optional[List[FileField]] = None,
        content: Optional[str] = None,
    ) -> str:
        if not self._client:
            raise RuntimeError("HTTPRequester not initialized. Use 'async with' context.")

        kwargs: Dict[str, Any] = {"headers": headers}
        if data is not None:
            kwargs["data"] = {key: str(value) for key, value in data.items()}
        if files:
            kwargs["files"] = files
        if content is not None:
            kwargs["content"] = content

        response = await self._client.request(method, url, **kwargs)
        logger.debug("%s %s -> %s", method, url.split("?")[0], response.status_code)
        response.raise_for_status()
        return response.text
