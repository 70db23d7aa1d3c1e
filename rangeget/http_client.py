# rangeget/http_client.py
"""
Thin transport over aiohttp used for ranged GETs and the metadata probe.
"""

import logging
import ssl
from typing import Optional

import aiohttp
import certifi

from rangeget.config import DownloadConfig

logger = logging.getLogger(__name__)


class HttpClient:
    """Owns one aiohttp session shared by every chunk task.

    Usage:
        async with HttpClient(config) as client:
            async with client.request('GET', url, headers={'Range': 'bytes=0-9'}) as resp:
                ...
    """

    def __init__(self, config: Optional[DownloadConfig] = None,
                 session: Optional[aiohttp.ClientSession] = None):
        self.config = config or DownloadConfig()
        self.session = session
        self._owns_session = session is None

    async def open(self):
        """Create the session: certifi CA bundle, no cap on parallel connections."""
        if self.session is not None:
            return
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(
            limit=0, limit_per_host=0, ssl=ssl_context)
        self.session = aiohttp.ClientSession(
            connector=connector,
            timeout=self.config.client_timeout(),
            headers=self.config.default_headers(),
        )
        logger.debug("HTTP session opened")

    async def close(self):
        if self.session is not None and self._owns_session:
            await self.session.close()
            logger.debug("HTTP session closed")
        if self._owns_session:
            self.session = None

    async def __aenter__(self) -> "HttpClient":
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    def request(self, method: str, url: str, headers: Optional[dict] = None):
        """Issue an arbitrary request; returns an aiohttp response context manager."""
        return self._session().request(method, url, headers=headers)

    def head(self, url: str):
        return self._session().head(url, allow_redirects=True)

    def _session(self) -> aiohttp.ClientSession:
        if self.session is None:
            raise RuntimeError("HttpClient is not open, use 'async with HttpClient()'")
        return self.session
