# rangeget/config.py
"""
Download settings and their defaults.
"""

from dataclasses import dataclass
from typing import Optional

import aiohttp

DEFAULT_CHUNK_COUNT = 8
DEFAULT_BUFFER_SIZE = 8192  # bytes read from a response per write
DEFAULT_CONNECT_TIMEOUT = 30  # seconds
DEFAULT_SOCK_READ_TIMEOUT = 30  # seconds
DEFAULT_USER_AGENT = "RangeGet/1.0"


@dataclass
class DownloadConfig:
    """Settings shared by the HTTP client and the download engine."""
    chunk_count: int = DEFAULT_CHUNK_COUNT
    buffer_size: int = DEFAULT_BUFFER_SIZE
    connect_timeout: Optional[float] = DEFAULT_CONNECT_TIMEOUT
    sock_read_timeout: Optional[float] = DEFAULT_SOCK_READ_TIMEOUT
    total_timeout: Optional[float] = None  # deadline for each chunk request
    user_agent: str = DEFAULT_USER_AGENT

    def client_timeout(self) -> aiohttp.ClientTimeout:
        return aiohttp.ClientTimeout(
            total=self.total_timeout,
            connect=self.connect_timeout,
            sock_read=self.sock_read_timeout,
        )

    def default_headers(self) -> dict:
        # Range offsets refer to the unencoded representation
        return {
            'User-Agent': self.user_agent,
            'Accept-Encoding': 'identity',
            'Connection': 'keep-alive',
        }
