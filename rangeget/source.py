# rangeget/source.py
"""
Resolves the attributes of the remote resource with a HEAD request.
"""

import asyncio
import logging
import mimetypes

import aiohttp

from rangeget.errors import SourceError
from rangeget.http_client import HttpClient
from rangeget.models import Source
from rangeget.utils import format_bytes

logger = logging.getLogger(__name__)


async def probe_source(client: HttpClient, url: str) -> Source:
    """Fetch size, content type extension and range support for ``url``.

    Raises SourceError when the request fails or when the size or the
    content type cannot be determined.
    """
    try:
        async with client.head(url) as response:
            if response.status >= 400:
                raise SourceError("cannot fetch source info", Exception(f"HTTP {response.status}"))
            headers = response.headers
            content_length = headers.get('Content-Length')
            content_type = headers.get('Content-Type', '')
            accept_ranges = headers.get('Accept-Ranges', '')
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise SourceError("cannot fetch source info", e) from e

    try:
        size = int(content_length) if content_length else 0
    except ValueError as e:
        raise SourceError("cannot fetch content length", e) from e
    if size <= 0:
        raise SourceError("cannot fetch content length")

    mime_type = content_type.split(';')[0].strip()
    extension = mimetypes.guess_extension(mime_type) if mime_type else None
    if not extension:
        raise SourceError("cannot fetch content type",
                          ValueError(f"no extension for media type {mime_type!r}"))

    source = Source(
        url=url,
        size=size,
        extension=extension,
        accepts_ranges='bytes' in accept_ranges.lower(),
    )
    logger.info(f"Source {url}: {format_bytes(size)}, type {mime_type}, "
                f"ranges {'supported' if source.accepts_ranges else 'not advertised'}")
    return source
