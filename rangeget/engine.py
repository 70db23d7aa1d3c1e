# rangeget/engine.py
"""
Core download engine: splits the source into byte ranges, fetches every
range concurrently and writes each one at its own offset in the destination.
"""

import asyncio
import logging
import os
import time
from typing import BinaryIO, Callable, List, Optional

import aiohttp

from rangeget.config import DEFAULT_BUFFER_SIZE, DEFAULT_CHUNK_COUNT
from rangeget.errors import (
    ChunkTransferError,
    ConfigurationError,
    DestinationError,
    RequestBuildError,
    WriteError,
)
from rangeget.http_client import HttpClient
from rangeget.models import DownloadRange, Source
from rangeget.ranges import RangeBuilder
from rangeget.utils import format_bytes, is_valid_url

logger = logging.getLogger(__name__)


class DownloadEngine:
    """Downloads one source into an open destination file, one task per chunk.

    The destination belongs to the caller: the engine truncates it for a full
    download and writes into it, but never closes it. Chunks write with
    os.pwrite into disjoint windows, so no locking is involved. Writes are
    synchronous calls on the event loop, one buffer at a time; a slow disk
    stalls every chunk for the duration of a write.

    Failures are not retried. When chunks fail, every other chunk still runs
    to completion and only the first failure is raised; the file keeps
    whatever chunks finished.
    """

    def __init__(self, client: HttpClient, source: Source, dest: BinaryIO,
                 chunk_count: int = DEFAULT_CHUNK_COUNT,
                 buffer_size: int = DEFAULT_BUFFER_SIZE):
        if chunk_count < 1:
            raise ConfigurationError(f"chunk count must be at least 1, got {chunk_count}")
        if buffer_size < 1:
            raise ConfigurationError(f"buffer size must be at least 1, got {buffer_size}")

        self.client = client
        self.source = source
        self.dest = dest
        self.chunk_count = chunk_count
        self.buffer_size = buffer_size

        self.downloaded_size = 0
        self.chunks: List[DownloadRange] = []
        self._first_error: Optional[BaseException] = None

        # Called with (downloaded_bytes, total_bytes) after every write
        self.progress_callback: Optional[Callable[[int, int], None]] = None

    async def download(self) -> int:
        """Download the whole source from scratch.

        Returns the number of bytes written.
        """
        builder = RangeBuilder(self.source.size, self.chunk_count, 0)
        try:
            self.dest.truncate(0)
            self.dest.seek(0)
        except (OSError, ValueError) as e:
            raise DestinationError("cannot truncate destination file", e) from e
        return await self._process(builder)

    async def resume(self) -> int:
        """Continue an interrupted download from the current destination size.

        The bytes already present are trusted as they are; nothing checks that
        they match the source. Returns the number of bytes written by this run.
        """
        try:
            self.dest.flush()
            current_size = os.fstat(self.dest.fileno()).st_size
        except (OSError, ValueError) as e:
            raise DestinationError("cannot fetch destination size", e) from e

        builder = RangeBuilder(self.source.size, self.chunk_count, current_size)
        logger.info(f"Resuming {self.source.url} from byte {current_size} "
                    f"({format_bytes(current_size)} already present)")
        return await self._process(builder)

    async def _process(self, builder: RangeBuilder) -> int:
        start_offset = builder.start
        self.downloaded_size = start_offset
        self.chunks = []
        self._first_error = None
        started = time.time()

        tasks = []
        for chunk in builder:
            self.chunks.append(chunk)
            if chunk.size == 0:
                logger.debug(f"Skipping empty chunk at offset {chunk.start}")
                continue
            logger.debug(f"Dispatching chunk {chunk.range_header}")
            tasks.append(asyncio.create_task(self._run_chunk(chunk)))

        logger.info(f"Downloading {format_bytes(self.source.size - start_offset)} "
                    f"of {self.source.url} in {len(tasks)} chunks")
        await asyncio.gather(*tasks, return_exceptions=True)

        if self._first_error is not None:
            raise self._first_error

        written = self.downloaded_size - start_offset
        logger.info(f"Download finished: {format_bytes(written)} in {time.time() - started:.2f}s")
        return written

    async def _run_chunk(self, chunk: DownloadRange):
        try:
            await self.download_chunk(chunk)
        except Exception as e:
            if self._first_error is None:
                self._first_error = e
                logger.warning(f"Chunk {chunk.start}-{chunk.end} failed: {e}")
            else:
                logger.warning(f"Chunk {chunk.start}-{chunk.end} failed, error discarded: {e}")
            raise

    async def download_chunk(self, chunk: DownloadRange) -> int:
        """Fetch one range and write it at ``chunk.start``. Returns bytes written."""
        headers = self._build_headers(chunk)
        try:
            async with self.client.request('GET', self.source.url, headers=headers) as response:
                if not self._status_ok(response.status, chunk):
                    raise aiohttp.ClientResponseError(
                        response.request_info, response.history,
                        status=response.status, message=f"HTTP Error {response.status}")
                return await self._write_chunk(response, chunk)
        except aiohttp.InvalidURL as e:
            raise RequestBuildError("cannot prepare request", e) from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ChunkTransferError("chunk download error", e, chunk) from e

    def _build_headers(self, chunk: DownloadRange) -> dict:
        if not is_valid_url(self.source.url):
            raise RequestBuildError("cannot prepare request", ValueError(f"invalid URL {self.source.url!r}"))
        if chunk.size <= 0:
            raise RequestBuildError("cannot prepare request", ValueError(f"empty range at {chunk.start}"))
        return {'Range': chunk.range_header}

    def _status_ok(self, status: int, chunk: DownloadRange) -> bool:
        if status == 206:
            return True
        # A server may answer 200 with the full body, only usable for a whole-file range
        return status == 200 and chunk.start == 0 and chunk.end == self.source.size

    async def _write_chunk(self, response: aiohttp.ClientResponse, chunk: DownloadRange) -> int:
        offset = chunk.start
        async for data in response.content.iter_chunked(self.buffer_size):
            if offset + len(data) > chunk.end:
                await self._drain(response)
                raise ChunkTransferError(
                    "response exceeds requested range",
                    ValueError(f"got more than {chunk.size} bytes for {chunk.range_header}"), chunk)

            self._write_at(data, offset, chunk)
            offset += len(data)
            self.downloaded_size += len(data)

            if self.progress_callback:
                self.progress_callback(self.downloaded_size, self.source.size)

        written = offset - chunk.start
        if written != chunk.size:
            raise ChunkTransferError(
                "incomplete chunk",
                ValueError(f"received {written} of {chunk.size} bytes for {chunk.range_header}"), chunk)
        return written

    async def _drain(self, response: aiohttp.ClientResponse):
        async for _ in response.content.iter_chunked(self.buffer_size):
            pass

    def _write_at(self, data: bytes, offset: int, chunk: DownloadRange):
        """Positioned write, independent of the file object's cursor."""
        view = memoryview(data)
        try:
            fd = self.dest.fileno()
            while view:
                n = os.pwrite(fd, view, offset)
                view = view[n:]
                offset += n
        except (OSError, ValueError) as e:
            raise WriteError("error on writing data", e, chunk) from e
