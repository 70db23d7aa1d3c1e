"""
Shared fixtures: a mocked HTTP server and a real local server, both
honouring Range requests.
"""

import asyncio
import re

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer
from aioresponses import CallbackResult, aioresponses

from rangeget.config import DownloadConfig
from rangeget.http_client import HttpClient
from rangeget.models import Source

SOURCE_URL = "http://example.com/files/data.bin"
RANGE_RE = re.compile(r"bytes=(\d+)-(\d+)$")


class RangeServer:
    """Serves a payload slice per Range header and records what was asked."""

    def __init__(self, payload: bytes):
        self.payload = payload
        self.requested = []
        self.fail_starts = set()

    def callback(self, url, **kwargs):
        header = (kwargs.get("headers") or {}).get("Range", "")
        self.requested.append(header)
        match = RANGE_RE.match(header)
        if not match:
            return CallbackResult(status=200, body=self.payload)

        start, end = int(match.group(1)), int(match.group(2))
        if start in self.fail_starts:
            return CallbackResult(status=500, body=b"internal error")
        return CallbackResult(
            status=206,
            body=self.payload[start:end + 1],
            headers={"Content-Range": f"bytes {start}-{end}/{len(self.payload)}"},
        )


@pytest.fixture
def payload():
    return bytes(range(256)) * 4 + b"tail-bytes"


@pytest.fixture
def source(payload):
    return Source(url=SOURCE_URL, size=len(payload), extension=".bin")


@pytest.fixture
def mock_http():
    with aioresponses() as mock:
        yield mock


@pytest.fixture
def range_server(mock_http, payload):
    server = RangeServer(payload)
    mock_http.get(SOURCE_URL, callback=server.callback, repeat=True)
    return server


@pytest_asyncio.fixture
async def client():
    async with HttpClient(DownloadConfig(chunk_count=6)) as http:
        yield http


@pytest.fixture
def dest(tmp_path):
    with open(tmp_path / "out.bin", "w+b") as f:
        yield f


class LiveRangeServer:
    """Real HTTP server counting concurrent requests.

    ``gate`` makes every handler wait (up to two seconds) until that many
    requests are in flight at once. Ranges starting in ``hold_starts`` are
    answered only after ``release`` is set.
    """

    def __init__(self, payload: bytes):
        self.payload = payload
        self.in_flight = 0
        self.max_in_flight = 0
        self.gate = 0
        self.gate_open = asyncio.Event()
        self.hold_starts = set()
        self.release = asyncio.Event()
        self.url = None

    async def handle(self, request):
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.gate:
                if self.in_flight >= self.gate:
                    self.gate_open.set()
                try:
                    await asyncio.wait_for(self.gate_open.wait(), 2)
                except asyncio.TimeoutError:
                    pass

            match = RANGE_RE.match(request.headers.get("Range", ""))
            if not match:
                return web.Response(status=200, body=self.payload)
            start, end = int(match.group(1)), int(match.group(2))
            if start in self.hold_starts:
                await self.release.wait()
            return web.Response(
                status=206,
                body=self.payload[start:end + 1],
                headers={"Content-Range": f"bytes {start}-{end}/{len(self.payload)}"},
            )
        finally:
            self.in_flight -= 1


@pytest_asyncio.fixture
async def live_server(payload):
    server = LiveRangeServer(payload)
    app = web.Application()
    app.router.add_get("/data.bin", server.handle)
    test_server = TestServer(app)
    await test_server.start_server()
    server.url = str(test_server.make_url("/data.bin"))
    yield server
    server.release.set()
    await test_server.close()


@pytest.fixture
def live_source(live_server, payload):
    return Source(url=live_server.url, size=len(payload), extension=".bin")
