"""
RangeGet - parallel ranged HTTP downloader
Command line entry point.
"""

import argparse
import asyncio
import logging
import sys
import time
from typing import List, Optional

from rangeget.config import DEFAULT_CHUNK_COUNT, DownloadConfig
from rangeget.engine import DownloadEngine
from rangeget.errors import RangeGetError
from rangeget.http_client import HttpClient
from rangeget.path_resolver import PathResolver
from rangeget.source import probe_source
from rangeget.utils import format_bytes

logger = logging.getLogger("rangeget")


class ProgressReporter:
    """Logs progress and speed at most once per ``interval`` seconds."""

    def __init__(self, interval: float = 1.0):
        self.interval = interval
        self.start_time = time.monotonic()
        self.last_time = self.start_time
        self.last_downloaded: Optional[int] = None

    def __call__(self, downloaded: int, total: int):
        now = time.monotonic()
        if self.last_downloaded is None:
            self.last_downloaded = downloaded
        if now - self.last_time < self.interval and downloaded < total:
            return

        elapsed = now - self.last_time
        speed = (downloaded - self.last_downloaded) / elapsed if elapsed > 0 else 0.0
        progress = (downloaded / total) * 100 if total > 0 else 100.0
        logger.info(f"{format_bytes(downloaded)} / {format_bytes(total)} ({progress:.1f}%) "
                    f"at {format_bytes(speed)}/s")
        self.last_time = now
        self.last_downloaded = downloaded


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rangeget",
        description="Download a file over HTTP in parallel byte ranges.")
    parser.add_argument("url", help="source URL")
    parser.add_argument("-o", "--output", default=".",
                        help="destination file or existing directory (default: current directory)")
    parser.add_argument("-n", "--chunks", type=int, default=DEFAULT_CHUNK_COUNT,
                        help=f"number of parallel chunks (default: {DEFAULT_CHUNK_COUNT})")
    parser.add_argument("--resume", action="store_true",
                        help="continue from the current size of the destination file")
    parser.add_argument("--timeout", type=float, default=None,
                        help="deadline in seconds for each chunk request")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def setup_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    logging.getLogger("aiohttp").setLevel(logging.WARNING)


async def run(args: argparse.Namespace) -> int:
    """Probe, resolve and download. Returns the number of bytes written."""
    config = DownloadConfig(chunk_count=args.chunks, total_timeout=args.timeout)

    async with HttpClient(config) as client:
        source = await probe_source(client, args.url)

        chunk_count = config.chunk_count
        if not source.accepts_ranges and chunk_count > 1:
            logger.warning("Server does not advertise range support, using a single chunk")
            chunk_count = 1

        path_info = PathResolver(args.url, args.output, resume=args.resume).path_info(source.extension)
        with path_info.dest as dest:
            logger.info(f"Saving to {dest.name}")
            engine = DownloadEngine(client, source, dest, chunk_count, config.buffer_size)
            engine.progress_callback = ProgressReporter()
            if args.resume:
                return await engine.resume()
            return await engine.download()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        written = asyncio.run(run(args))
    except RangeGetError as e:
        logger.error(f"✗ Download failed: {e}")
        return 1
    except KeyboardInterrupt:
        logger.warning("Download interrupted, run again with --resume to continue")
        return 130

    logger.info(f"✓ Download completed successfully ({format_bytes(written)})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
