"""
RangeGet - downloads a file over HTTP in parallel byte ranges, with resume.
"""

from rangeget.config import DownloadConfig
from rangeget.engine import DownloadEngine
from rangeget.errors import (
    ChunkTransferError,
    ConfigurationError,
    DestinationError,
    PathResolverError,
    RangeGetError,
    RequestBuildError,
    SourceError,
    WriteError,
)
from rangeget.http_client import HttpClient
from rangeget.models import DownloadRange, PathInfo, Source
from rangeget.path_resolver import PathResolver
from rangeget.ranges import RangeBuilder
from rangeget.source import probe_source

__version__ = "1.0.0"

__all__ = [
    "ChunkTransferError",
    "ConfigurationError",
    "DestinationError",
    "DownloadConfig",
    "DownloadEngine",
    "DownloadRange",
    "HttpClient",
    "PathInfo",
    "PathResolver",
    "PathResolverError",
    "RangeBuilder",
    "RangeGetError",
    "RequestBuildError",
    "Source",
    "SourceError",
    "WriteError",
    "probe_source",
]
