# rangeget/errors.py
"""
Exception hierarchy for RangeGet.

Every error carries a short context describing the failing phase and,
when there is one, the underlying exception as ``cause``.
"""

from typing import Optional

from rangeget.models import DownloadRange


class RangeGetError(Exception):
    """Base class for all RangeGet errors."""

    def __init__(self, context: str, cause: Optional[BaseException] = None):
        self.context = context
        self.cause = cause
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.cause is None:
            return self.context
        return f"{self.context}: {self.cause}"


class ConfigurationError(RangeGetError):
    """Invalid chunk count or offset/length relationship."""


class RequestBuildError(RangeGetError):
    """The range request for a chunk could not be built."""


class ChunkTransferError(RangeGetError):
    """The network exchange for one chunk failed."""

    def __init__(self, context: str, cause: Optional[BaseException] = None,
                 chunk: Optional[DownloadRange] = None):
        self.chunk = chunk
        super().__init__(context, cause)


class DestinationError(RangeGetError):
    """The destination file could not be prepared or inspected."""


class WriteError(DestinationError):
    """A positioned write into the destination failed."""

    def __init__(self, context: str, cause: Optional[BaseException] = None,
                 chunk: Optional[DownloadRange] = None):
        self.chunk = chunk
        super().__init__(context, cause)


class SourceError(RangeGetError):
    """Source metadata could not be fetched."""


class PathResolverError(RangeGetError):
    """Source locator or destination path could not be resolved."""
