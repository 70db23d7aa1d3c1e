# rangeget/models.py
"""
Data Models for RangeGet
"""

from dataclasses import dataclass
from typing import BinaryIO


@dataclass(frozen=True)
class DownloadRange:
    """A chunk of the remote resource covering bytes [start, end)"""
    start: int
    end: int

    @property
    def size(self) -> int:
        return self.end - self.start

    @property
    def range_header(self) -> str:
        """Value for the HTTP Range header, the end byte is inclusive."""
        if self.size <= 0:
            raise ValueError(f"Cannot build a Range header for empty range {self.start}-{self.end}")
        return f"bytes={self.start}-{self.end - 1}"


@dataclass(frozen=True)
class Source:
    """Resolved attributes of the remote resource"""
    url: str
    size: int
    extension: str
    accepts_ranges: bool = True


@dataclass
class PathInfo:
    """Resolved source locator and open destination file"""
    source: str
    dest: BinaryIO
