# rangeget/ranges.py
"""
Splits a content length into contiguous download ranges.
"""

from rangeget.errors import ConfigurationError
from rangeget.models import DownloadRange


class RangeBuilder:
    """Iterates over [start_offset, content_length) one chunk at a time.

    The content left after ``start_offset`` is divided into ``chunk_count``
    ranges of equal size; the division remainder goes to the first range.
    A builder is single-pass: once exhausted it keeps raising StopIteration.
    """

    def __init__(self, content_length: int, chunk_count: int, start_offset: int = 0):
        if chunk_count < 1:
            raise ConfigurationError(f"chunk count must be at least 1, got {chunk_count}")
        if start_offset < 0 or start_offset > content_length:
            raise ConfigurationError(
                f"start offset {start_offset} is outside content length {content_length}")

        adjusted = content_length - start_offset
        self.content_length = content_length
        self.remainder = adjusted % chunk_count
        self.range_size = (adjusted - self.remainder) // chunk_count

        self.start = start_offset
        self.end = start_offset
        self._first = True

    def __iter__(self):
        return self

    def __next__(self) -> DownloadRange:
        if self.end == self.content_length:
            raise StopIteration

        chunk_size = self.range_size
        if self._first:
            chunk_size += self.remainder
            self._first = False

        self.start = self.end
        self.end += chunk_size
        return DownloadRange(self.start, self.end)

    @property
    def exhausted(self) -> bool:
        return self.end == self.content_length
