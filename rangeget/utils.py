# rangeget/utils.py
"""
Shared helper functions for formatting, validation, and file naming.
"""
import posixpath
import uuid
from typing import Optional
from urllib.parse import urlparse


def format_bytes(size: float) -> str:
    """Converts bytes into a human-readable format (KB, MB, GB)."""
    if not isinstance(size, (int, float)):
        return "0 B"
    power = 1024
    n = 0
    power_labels = {0: '', 1: 'K', 2: 'M', 3: 'G', 4: 'T'}
    while size > power and n < len(power_labels) - 1:
        size /= power
        n += 1
    return f"{size:.2f} {power_labels[n]}B"


def is_valid_url(url: str) -> bool:
    """Checks that a string is an absolute http(s) URL with a host."""
    try:
        result = urlparse(url)
    except ValueError:
        return False
    return result.scheme in ('http', 'https') and bool(result.netloc)


def has_extension(path: str) -> bool:
    return bool(posixpath.splitext(posixpath.basename(path))[1])


def get_default_filename(url: str, extension: Optional[str] = None) -> str:
    """Picks a file name for a URL.

    The last path segment is used when it carries an extension; otherwise a
    random UUID4 name is generated so unrelated downloads never collide.
    """
    basename = posixpath.basename(urlparse(url).path)
    if basename and has_extension(basename):
        return basename
    return f"{uuid.uuid4()}{extension or ''}"
