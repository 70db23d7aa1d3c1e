# rangeget/path_resolver.py
"""
Resolves the source locator and opens the destination file.
"""

import logging
from pathlib import Path
from typing import BinaryIO, Optional

from rangeget.errors import PathResolverError
from rangeget.models import PathInfo
from rangeget.utils import get_default_filename, is_valid_url

logger = logging.getLogger(__name__)


class PathResolver:
    """Turns a source URL and a destination path into a PathInfo.

    ``dest`` may be a file path or an existing directory. For a directory the
    file name comes from the URL, or is generated when the URL has none.
    The destination is truncated on open unless ``resume`` is set, so that a
    resumed download keeps the bytes already on disk.
    """

    def __init__(self, source: str, dest: str, resume: bool = False):
        self.source = source
        self.dest = dest
        self.resume = resume

    def path_info(self, extension: Optional[str] = None) -> PathInfo:
        source = self.resolve_source()
        dest = self.resolve_dest(extension)
        return PathInfo(source=source, dest=dest)

    def resolve_source(self) -> str:
        if not is_valid_url(self.source):
            raise PathResolverError("invalid source path", ValueError(self.source))
        return self.source

    def resolve_dest_path(self, extension: Optional[str] = None) -> Path:
        dest = Path(self.dest)
        if dest.is_dir():
            return dest / get_default_filename(self.source, extension)
        if not dest.parent.is_dir():
            raise PathResolverError("destination does not exist",
                                    FileNotFoundError(str(dest.parent)))
        return dest

    def resolve_dest(self, extension: Optional[str] = None) -> BinaryIO:
        path = self.resolve_dest_path(extension)
        try:
            if self.resume:
                path.touch(exist_ok=True)
                dest = open(path, 'r+b')
            else:
                dest = open(path, 'w+b')
        except OSError as e:
            raise PathResolverError(f"cannot open file - {path}", e) from e
        logger.debug(f"Destination resolved to {path} (resume={self.resume})")
        return dest
