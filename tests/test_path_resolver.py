"""Tests for PathResolver."""

import uuid
from pathlib import Path

import pytest

from rangeget.errors import PathResolverError
from rangeget.path_resolver import PathResolver


class TestPathResolver:

    def test_invalid_source(self, tmp_path):
        with pytest.raises(PathResolverError, match="invalid source path"):
            PathResolver("not a url", str(tmp_path)).path_info()

    def test_directory_uses_url_file_name(self, tmp_path):
        info = PathResolver("http://test-url.com/test/archive.tar.gz", str(tmp_path)).path_info()

        with info.dest as dest:
            assert Path(dest.name) == tmp_path / "archive.tar.gz"
        assert info.source == "http://test-url.com/test/archive.tar.gz"

    def test_directory_generates_name_without_url_extension(self, tmp_path):
        info = PathResolver("http://test-url.com/test/text", str(tmp_path)).path_info(".txt")

        with info.dest as dest:
            path = Path(dest.name)
        assert path.parent == tmp_path
        assert path.suffix == ".txt"
        uuid.UUID(path.stem)

    def test_file_path_is_truncated(self, tmp_path):
        target = tmp_path / "out.bin"
        target.write_bytes(b"old content")

        with PathResolver("http://test-url.com/a.bin", str(target)).path_info().dest as dest:
            assert dest.writable()
        assert target.read_bytes() == b""

    def test_resume_keeps_existing_bytes(self, tmp_path):
        target = tmp_path / "out.bin"
        target.write_bytes(b"partial")

        with PathResolver("http://test-url.com/a.bin", str(target), resume=True).path_info().dest:
            pass
        assert target.read_bytes() == b"partial"

    def test_resume_creates_missing_file(self, tmp_path):
        target = tmp_path / "new.bin"

        with PathResolver("http://test-url.com/a.bin", str(target), resume=True).path_info().dest:
            pass
        assert target.exists()

    def test_missing_parent_directory(self, tmp_path):
        target = tmp_path / "missing" / "out.bin"

        with pytest.raises(PathResolverError, match="destination does not exist"):
            PathResolver("http://test-url.com/a.bin", str(target)).path_info()
