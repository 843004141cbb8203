"""
Unit tests for archive extraction.
"""

import io
import stat
import sys
import threading
import zipfile

import pytest

from protoc_fetcher.core.cache import is_installed
from protoc_fetcher.core.exceptions import ExtractionFailed
from protoc_fetcher.core.filesystem import DEFAULT_FILE_MODE, _write_member, extract
from protoc_fetcher.core.platform import PlatformKey
from tests.utils.archives import make_protoc_archive, make_zip


class TestExtract:
    """Tests for extract()."""

    def test_extract_protoc_layout(self, temp_dir):
        """Test upstream layout lands unchanged in the destination."""
        target = temp_dir / "entry"

        result = extract(make_protoc_archive("28.0"), target)

        assert result == target
        assert (target / "bin" / "protoc").is_file()
        assert (target / "include" / "google" / "protobuf" / "any.proto").is_file()
        assert (target / "readme.txt").is_file()

    def test_creates_destination(self, temp_dir):
        """Test nested destination directories are created."""
        target = temp_dir / "a" / "b" / "c"

        extract(make_protoc_archive("28.0"), target)

        assert (target / "bin" / "protoc").exists()

    def test_strips_single_root_directory(self, temp_dir):
        """Test a wrapping top-level directory is flattened."""
        data = make_protoc_archive("28.0", root="protoc-28.0/")

        extract(data, temp_dir)

        assert (temp_dir / "bin" / "protoc").is_file()
        assert not (temp_dir / "protoc-28.0").exists()

    def test_strip_root_disabled(self, temp_dir):
        """Test flattening can be turned off."""
        data = make_protoc_archive("28.0", root="protoc-28.0/")

        extract(data, temp_dir, strip_root=False)

        assert (temp_dir / "protoc-28.0" / "bin" / "protoc").is_file()

    def test_multiple_roots_not_stripped(self, temp_dir):
        """Test archives with several top-level directories are kept as-is."""
        data = make_zip({"bin/protoc": b"x", "include/a.proto": b"y"})

        extract(data, temp_dir)

        assert (temp_dir / "bin" / "protoc").is_file()
        assert (temp_dir / "include" / "a.proto").is_file()

    def test_invalid_archive(self, temp_dir):
        """Test non-zip data raises ExtractionFailed."""
        with pytest.raises(ExtractionFailed, match="not a valid zip") as exc_info:
            extract(b"<html>Not Found</html>", temp_dir / "entry")

        assert exc_info.value.target_dir == temp_dir / "entry"

    def test_empty_data(self, temp_dir):
        """Test empty data raises ExtractionFailed."""
        with pytest.raises(ExtractionFailed):
            extract(b"", temp_dir)

    def test_traversal_blocked(self, temp_dir):
        """Test members escaping the destination are refused."""
        data = make_zip({"bin/protoc": b"x", "../evil.txt": b"boom"})
        target = temp_dir / "entry"

        with pytest.raises(ExtractionFailed, match="directory traversal"):
            extract(data, target)

        assert not (temp_dir / "evil.txt").exists()

    def test_overwrites_existing_files(self, temp_dir):
        """Test extraction over a populated destination converges."""
        (temp_dir / "bin").mkdir()
        (temp_dir / "bin" / "protoc").write_text("stale")

        extract(make_protoc_archive("28.0"), temp_dir)

        assert "libprotoc 28.0" in (temp_dir / "bin" / "protoc").read_text()

    def test_repeated_extraction_is_idempotent(self, temp_dir):
        """Test extracting twice leaves the same tree."""
        data = make_protoc_archive("28.0")

        extract(data, temp_dir)
        first = sorted(p.relative_to(temp_dir) for p in temp_dir.rglob("*"))
        extract(data, temp_dir)
        second = sorted(p.relative_to(temp_dir) for p in temp_dir.rglob("*"))

        assert first == second

    def test_no_temp_files_left(self, temp_dir):
        """Test temp files used for atomic writes are gone afterwards."""
        extract(make_protoc_archive("28.0"), temp_dir)

        assert not list(temp_dir.rglob("*.tmp"))

    def test_concurrent_extraction(self, temp_dir):
        """Test several threads extracting the same archive all succeed."""
        data = make_protoc_archive("28.0")
        errors = []

        def worker():
            try:
                extract(data, temp_dir)
            except Exception as e:  # collected for the assertion below
                errors.append(e)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert "libprotoc 28.0" in (temp_dir / "bin" / "protoc").read_text()
        assert not list(temp_dir.rglob("*.tmp"))

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
    def test_restores_unix_mode(self, temp_dir):
        """Test execute permissions recorded in the archive are restored."""
        extract(make_protoc_archive("28.0"), temp_dir)

        mode = stat.S_IMODE((temp_dir / "bin" / "protoc").stat().st_mode)
        assert mode == 0o755

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
    def test_default_mode_without_attributes(self, temp_dir):
        """Test files without recorded permissions get a regular file mode."""
        data = make_zip({"readme.txt": b"y"})
        destination = temp_dir / "readme.txt"

        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            info = archive.getinfo("readme.txt")
            # zipfile always records 0o600 when writing; clear it as a
            # Windows-built archive would
            info.external_attr = 0
            _write_member(archive, info, destination)

        assert destination.read_bytes() == b"y"
        assert stat.S_IMODE(destination.stat().st_mode) == DEFAULT_FILE_MODE


class TestFlattenRoot:
    """Tests for stripping a wrapping top-level directory."""

    def test_bin_only_archive_keeps_bin(self, temp_dir):
        """Test an archive holding only bin/protoc extracts to bin/protoc."""
        data = make_zip(
            {"bin/": b"", "bin/protoc": b"#!/bin/sh\n"}, {"bin/protoc": 0o755}
        )

        extract(data, temp_dir)

        assert (temp_dir / "bin" / "protoc").is_file()
        assert not (temp_dir / "protoc").exists()
        assert is_installed(temp_dir, PlatformKey("linux", "x86_64"))

    def test_include_only_archive_keeps_include(self, temp_dir):
        """Test layout directories are not mistaken for a wrapper."""
        data = make_zip({"include/google/protobuf/any.proto": b"x"})

        extract(data, temp_dir)

        assert (temp_dir / "include" / "google" / "protobuf" / "any.proto").is_file()

    def test_wrapped_bin_only_archive(self, temp_dir):
        """Test a wrapper around a bin-only layout is still stripped."""
        data = make_zip({"protoc-28.0/bin/protoc": b"#!/bin/sh\n"})

        extract(data, temp_dir)

        assert (temp_dir / "bin" / "protoc").is_file()
