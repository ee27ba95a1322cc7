#!/usr/bin/env python3
"""
Test the archive writer: entry layout, reproducible bytes and the atomic
finalize step.
"""
import os
import sys
import tempfile
import zipfile
from pathlib import Path

import pytest

# Add the project root to Python path
sys.path.insert(0, str(Path(__file__).parent))

from atlast.archive import DATA_ENTRY, IMAGE_ENTRY, build_archive, read_archive, write_archive
from atlast.core import AtlasBuilder
from atlast.errors import ArchiveReadError, ArchiveWriteError, AtlasError
from atlast.images import SourceImage
from atlast.records import decode_records


def make_image(name, width, height, fill):
    return SourceImage(name, width, height, bytes([fill]) * (width * height * 4))


def test_archive_holds_exactly_two_entries():
    payload = build_archive(b"png-bytes", b"data-bytes")
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "out.atlas"
        path.write_bytes(payload)
        with zipfile.ZipFile(path) as zf:
            assert zf.namelist() == [IMAGE_ENTRY, DATA_ENTRY]
        assert read_archive(path) == (b"png-bytes", b"data-bytes")


def test_archive_bytes_are_reproducible():
    assert build_archive(b"a" * 100, b"b" * 50) == build_archive(b"a" * 100, b"b" * 50)


def test_builder_is_deterministic():
    images = [make_image("a", 2, 2, 10), make_image("b", 2, 2, 20), make_image("c", 4, 4, 30)]
    first = AtlasBuilder().build(images)
    second = AtlasBuilder().build(list(images))

    assert first.archive_bytes == second.archive_bytes
    assert decode_records(first.data_bytes) == first.records
    assert (first.result.canvas_width, first.result.canvas_height) == (4, 10)


def test_builder_returns_none_for_no_images():
    assert AtlasBuilder().build([]) is None


def test_builder_rejects_empty_canvas():
    with pytest.raises(AtlasError):
        AtlasBuilder().build([SourceImage("void", 0, 0, b"")])


def test_write_replaces_existing_file():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "out.atlas"
        path.write_bytes(b"old")
        write_archive(path, b"new")
        assert path.read_bytes() == b"new"
        assert os.listdir(tmp) == ["out.atlas"]


@pytest.mark.skipif(os.name != "posix", reason="POSIX permission bits")
def test_written_archive_follows_umask():
    previous = os.umask(0o027)
    try:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "out.atlas"
            write_archive(path, b"payload")
            assert path.stat().st_mode & 0o777 == 0o640
    finally:
        os.umask(previous)


def test_write_creates_parent_directories():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "nested" / "dir" / "out.atlas"
        write_archive(path, b"payload")
        assert path.read_bytes() == b"payload"


def test_failed_write_leaves_nothing_behind():
    with tempfile.TemporaryDirectory() as tmp:
        blocker = Path(tmp) / "blocker"
        blocker.write_text("not a directory")
        with pytest.raises(ArchiveWriteError):
            write_archive(blocker / "out.atlas", b"payload")
        # destination is an existing directory, so the final replace fails
        target = Path(tmp) / "target"
        target.mkdir()
        (target / "keep").write_text("x")
        with pytest.raises(ArchiveWriteError):
            write_archive(target, b"payload")
        assert sorted(os.listdir(tmp)) == ["blocker", "target"]


def test_read_archive_errors():
    with tempfile.TemporaryDirectory() as tmp:
        missing_entry = Path(tmp) / "partial.atlas"
        with zipfile.ZipFile(missing_entry, "w") as zf:
            zf.writestr(IMAGE_ENTRY, b"png")
        with pytest.raises(ArchiveReadError):
            read_archive(missing_entry)

        not_zip = Path(tmp) / "plain.atlas"
        not_zip.write_bytes(b"definitely not a zip")
        with pytest.raises(ArchiveReadError):
            read_archive(not_zip)

        with pytest.raises(ArchiveReadError):
            read_archive(Path(tmp) / "absent.atlas")


if __name__ == "__main__":
    print("🧪 Testing archive writer")
    tests = [v for k, v in list(globals().items()) if k.startswith("test_")]
    for test in tests:
        test()
        print(f"✅ {test.__name__}")
