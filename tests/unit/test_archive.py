# tests/unit/test_archive.py

import io
import os
import zipfile

import pytest

from s3_uploader.archive import build_zip_archive, staged_file
from s3_uploader.exceptions import ArchiveCreationError


def test_build_zip_archive_writes_entries_in_order():
    archive_bytes = build_zip_archive([("b/two.bin", b"\x00\x01"), ("a/one.txt", "one")])

    with zipfile.ZipFile(io.BytesIO(archive_bytes)) as archive:
        assert archive.namelist() == ["b/two.bin", "a/one.txt"]
        assert archive.read("b/two.bin") == b"\x00\x01"
        assert archive.read("a/one.txt") == b"one"
        assert archive.getinfo("a/one.txt").compress_type == zipfile.ZIP_DEFLATED


def test_build_zip_archive_propagates_entry_errors():
    def entries():
        yield "ok.txt", "ok"
        raise RuntimeError("payload failed")

    with pytest.raises(RuntimeError, match="payload failed"):
        build_zip_archive(entries())


def test_build_zip_archive_empty():
    with zipfile.ZipFile(io.BytesIO(build_zip_archive([]))) as archive:
        assert archive.namelist() == []


def test_staged_file_writes_then_removes(tmp_path):
    with staged_file(b"zip-bytes", str(tmp_path), "bundle.zip") as path:
        assert path == os.path.join(str(tmp_path), "bundle.zip")
        with open(path, "rb") as f:
            assert f.read() == b"zip-bytes"

    assert not os.path.exists(path)


def test_staged_file_removes_on_error(tmp_path):
    with pytest.raises(ValueError):
        with staged_file(b"zip-bytes", str(tmp_path), "bundle.zip") as path:
            raise ValueError("upload failed")

    assert not os.path.exists(path)


def test_staged_file_unwritable_dir(tmp_path):
    missing_dir = str(tmp_path / "does-not-exist")

    with pytest.raises(ArchiveCreationError) as exc_info:
        with staged_file(b"zip-bytes", missing_dir, "bundle.zip"):
            pass

    assert exc_info.value.context["path"].endswith("bundle.zip")
