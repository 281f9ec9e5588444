# src/s3_uploader/archive.py

"""
Zip packaging for the archive upload mode.

Entries are written into an in-memory zip, which is then staged on the
scratch filesystem so it can go through boto3's managed file upload.
"""

import io
import logging
import os
import zipfile
from contextlib import contextmanager
from typing import Iterable, Iterator

from .exceptions import ArchiveCreationError

logger = logging.getLogger(__name__)


def build_zip_archive(entries: Iterable[tuple[str, bytes | str]]) -> bytes:
    """
    Writes each (path, content) pair as a deflated entry and returns the
    archive bytes. Text content is stored UTF-8 encoded.

    *entries* may be lazy; errors raised while producing an entry propagate
    unchanged.
    """
    buffer = io.BytesIO()
    count = 0
    try:
        with zipfile.ZipFile(buffer, mode="w", compression=zipfile.ZIP_DEFLATED) as archive:
            for path, content in entries:
                archive.writestr(path, content)
                count += 1
    except (zipfile.LargeZipFile, ValueError) as e:
        raise ArchiveCreationError(str(e), context={"entries_written": count}) from e

    logger.debug("Built zip archive", extra={"entries": count, "size_bytes": buffer.tell()})
    return buffer.getvalue()


@contextmanager
def staged_file(data: bytes, scratch_dir: str, filename: str) -> Iterator[str]:
    """Writes *data* to ``scratch_dir/filename``, yields the path, then removes it."""
    staged_path = os.path.join(scratch_dir, filename)
    try:
        with open(staged_path, "wb") as f:
            f.write(data)
    except OSError as e:
        raise ArchiveCreationError(
            f"could not stage archive: {e.strerror or e}",
            context={"path": staged_path, "errno": e.errno},
        ) from e

    try:
        yield staged_path
    finally:
        try:
            os.remove(staged_path)
        except FileNotFoundError:
            pass
