"""
Archive naming.

An archive name is a content-derived hash prefix, a random suffix and the
``.zip`` extension. The prefix is the MD5 of the concatenated per-declaration
MD5 digests, so identical declaration lists always share it, while the suffix
keeps concurrent invocations with identical content from colliding.
"""

import hashlib
import secrets
import string
from typing import NamedTuple, Sequence

ARCHIVE_EXTENSION = ".zip"
SUFFIX_LENGTH = 24


class ArchiveName(NamedTuple):
    hash: str
    suffix: str
    extension: str = ARCHIVE_EXTENSION

    @property
    def filename(self) -> str:
        return f"{self.hash}{self.suffix}{self.extension}"


def file_spec_digest(file_spec: str) -> str:
    """MD5 hex digest of a whole ``<path>:<payload>`` declaration."""
    # Naming only, not a security boundary.
    return hashlib.md5(file_spec.encode("utf-8"), usedforsecurity=False).hexdigest()


def archive_hash_prefix(file_specs: Sequence[str]) -> str:
    digests = "".join(file_spec_digest(spec) for spec in file_specs)
    return hashlib.md5(digests.encode("ascii"), usedforsecurity=False).hexdigest()


def random_suffix(length: int = SUFFIX_LENGTH) -> str:
    return "".join(secrets.choice(string.ascii_lowercase) for _ in range(length))


def generate_archive_name(file_specs: Sequence[str]) -> ArchiveName:
    return ArchiveName(hash=archive_hash_prefix(file_specs), suffix=random_suffix())
