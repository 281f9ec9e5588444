# tests/unit/test_naming.py

import hashlib
import re

from s3_uploader.naming import (
    ArchiveName,
    archive_hash_prefix,
    file_spec_digest,
    generate_archive_name,
)

FILES = ["a.txt:plain://alpha", "b.txt:aGVsbG8="]


def test_file_spec_digest_covers_whole_declaration():
    """The destination path is part of the hashed string."""
    assert file_spec_digest("a.txt:plain://x") == hashlib.md5(b"a.txt:plain://x").hexdigest()
    assert file_spec_digest("a.txt:plain://x") != file_spec_digest("b.txt:plain://x")


def test_archive_hash_prefix_is_md5_of_joined_digests():
    joined = "".join(hashlib.md5(spec.encode()).hexdigest() for spec in FILES)
    assert archive_hash_prefix(FILES) == hashlib.md5(joined.encode()).hexdigest()


def test_archive_hash_prefix_is_deterministic():
    assert archive_hash_prefix(list(FILES)) == archive_hash_prefix(list(FILES))


def test_archive_hash_prefix_depends_on_order_and_content():
    assert archive_hash_prefix(FILES) != archive_hash_prefix(list(reversed(FILES)))
    assert archive_hash_prefix(FILES) != archive_hash_prefix(FILES + ["c.txt:plain://"])


def test_generate_archive_name_shape():
    name = generate_archive_name(FILES)

    assert name.hash == archive_hash_prefix(FILES)
    assert re.fullmatch(r"[a-z]{24}", name.suffix)
    assert name.extension == ".zip"
    assert name.filename == f"{name.hash}{name.suffix}.zip"


def test_identical_content_gets_distinct_filenames():
    first, second = generate_archive_name(FILES), generate_archive_name(FILES)
    assert first.hash == second.hash
    assert first.filename != second.filename


def test_archive_name_filename():
    assert ArchiveName(hash="abc", suffix="xyz").filename == "abcxyz.zip"
