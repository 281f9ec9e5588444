# src/s3_uploader/core.py

"""
Core business logic for materializing declared files into S3.

Its main entry point, `materialize_files`, takes the validated properties of
a Create/Update event, resolves every declared file and uploads the result
either as one zip archive or as individual objects.
"""

import logging
from dataclasses import dataclass, field
from functools import partial
from typing import Callable, Sequence

from .archive import build_zip_archive, staged_file
from .clients import HttpClient, S3Client, S3ClientFactory
from .config import AppConfig
from .naming import ArchiveName, generate_archive_name
from .payloads import resolve_payload
from .schemas import FileSpec, ResourceProperties

logger = logging.getLogger(__name__)

Resolver = Callable[[str], bytes | str]


@dataclass(frozen=True)
class MaterializationResult:
    bucket: str
    keys: list[str] = field(default_factory=list)
    archive_key: str | None = None

    @property
    def message(self) -> str:
        """Location reported back to CloudFormation."""
        if self.archive_key is None:
            return self.bucket
        return f"{self.bucket}/{self.archive_key}"


def upload_as_archive(
    file_specs: Sequence[FileSpec],
    bucket: str,
    s3_client: S3Client,
    resolve: Resolver,
    archive_name: ArchiveName,
    scratch_dir: str,
    s3_key: str | None = None,
) -> MaterializationResult:
    """Packs every file into one zip and uploads it under *s3_key* or the archive filename."""
    archive_bytes = build_zip_archive(
        (spec.path, resolve(spec.payload)) for spec in file_specs
    )
    final_key = s3_key or archive_name.filename

    with staged_file(archive_bytes, scratch_dir, archive_name.filename) as staged_path:
        s3_client.upload_file(staged_path, bucket, final_key)

    logger.info(
        "Uploaded archive",
        extra={
            "bucket": bucket,
            "key": final_key,
            "entries": len(file_specs),
            "size_bytes": len(archive_bytes),
        },
    )
    return MaterializationResult(
        bucket=bucket,
        keys=[spec.path for spec in file_specs],
        archive_key=final_key,
    )


def upload_individually(
    file_specs: Sequence[FileSpec],
    bucket: str,
    s3_client: S3Client,
    resolve: Resolver,
) -> MaterializationResult:
    """Puts each file to the object key equal to its declared path."""
    for spec in file_specs:
        s3_client.put_object(bucket, spec.path, resolve(spec.payload))

    logger.info(
        "Uploaded files individually",
        extra={"bucket": bucket, "files": len(file_specs)},
    )
    return MaterializationResult(bucket=bucket, keys=[spec.path for spec in file_specs])


def materialize_files(
    properties: ResourceProperties,
    s3_clients: S3ClientFactory,
    http_client: HttpClient,
    config: AppConfig,
) -> MaterializationResult:
    """
    Validates the target, resolves every declared file and uploads it.
    Raises on the first failure; nothing already uploaded is rolled back.
    """
    bucket, region = properties.require_target()
    # Named up front from the raw declarations even when not zipping.
    archive_name = generate_archive_name(properties.files)
    file_specs = properties.file_specs()

    resolve = partial(
        resolve_payload,
        s3_clients=s3_clients,
        http_client=http_client,
        substitute_errors=config.substitute_resolution_errors,
    )
    target_client = s3_clients.for_region(region)

    logger.info(
        "Materializing files",
        extra={
            "bucket": bucket,
            "region": region,
            "files": len(file_specs),
            "zip": properties.zip,
        },
    )

    if properties.zip:
        return upload_as_archive(
            file_specs,
            bucket,
            target_client,
            resolve,
            archive_name,
            config.scratch_dir,
            s3_key=properties.s3_key,
        )

    if properties.s3_key:
        logger.warning(
            "S3Key is ignored when Zip is false; files are uploaded under their own paths.",
            extra={"s3_key": properties.s3_key},
        )
    return upload_individually(file_specs, bucket, target_client, resolve)
