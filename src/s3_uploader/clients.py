# src/s3_uploader/clients.py

"""
Client wrappers for the services the uploader talks to (S3 and plain HTTP).

These classes provide a small, typed interface over raw boto3 and urllib3
clients and translate their errors into the exceptions defined in
``exceptions.py``, keeping the materialization logic free of SDK details.
"""

import logging
from typing import TYPE_CHECKING, NoReturn

import boto3
from boto3.exceptions import S3UploadFailedError
import urllib3
from botocore.exceptions import ClientError, EndpointConnectionError, ReadTimeoutError

from .exceptions import (
    HttpFetchError,
    S3AccessDeniedError,
    S3ObjectNotFoundError,
    S3OperationError,
    S3ThrottlingError,
    S3TimeoutError,
)

if TYPE_CHECKING:
    from mypy_boto3_s3.client import S3Client as S3ClientType

logger = logging.getLogger(__name__)

_THROTTLING_CODES = {"Throttling", "ThrottlingException", "RequestLimitExceeded", "SlowDown"}
_TIMEOUT_CODES = {"RequestTimeout", "RequestTimeoutException"}


def _raise_translated(
    error: Exception, operation: str, bucket: str, key: str
) -> NoReturn:
    """Maps a botocore error onto our S3 exception types and raises it."""
    if isinstance(error, ClientError):
        error_code = error.response["Error"]["Code"]
        error_message = error.response["Error"].get("Message", "")
        aws_context = {
            "bucket": bucket,
            "key": key,
            "aws_error_code": error_code,
            "aws_error_message": error_message,
        }

        if error_code in ("NoSuchKey", "NoSuchBucket", "404"):
            raise S3ObjectNotFoundError(bucket=bucket, key=key, context=aws_context) from error
        if error_code in ("AccessDenied", "403"):
            raise S3AccessDeniedError(bucket=bucket, key=key, context=aws_context) from error
        if error_code in _THROTTLING_CODES:
            raise S3ThrottlingError(operation, context=aws_context) from error
        if error_code in _TIMEOUT_CODES:
            raise S3TimeoutError(operation, context=aws_context) from error
        raise S3OperationError(operation, error_message or error_code, context=aws_context) from error

    # ReadTimeoutError and EndpointConnectionError
    raise S3TimeoutError(
        operation,
        context={"bucket": bucket, "key": key, "connection_error": str(error)},
    ) from error


class S3Client:
    """
    A wrapper for the S3 operations the uploader needs: reading payload
    sources and writing the materialized objects.
    """

    def __init__(self, s3_client: "S3ClientType"):
        self._client = s3_client

    def get_object_bytes(self, bucket: str, key: str) -> bytes:
        """Reads an S3 object fully into memory."""
        logger.debug("Fetching S3 object", extra={"bucket": bucket, "key": key})
        try:
            response = self._client.get_object(Bucket=bucket, Key=key)
            return response["Body"].read()
        except (ClientError, ReadTimeoutError, EndpointConnectionError) as e:
            _raise_translated(e, "GetObject", bucket, key)

    def put_object(self, bucket: str, key: str, body: bytes | str) -> None:
        logger.info("Uploading object", extra={"bucket": bucket, "key": key})
        try:
            self._client.put_object(Bucket=bucket, Key=key, Body=body)
        except (ClientError, ReadTimeoutError, EndpointConnectionError) as e:
            _raise_translated(e, "PutObject", bucket, key)

    def upload_file(self, file_path: str, bucket: str, key: str) -> None:
        """Uploads a file from disk via the managed (multipart-capable) transfer."""
        logger.info(
            "Uploading file",
            extra={"bucket": bucket, "key": key, "file_path": file_path},
        )
        try:
            self._client.upload_file(Filename=file_path, Bucket=bucket, Key=key)
        except (ClientError, ReadTimeoutError, EndpointConnectionError) as e:
            _raise_translated(e, "UploadFile", bucket, key)
        # upload_file wraps failures in boto3's S3UploadFailedError
        except S3UploadFailedError as e:
            raise S3OperationError(
                "UploadFile", str(e), context={"bucket": bucket, "key": key}
            ) from e


class S3ClientFactory:
    """
    Hands out one S3Client per region, reused for the lifetime of the
    execution environment.
    """

    def __init__(self, session: boto3.session.Session | None = None):
        self._session = session or boto3.session.Session()
        self._clients: dict[str, S3Client] = {}

    def for_region(self, region: str) -> S3Client:
        if region not in self._clients:
            logger.debug("Creating S3 client", extra={"region": region})
            self._clients[region] = S3Client(
                s3_client=self._session.client("s3", region_name=region)
            )
        return self._clients[region]


class HttpClient:
    """A thin GET-and-return-body wrapper around a urllib3 PoolManager."""

    def __init__(
        self,
        pool: urllib3.PoolManager | None = None,
        timeout_seconds: float = 30.0,
    ):
        self._pool = pool or urllib3.PoolManager()
        self._timeout = urllib3.Timeout(total=timeout_seconds)

    def get_content(self, url: str) -> bytes:
        """Fetches *url* (following redirects) and returns the body bytes."""
        logger.debug("Fetching URL", extra={"url": url})
        try:
            response = self._pool.request("GET", url, timeout=self._timeout)
        except urllib3.exceptions.HTTPError as e:
            raise HttpFetchError(url, str(e)) from e

        if not 200 <= response.status < 300:
            raise HttpFetchError(
                url, f"unexpected status {response.status}", status=response.status
            )
        return response.data
