# src/s3_uploader/payloads.py

"""
Payload resolution.

The payload half of a file declaration selects where the file's content comes
from by its prefix:

- ``http://`` / ``https://``: fetched with a GET request
- ``s3://<region>/<bucket>/<key>``: read from S3 (the key may contain ``/``)
- ``plain://<text>``: the text itself
- anything else: base64-encoded bytes
"""

import base64
import logging
import re
from enum import Enum

from .clients import HttpClient, S3ClientFactory
from .exceptions import InvalidPayloadSpecError, get_error_context

logger = logging.getLogger(__name__)

S3_PREFIX = "s3://"
PLAIN_PREFIX = "plain://"

_HTTP_PATTERN = re.compile(r"^https?://")
_NON_BASE64_CHARS = re.compile(r"[^A-Za-z0-9+/]")


class PayloadKind(str, Enum):
    HTTP = "http"
    S3 = "s3"
    PLAIN = "plain"
    BASE64 = "base64"


def classify_payload(payload_spec: str) -> PayloadKind:
    if _HTTP_PATTERN.match(payload_spec):
        return PayloadKind.HTTP
    if payload_spec.startswith(S3_PREFIX):
        return PayloadKind.S3
    if payload_spec.startswith(PLAIN_PREFIX):
        return PayloadKind.PLAIN
    return PayloadKind.BASE64


def parse_s3_location(payload_spec: str) -> tuple[str, str, str]:
    """Splits ``s3://region/bucket/key`` into (region, bucket, key)."""
    parts = payload_spec[len(S3_PREFIX):].split("/", 2)
    if len(parts) != 3 or not all(parts):
        raise InvalidPayloadSpecError(
            payload_spec, "expected s3://<region>/<bucket>/<key>"
        )
    region, bucket, key = parts
    return region, bucket, key


def decode_base64_leniently(encoded: str) -> bytes:
    """
    Decodes base64 without ever rejecting the input.

    Decoding stops at the first padding character and skips anything outside
    the base64 alphabet. Malformed input yields whatever bytes can be
    recovered instead of an error.
    """
    cleaned = _NON_BASE64_CHARS.sub("", encoded.split("=", 1)[0])
    usable = len(cleaned) - (len(cleaned) % 4 == 1)
    cleaned = cleaned[:usable]
    return base64.b64decode(cleaned + "=" * (-len(cleaned) % 4))


def _resolve(
    payload_spec: str, s3_clients: S3ClientFactory, http_client: HttpClient
) -> bytes | str:
    kind = classify_payload(payload_spec)
    logger.debug("Resolving payload", extra={"payload_kind": kind.value})

    if kind is PayloadKind.HTTP:
        return http_client.get_content(payload_spec)
    if kind is PayloadKind.S3:
        region, bucket, key = parse_s3_location(payload_spec)
        return s3_clients.for_region(region).get_object_bytes(bucket, key)
    if kind is PayloadKind.PLAIN:
        return payload_spec[len(PLAIN_PREFIX):]
    return decode_base64_leniently(payload_spec)


def resolve_payload(
    payload_spec: str,
    s3_clients: S3ClientFactory,
    http_client: HttpClient,
    substitute_errors: bool = False,
) -> bytes | str:
    """
    Returns the content a payload spec points at.

    Resolution errors propagate. With *substitute_errors* the error's
    description becomes the content instead, which is how deployments built
    against the legacy handler behave.
    """
    if not substitute_errors:
        return _resolve(payload_spec, s3_clients, http_client)

    try:
        return _resolve(payload_spec, s3_clients, http_client)
    except Exception as e:
        logger.warning(
            "Payload resolution failed; substituting the error as content",
            extra=get_error_context(e),
        )
        return str(e)
