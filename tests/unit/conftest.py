"""
Shared fixtures for unit tests.
"""

from __future__ import annotations

import os
import uuid
from unittest.mock import MagicMock

import pytest

# The handler module builds its Powertools objects at import time, so the
# environment has to be in place before any test module imports it.
os.environ.setdefault("AWS_DEFAULT_REGION", "eu-west-1")
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "true")
os.environ.setdefault("SERVICE_NAME", "s3-file-uploader-test")
os.environ.setdefault("METRICS_NAMESPACE", "S3FileUploaderTest")


# ---------- Minimal, realistic dummy events ---------- #
@pytest.fixture
def create_event() -> dict:
    """A CloudFormation Create event declaring two files."""
    return {
        "RequestType": "Create",
        "ResponseURL": "https://cloudformation-custom-resource-response.example.com/signed",
        "StackId": "arn:aws:cloudformation:eu-west-1:000000000000:stack/demo/guid",
        "RequestId": str(uuid.uuid4()),
        "ResourceType": "Custom::S3FileUploader",
        "LogicalResourceId": "ConfigFiles",
        "ResourceProperties": {
            "ServiceToken": "arn:aws:lambda:eu-west-1:000000000000:function:uploader",
            "UploadBucket": "target-bucket",
            "AWSRegion": "eu-west-1",
            "Files": [
                "config/app.json:plain://{\"debug\": false}",
                "bin/hello.txt:aGVsbG8=",
            ],
        },
    }


@pytest.fixture
def delete_event(create_event) -> dict:
    event = dict(create_event)
    event["RequestType"] = "Delete"
    event["PhysicalResourceId"] = "existing-physical-id"
    return event


@pytest.fixture
def lambda_context() -> MagicMock:
    """A stand-in for the LambdaContext object."""
    context = MagicMock()
    context.function_name = "s3-file-uploader"
    context.memory_limit_in_mb = 128
    context.invoked_function_arn = "arn:aws:lambda:eu-west-1:000000000000:function:uploader"
    context.aws_request_id = "req-" + uuid.uuid4().hex
    context.log_stream_name = "2026/10/19/[$LATEST]abcdef"
    context.get_remaining_time_in_millis.return_value = 300_000
    return context
