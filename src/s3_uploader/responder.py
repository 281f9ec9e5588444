# src/s3_uploader/responder.py

"""
CloudFormation custom resource responses.

CloudFormation waits for the handler to PUT a JSON document to the pre-signed
``ResponseURL`` carried by every lifecycle event. The stack operation only
proceeds once that document arrives.
"""

import json
import logging
from typing import Any

import urllib3
from aws_lambda_powertools.utilities.typing import LambdaContext

from .exceptions import ResponseDeliveryError

logger = logging.getLogger(__name__)

SUCCESS = "SUCCESS"
FAILED = "FAILED"


def build_response_body(
    event: dict[str, Any],
    context: LambdaContext,
    status: str,
    data: dict[str, Any] | None = None,
) -> dict[str, Any]:
    # Keeping the existing id on Update/Delete stops CloudFormation from
    # treating the resource as replaced.
    physical_resource_id = event.get("PhysicalResourceId") or context.log_stream_name
    return {
        "Status": status,
        "Reason": f"See the details in CloudWatch Log Stream: {context.log_stream_name}",
        "PhysicalResourceId": physical_resource_id,
        "StackId": event.get("StackId"),
        "RequestId": event.get("RequestId"),
        "LogicalResourceId": event.get("LogicalResourceId"),
        "NoEcho": False,
        "Data": data or {},
    }


class CloudFormationResponder:
    """Delivers the outcome of one invocation to CloudFormation."""

    def __init__(self, pool: urllib3.PoolManager | None = None, timeout_seconds: float = 30.0):
        self._pool = pool or urllib3.PoolManager()
        self._timeout = urllib3.Timeout(total=timeout_seconds)

    def send(
        self,
        event: dict[str, Any],
        context: LambdaContext,
        status: str,
        data: dict[str, Any] | None = None,
    ) -> None:
        response_url = event.get("ResponseURL")
        if not response_url:
            raise ResponseDeliveryError(status, "event has no ResponseURL")

        body = json.dumps(
            build_response_body(event, context, status, data)
        ).encode("utf-8")
        # The pre-signed URL is signed for an empty content-type.
        headers = {"content-type": "", "content-length": str(len(body))}

        logger.info("Sending CloudFormation response", extra={"status": status})
        try:
            response = self._pool.request(
                "PUT", response_url, body=body, headers=headers, timeout=self._timeout
            )
        except urllib3.exceptions.HTTPError as e:
            raise ResponseDeliveryError(status, str(e)) from e

        if not 200 <= response.status < 300:
            raise ResponseDeliveryError(status, f"unexpected status {response.status}")
        logger.debug("CloudFormation response delivered", extra={"http_status": response.status})
