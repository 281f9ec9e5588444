"""
The Lambda entry point for the S3 File Uploader custom resource.

This module is responsible for:
1.  Initializing and configuring AWS Lambda Powertools (Logger, Tracer and
    Metrics).
2.  Branching on the CloudFormation lifecycle verb. Delete is a no-op;
    Create and Update materialize the declared files into S3.
3.  Acting as the single failure boundary: any error on the Create/Update
    path is logged, throttled by a fixed delay and reported as FAILED.
4.  Reporting exactly one outcome per invocation back to CloudFormation.
"""

import time
from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from .clients import HttpClient, S3ClientFactory
from .config import get_config
from .core import materialize_files
from .exceptions import get_error_context
from .responder import FAILED, SUCCESS, CloudFormationResponder
from .schemas import LifecycleEvent, RequestType, ResourceProperties

# --- Global & Reusable Components ---
CONFIG = get_config()

logger = Logger(service=CONFIG.service_name, level=CONFIG.log_level)
tracer = Tracer(service=CONFIG.service_name)
metrics = Metrics(namespace=CONFIG.metrics_namespace, service=CONFIG.service_name)

s3_clients = S3ClientFactory()
http_client = HttpClient(timeout_seconds=CONFIG.http_timeout_seconds)
responder = CloudFormationResponder()


@tracer.capture_method
def _create_or_update(lifecycle_event: LifecycleEvent) -> dict[str, Any]:
    properties = ResourceProperties.from_raw(lifecycle_event.resource_properties)
    result = materialize_files(properties, s3_clients, http_client, CONFIG)

    metrics.add_metric(name="FilesMaterialized", unit=MetricUnit.Count, value=len(result.keys))
    if result.archive_key is not None:
        metrics.add_metric(name="ArchivesUploaded", unit=MetricUnit.Count, value=1)

    logger.info("Files materialized", extra={"location": result.message})
    return {"Message": result.message}


def _report_failure(event: dict, context: LambdaContext, error: Exception) -> None:
    """Must be called from an ``except`` block so the traceback is logged."""
    metrics.add_metric(name="FailedInvocations", unit=MetricUnit.Count, value=1)
    logger.exception(f"Custom resource request failed: {error}", extra=get_error_context(error))

    # Throttles the caller's retries; nothing is retried here.
    time.sleep(CONFIG.failure_delay_seconds)
    responder.send(event, context, FAILED)


@logger.inject_lambda_context(log_event=True, clear_state=True)
@tracer.capture_lambda_handler
@metrics.log_metrics(capture_cold_start_metric=True)
def handler(event: dict, context: LambdaContext) -> None:
    """Main Lambda handler for CloudFormation custom resource events."""
    try:
        lifecycle_event = LifecycleEvent.from_raw(event)
        logger.append_keys(request_type=lifecycle_event.request_type.value)

        if lifecycle_event.request_type is RequestType.DELETE:
            # Uploaded objects are not tracked, so there is nothing to remove.
            logger.info("Delete requested; leaving uploaded objects in place.")
            data = None
        else:
            data = _create_or_update(lifecycle_event)
    except Exception as e:
        _report_failure(event, context, e)
        return

    responder.send(event, context, SUCCESS, data)
