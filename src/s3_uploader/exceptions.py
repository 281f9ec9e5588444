# src/s3_uploader/exceptions.py

"""
Shared custom exceptions for the S3 File Uploader.

Centralizing exception definitions in a separate module prevents circular
import errors between other modules that need to raise or catch them.

Exception Hierarchy:
- S3UploaderError (base)
  - RetryableError (a later invocation may succeed)
    - S3ThrottlingError
    - S3TimeoutError
    - HttpFetchError
  - NonRetryableError (the request itself is wrong)
    - ValidationError
      - InvalidEventError
      - MissingPropertyError
      - InvalidFileSpecError
      - InvalidPayloadSpecError
    - ConfigurationError
    - S3AccessDeniedError
    - S3ObjectNotFoundError
  - S3OperationError
  - ArchiveCreationError
  - ResponseDeliveryError
"""

from typing import Any, Dict, Optional


class S3UploaderError(Exception):
    """Base exception for all S3 File Uploader errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.context = dict(context) if context else {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for structured logging."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "error_message": self.message,
            "context": self.context,
            "retryable": isinstance(self, RetryableError),
        }


class RetryableError(S3UploaderError):
    """Base class for errors a later invocation may not hit again."""
    pass


class NonRetryableError(S3UploaderError):
    """Base class for errors caused by the request itself."""
    pass


# === Validation Errors ===

class ValidationError(NonRetryableError):
    """Base class for validation errors."""
    pass


class InvalidEventError(ValidationError):
    """Raised when the lifecycle event envelope cannot be parsed."""

    def __init__(self, message: str, **kwargs):
        if "error_code" not in kwargs:
            kwargs["error_code"] = "INVALID_EVENT"
        super().__init__(message, **kwargs)


class MissingPropertyError(ValidationError):
    """Raised when a resource property required for Create/Update is absent."""

    def __init__(self, property_name: str, message: Optional[str] = None, **kwargs):
        message = message or f"{property_name} required"
        context = {"property": property_name}
        super().__init__(message, error_code="MISSING_PROPERTY", context=context, **kwargs)


class InvalidFileSpecError(ValidationError):
    """Raised when a file declaration has no '<path>:<payload>' separator."""

    def __init__(self, file_spec: str, **kwargs):
        message = "File declaration must look like '<path>:<payload>'"
        # Payloads can be large inline blobs, keep only the head for logs.
        context = {"file_spec": file_spec[:64]}
        super().__init__(message, error_code="INVALID_FILE_SPEC", context=context, **kwargs)


class InvalidPayloadSpecError(ValidationError):
    """Raised when a payload spec has a known prefix but a malformed body."""

    def __init__(self, payload_spec: str, reason: str, **kwargs):
        message = f"Invalid payload spec: {reason}"
        context = {"payload_spec": payload_spec[:64], "reason": reason}
        super().__init__(message, error_code="INVALID_PAYLOAD_SPEC", context=context, **kwargs)


# === Configuration Errors ===

class ConfigurationError(NonRetryableError):
    """Raised when there's an error in the application configuration."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, error_code="CONFIGURATION_ERROR", **kwargs)


# === S3-Related Errors ===

class S3Error(S3UploaderError):
    """Base class for S3-related errors."""
    pass


class S3ObjectNotFoundError(S3Error, NonRetryableError):
    """Raised when a requested S3 object does not exist."""

    def __init__(self, bucket: str, key: str, **kwargs):
        message = f"S3 object not found: s3://{bucket}/{key}"
        context = {"bucket": bucket, "key": key}
        context.update(kwargs.pop("context", {}))
        super().__init__(message, error_code="S3_OBJECT_NOT_FOUND", context=context, **kwargs)


class S3AccessDeniedError(S3Error, NonRetryableError):
    """Raised when access is denied to an S3 bucket or object."""

    def __init__(self, bucket: str, key: str, **kwargs):
        message = f"Access denied to S3 object: s3://{bucket}/{key}"
        context = {"bucket": bucket, "key": key}
        context.update(kwargs.pop("context", {}))
        super().__init__(message, error_code="S3_ACCESS_DENIED", context=context, **kwargs)


class S3ThrottlingError(S3Error, RetryableError):
    """Raised when S3 operations are being throttled."""

    def __init__(self, operation: str, **kwargs):
        message = f"S3 operation throttled: {operation}"
        context = {"operation": operation}
        context.update(kwargs.pop("context", {}))
        super().__init__(message, error_code="S3_THROTTLING", context=context, **kwargs)


class S3TimeoutError(S3Error, RetryableError):
    """Raised when S3 operations time out or the endpoint is unreachable."""

    def __init__(self, operation: str, **kwargs):
        message = f"S3 operation timed out: {operation}"
        context = {"operation": operation}
        context.update(kwargs.pop("context", {}))
        super().__init__(message, error_code="S3_TIMEOUT", context=context, **kwargs)


class S3OperationError(S3Error):
    """Raised for any other S3 client error."""

    def __init__(self, operation: str, reason: str, **kwargs):
        message = f"S3 {operation} failed: {reason}"
        context = {"operation": operation}
        context.update(kwargs.pop("context", {}))
        super().__init__(message, error_code="S3_OPERATION_FAILED", context=context, **kwargs)


# === Processing Errors ===

class HttpFetchError(RetryableError):
    """Raised when an http(s) payload cannot be fetched."""

    def __init__(self, url: str, reason: str, status: Optional[int] = None, **kwargs):
        message = f"Failed to fetch {url}: {reason}"
        context = {"url": url, "status": status}
        super().__init__(message, error_code="HTTP_FETCH_FAILED", context=context, **kwargs)


class ArchiveCreationError(S3UploaderError):
    """Raised when the zip archive cannot be built or staged."""

    def __init__(self, reason: str, **kwargs):
        message = f"Archive creation failed: {reason}"
        context = {"reason": reason}
        context.update(kwargs.pop("context", {}))
        super().__init__(message, error_code="ARCHIVE_CREATION_FAILED", context=context, **kwargs)


class ResponseDeliveryError(S3UploaderError):
    """Raised when the CloudFormation response cannot be delivered."""

    def __init__(self, status: str, reason: str, **kwargs):
        message = f"Failed to deliver {status} response: {reason}"
        context = {"status": status}
        super().__init__(message, error_code="RESPONSE_DELIVERY_FAILED", context=context, **kwargs)


# === Utility Functions ===

def get_error_context(error: Exception) -> Dict[str, Any]:
    """Extract error context for logging."""
    if isinstance(error, S3UploaderError):
        return error.to_dict()
    else:
        return {
            "error_type": error.__class__.__name__,
            "error_message": str(error),
            "retryable": False,  # Unknown errors default to non-retryable
        }
