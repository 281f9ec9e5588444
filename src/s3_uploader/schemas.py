# In src/s3_uploader/schemas.py

from enum import Enum
from typing import Any

import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .exceptions import InvalidEventError, InvalidFileSpecError, MissingPropertyError


class RequestType(str, Enum):
    CREATE = "Create"
    UPDATE = "Update"
    DELETE = "Delete"


def parse_zip_flag(value: Any) -> bool:
    """
    Three-state parse of the ``Zip`` property.

    Absent (None) means True, booleans are taken as given, and only the exact
    string ``"false"`` turns zipping off. Every other value means True.
    """
    if value is None:
        return True
    if isinstance(value, bool):
        return value
    return value != "false"


class FileSpec(BaseModel):
    """
    One ``<destinationPath>:<payloadSpec>`` declaration.

    ``raw`` keeps the untouched declaration since archive names are hashed
    over the whole string, path included.
    """

    model_config = ConfigDict(frozen=True)

    raw: str
    path: str
    payload: str

    @classmethod
    def parse(cls, raw: str) -> "FileSpec":
        # Only the first colon separates; payloads such as URLs contain more.
        path, separator, payload = raw.partition(":")
        if not separator:
            raise InvalidFileSpecError(raw)
        return cls(raw=raw, path=path, payload=payload)


class ResourceProperties(BaseModel):
    """
    Pydantic model for the ``ResourceProperties`` of a Create/Update event.

    Unknown keys such as CloudFormation's ``ServiceToken`` are ignored.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    files: list[str] | None = Field(None, alias="Files")
    upload_bucket: str | None = Field(None, alias="UploadBucket")
    aws_region: str | None = Field(None, alias="AWSRegion")
    s3_key: str | None = Field(None, alias="S3Key")
    zip: bool = Field(True, alias="Zip")

    @field_validator("zip", mode="before")
    @classmethod
    def validate_zip_flag(cls, value: Any) -> bool:
        return parse_zip_flag(value)

    @classmethod
    def from_raw(cls, raw: Any) -> "ResourceProperties":
        """Validates raw properties, raising our own InvalidEventError on failure."""
        try:
            return cls.model_validate(raw or {})
        except pydantic.ValidationError as e:
            raise InvalidEventError(
                "ResourceProperties failed validation",
                context={"validation_errors": e.errors(include_url=False)},
            ) from e

    def require_target(self) -> tuple[str, str]:
        """Returns (bucket, region), raising when it or Files is missing."""
        if not self.upload_bucket:
            raise MissingPropertyError("UploadBucket", "Bucket required")
        if not self.aws_region:
            raise MissingPropertyError("AWSRegion", "Region required")
        if self.files is None:
            raise MissingPropertyError("Files", "Files required")
        return self.upload_bucket, self.aws_region

    def file_specs(self) -> list[FileSpec]:
        return [FileSpec.parse(raw) for raw in self.files or []]


class LifecycleEvent(BaseModel):
    """
    The parts of a CloudFormation custom resource event the handler branches on.

    Properties are left raw here: a Delete must succeed even when they are
    malformed, so they are only validated for Create and Update.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    request_type: RequestType = Field(..., alias="RequestType")
    resource_properties: Any = Field(None, alias="ResourceProperties")

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> "LifecycleEvent":
        try:
            return cls.model_validate(raw)
        except pydantic.ValidationError as e:
            raise InvalidEventError(
                "Lifecycle event failed validation",
                context={"validation_errors": e.errors(include_url=False)},
            ) from e
