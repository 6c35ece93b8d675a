"""Settings for connecting to the cache bucket."""

import os
from typing import Optional

from pydantic import BaseModel, Field


def _first_env(*names: str) -> Optional[str]:
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return None


class StoreSettings(BaseModel):
    """
    Connection settings for the S3-compatible bucket holding cache archives.

    Static credentials are only used when both the access key id and the
    secret are set; otherwise boto3 resolves credentials from the ambient
    chain (environment, shared config, instance profile).
    """

    bucket_name: str = Field(default="", description="Bucket holding cache archives")
    region: str = Field(default="", description="Bucket region")
    endpoint_url: Optional[str] = Field(
        default=None, description="Custom endpoint for S3-compatible stores"
    )
    aws_access_key_id: Optional[str] = Field(default=None, description="Static access key id")
    aws_secret_access_key: Optional[str] = Field(
        default=None, description="Static secret access key", repr=False
    )
    aws_session_token: Optional[str] = Field(default=None, repr=False)

    @classmethod
    def from_env(cls, **overrides: Optional[str]) -> "StoreSettings":
        """Build settings from environment variables; non-empty *overrides* win."""
        values = {
            "bucket_name": _first_env("S3_BUCKET_NAME", "OBJECT_STORAGE_BUCKET_NAME") or "",
            "region": _first_env("S3_REGION", "AWS_REGION", "AWS_DEFAULT_REGION") or "",
            "endpoint_url": _first_env("S3_ENDPOINT_URL"),
            "aws_access_key_id": _first_env("AWS_ACCESS_KEY_ID"),
            "aws_secret_access_key": _first_env("AWS_SECRET_ACCESS_KEY"),
            "aws_session_token": _first_env("AWS_SESSION_TOKEN"),
        }
        values.update({name: value for name, value in overrides.items() if value})
        return cls(**values)

    @property
    def has_static_credentials(self) -> bool:
        return bool(self.aws_access_key_id and self.aws_secret_access_key)
