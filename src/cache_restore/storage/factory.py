"""Factory for creating an authenticated object store from settings."""

import logging

from botocore.exceptions import BotoCoreError

from ..config import StoreSettings
from ..exceptions import ConfigError
from .base import ObjectStore

log = logging.getLogger(__name__)


def create_object_store(settings: StoreSettings) -> ObjectStore:
    """Create an ObjectStore for the configured bucket.

    Args:
        settings: Bucket, region and optional credentials.

    Returns:
        Configured S3ObjectStore instance.

    Raises:
        ConfigError: If the bucket or region is missing, or the client cannot be constructed.
    """
    if not settings.bucket_name:
        raise ConfigError("bucket must not be empty")
    if not settings.region:
        raise ConfigError("region must not be empty")

    from .s3_client import S3ObjectStore

    log.debug(
        "Creating S3 client: bucket=%s region=%s endpoint=%s static_credentials=%s",
        settings.bucket_name,
        settings.region,
        settings.endpoint_url or "default",
        settings.has_static_credentials,
    )
    try:
        return S3ObjectStore(
            bucket_name=settings.bucket_name,
            region=settings.region,
            endpoint_url=settings.endpoint_url,
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            aws_session_token=settings.aws_session_token,
        )
    except (BotoCoreError, ValueError) as e:
        raise ConfigError(f"failed to load config: {e}", cause=e) from e
