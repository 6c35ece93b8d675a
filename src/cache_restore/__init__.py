"""Restore CI cache archives from S3 by prioritized cache keys."""

__version__ = "0.1.0"

from .config import StoreSettings
from .downloader import RetryingDownloader
from .exceptions import (
    AllRetriesFailedError,
    CacheNotFoundError,
    CacheRestoreError,
    ConfigError,
    InvalidKeyError,
    KeyValidationError,
    NoKeysProvidedError,
    OperationCancelledError,
    StoreTransportError,
    TooManyKeysError,
)
from .keys import validate_keys
from .models import DownloadRequest, DownloadResult
from .resolver import resolve_key
from .service import CacheDownloadService

__all__ = [
    "AllRetriesFailedError",
    "CacheDownloadService",
    "CacheNotFoundError",
    "CacheRestoreError",
    "ConfigError",
    "DownloadRequest",
    "DownloadResult",
    "InvalidKeyError",
    "KeyValidationError",
    "NoKeysProvidedError",
    "OperationCancelledError",
    "RetryingDownloader",
    "StoreSettings",
    "StoreTransportError",
    "TooManyKeysError",
    "resolve_key",
    "validate_keys",
]
