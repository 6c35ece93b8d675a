"""Read-only object store access for cache archives."""

from .base import ObjectStore
from .exceptions import (
    StorageConnectionError,
    StorageError,
    StorageNotFoundError,
    StoragePermissionError,
    StorageTimeoutError,
)
from .factory import create_object_store

__all__ = [
    "ObjectStore",
    "StorageError",
    "StorageNotFoundError",
    "StoragePermissionError",
    "StorageConnectionError",
    "StorageTimeoutError",
    "create_object_store",
]
