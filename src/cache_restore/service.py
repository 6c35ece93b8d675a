"""Restore a cache archive from an S3 bucket based on prioritized keys."""

import logging
import threading
from typing import Callable, Optional

from .config import StoreSettings
from .downloader import DEFAULT_PART_SIZE, DEFAULT_RETRY_WAIT, RetryingDownloader
from .exceptions import ConfigError
from .keys import validate_keys
from .models import DownloadRequest, DownloadResult
from .resolver import DEFAULT_LIST_TIMEOUT, resolve_key
from .storage.base import ObjectStore
from .storage.factory import create_object_store

log = logging.getLogger(__name__)


class CacheDownloadService:
    """Validates keys, resolves the best matching archive and downloads it.

    The store is built lazily by *store_factory* after the keys and bucket
    have been validated, so configuration errors never cost a network call.
    Pass ``store_factory`` to substitute a different ObjectStore.
    """

    def __init__(
        self,
        settings: StoreSettings,
        store_factory: Callable[[StoreSettings], ObjectStore] = create_object_store,
        retry_wait: float = DEFAULT_RETRY_WAIT,
        list_timeout: float = DEFAULT_LIST_TIMEOUT,
        part_size: int = DEFAULT_PART_SIZE,
        concurrency: Optional[int] = None,
    ):
        self._settings = settings
        self._store_factory = store_factory
        self._retry_wait = retry_wait
        self._list_timeout = list_timeout
        self._part_size = part_size
        self._concurrency = concurrency

    def download(
        self,
        request: DownloadRequest,
        cancel_event: Optional[threading.Event] = None,
    ) -> DownloadResult:
        """Restore the first archive matching ``request.cache_keys``.

        Raises:
            KeyValidationError: If the keys are invalid.
            ConfigError: If the bucket, region or credentials are unusable.
            StoreTransportError: If a lookup failed.
            CacheNotFoundError: If no key matched.
            AllRetriesFailedError: If the transfer kept failing.
            OperationCancelledError: If *cancel_event* was set.
        """
        keys = validate_keys(request.cache_keys)
        if not self._settings.bucket_name:
            raise ConfigError("bucket must not be empty")

        store = self._store_factory(self._settings)

        matched_key = resolve_key(keys, store, cancel_event=cancel_event, list_timeout=self._list_timeout)
        log.info("Restoring cache archive %s from bucket %s", matched_key, self._settings.bucket_name)

        downloader = RetryingDownloader(
            store,
            max_retries=request.num_full_retries,
            retry_wait=self._retry_wait,
            part_size=self._part_size,
            concurrency=self._concurrency,
            cancel_event=cancel_event,
        )
        path = downloader.download(matched_key, request.download_path)
        return DownloadResult(matched_key=matched_key, download_path=path)
