"""Download of a resolved archive with bounded whole-transfer retries."""

import logging
import os
import threading
from pathlib import Path

from .exceptions import AllRetriesFailedError, OperationCancelledError
from .storage.base import ObjectStore
from .storage.exceptions import StorageError

log = logging.getLogger(__name__)

DEFAULT_PART_SIZE = 50 * 1024 * 1024  # 50MB
DEFAULT_RETRY_WAIT = 5.0


class RetryingDownloader:
    """Transfers one object to a local file, restarting the whole transfer on failure.

    Makes ``max_retries + 1`` attempts at most, waiting ``retry_wait``
    seconds between them. The wait is done on *cancel_event*, so setting it
    aborts a pending retry immediately. Each attempt truncates the
    destination file; nothing is resumed from a previous attempt.
    """

    def __init__(
        self,
        store: ObjectStore,
        max_retries: int,
        retry_wait: float = DEFAULT_RETRY_WAIT,
        part_size: int = DEFAULT_PART_SIZE,
        concurrency: int | None = None,
        cancel_event: threading.Event | None = None,
    ):
        if max_retries < 0:
            raise ValueError(f"max_retries must not be negative, got {max_retries}")
        self._store = store
        self._max_retries = max_retries
        self._retry_wait = retry_wait
        self._part_size = part_size
        self._concurrency = concurrency or os.cpu_count() or 1
        self._cancel = cancel_event or threading.Event()

    @property
    def max_attempts(self) -> int:
        return self._max_retries + 1

    def download(self, key: str, destination: str | Path) -> Path:
        """Download *key* into *destination* and return the destination path.

        Raises:
            AllRetriesFailedError: If every attempt failed; chained to the last cause.
            OperationCancelledError: If the cancellation event was set.
        """
        path = Path(destination)
        last_error: Exception | None = None

        for attempt in range(1, self.max_attempts + 1):
            if self._cancel.is_set():
                raise OperationCancelledError(f"download of {key!r} cancelled", cause=last_error) from last_error
            try:
                self._attempt(key, path)
                log.info("Downloaded %s to %s (attempt %d/%d)", key, path, attempt, self.max_attempts)
                return path
            except (OSError, StorageError) as e:
                if self._cancel.is_set():
                    raise OperationCancelledError(f"download of {key!r} cancelled", cause=e) from e
                last_error = e
                log.warning("Download attempt %d/%d for %s failed: %s", attempt, self.max_attempts, key, e)

            if attempt < self.max_attempts and self._cancel.wait(self._retry_wait):
                raise OperationCancelledError(f"download of {key!r} cancelled", cause=last_error) from last_error

        raise AllRetriesFailedError(key, self.max_attempts, cause=last_error) from last_error

    def _attempt(self, key: str, path: Path) -> None:
        with path.open("wb") as fileobj:
            self._store.download_to_file(
                key,
                fileobj,
                part_size=self._part_size,
                concurrency=self._concurrency,
                cancel_event=self._cancel,
            )
