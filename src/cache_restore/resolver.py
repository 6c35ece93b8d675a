"""Resolution of prioritized cache keys to an archive in the object store.

Resolution runs in two phases. First every key is probed for an exact
``<key>.tzst`` object, in priority order. Only when all probes report the
object as missing does the prefix fallback run, listing the first result
page for each key in the same order and taking its first entry.

A store failure other than "not found" in either phase aborts resolution:
it means the lookup itself is unreliable, not that the archive is absent.
"""

import logging
import threading
from collections.abc import Sequence

from .exceptions import CacheNotFoundError, OperationCancelledError, StoreTransportError
from .storage.base import ObjectStore
from .storage.exceptions import StorageError

log = logging.getLogger(__name__)

ARCHIVE_SUFFIX = "tzst"
DEFAULT_LIST_TIMEOUT = 5.0


def archive_name(key: str) -> str:
    """Return the object name an archive for *key* is stored under."""
    return f"{key}.{ARCHIVE_SUFFIX}"


def resolve_key(
    keys: Sequence[str],
    store: ObjectStore,
    cancel_event: threading.Event | None = None,
    list_timeout: float = DEFAULT_LIST_TIMEOUT,
) -> str:
    """Return the full object name of the first archive matching *keys*.

    Raises:
        CacheNotFoundError: If neither phase matched any key.
        StoreTransportError: If a probe or listing failed.
        OperationCancelledError: If *cancel_event* was set.
    """
    matched = find_exact_match(keys, store, cancel_event)
    if matched is not None:
        return matched

    log.debug("Could not match provided cache keys, falling back to find archive by prefix...")
    matched = find_prefix_match(keys, store, cancel_event, list_timeout)
    if matched is not None:
        return matched

    raise CacheNotFoundError(list(keys))


def find_exact_match(
    keys: Sequence[str],
    store: ObjectStore,
    cancel_event: threading.Event | None = None,
) -> str | None:
    for key in keys:
        _check_cancelled(cancel_event)
        candidate = archive_name(key)
        try:
            exists = store.object_exists(candidate)
        except StorageError as e:
            raise StoreTransportError(f"probing {candidate!r} failed: {e}", key=candidate, cause=e) from e
        if exists:
            log.info("Cache archive found for key %s", key)
            return candidate
        log.debug("Archive with key %s not found in bucket", key)
    return None


def find_prefix_match(
    keys: Sequence[str],
    store: ObjectStore,
    cancel_event: threading.Event | None = None,
    list_timeout: float = DEFAULT_LIST_TIMEOUT,
) -> str | None:
    for key in keys:
        _check_cancelled(cancel_event)
        try:
            # The first entry of the first page is enough
            entries = store.list_keys(key, max_keys=1, timeout=list_timeout)
        except StorageError as e:
            raise StoreTransportError(f"find artifact for key prefix {key!r}: {e}", key=key, cause=e) from e
        if entries:
            log.info("Cache archive %s found by prefix %s", entries[0], key)
            return entries[0]
        log.debug("No archive found with prefix %s", key)
    return None


def _check_cancelled(cancel_event: threading.Event | None) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise OperationCancelledError("cache key resolution cancelled")
