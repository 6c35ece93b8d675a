"""Read-only object store capability used by key resolution and download."""

import threading
from abc import ABC, abstractmethod
from typing import BinaryIO


class ObjectStore(ABC):
    """Minimal read-only interface for locating and fetching cache archives."""

    @abstractmethod
    def object_exists(self, key: str) -> bool:
        """Return True if *key* exists, False if the store reports it as not found.

        Any other failure raises StorageError.
        """

    @abstractmethod
    def list_keys(self, prefix: str, max_keys: int = 1, timeout: float | None = None) -> list[str]:
        """Return the keys on the first result page under *prefix*, at most *max_keys* of them.

        An empty list means no match. Later pages are never fetched.
        """

    @abstractmethod
    def download_to_file(
        self,
        key: str,
        fileobj: BinaryIO,
        part_size: int,
        concurrency: int,
        cancel_event: threading.Event | None = None,
    ) -> None:
        """Write the object's bytes into *fileobj*, fetching *part_size* ranges concurrently."""
