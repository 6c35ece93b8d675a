from collections.abc import Iterable

import pytest

from cache_restore.storage.base import ObjectStore


class FakeObjectStore(ObjectStore):
    """Object store with scripted per-key outcomes that records every call."""

    def __init__(
        self,
        existing: Iterable[str] = (),
        listings: dict[str, list[str]] | None = None,
        probe_errors: dict[str, Exception] | None = None,
        list_errors: dict[str, Exception] | None = None,
        download_failures: list[Exception] | None = None,
        content: bytes = b"archive-bytes",
    ):
        self.existing = set(existing)
        self.listings = listings or {}
        self.probe_errors = probe_errors or {}
        self.list_errors = list_errors or {}
        self.download_failures = list(download_failures or [])
        self.content = content
        self.calls: list[tuple] = []

    def object_exists(self, key):
        self.calls.append(("head", key))
        if key in self.probe_errors:
            raise self.probe_errors[key]
        return key in self.existing

    def list_keys(self, prefix, max_keys=1, timeout=None):
        self.calls.append(("list", prefix, max_keys, timeout))
        if prefix in self.list_errors:
            raise self.list_errors[prefix]
        return list(self.listings.get(prefix, []))[:max_keys]

    def download_to_file(self, key, fileobj, part_size, concurrency, cancel_event=None):
        self.calls.append(("get", key, part_size, concurrency))
        if self.download_failures:
            fileobj.write(b"partial")
            raise self.download_failures.pop(0)
        fileobj.write(self.content)

    def calls_of(self, kind: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == kind]


@pytest.fixture
def make_store():
    return FakeObjectStore
