"""Errors raised by object store backends while looking up or fetching cache archives."""


class StorageError(Exception):
    """A store request failed; ``key`` is the object name or prefix involved."""

    def __init__(self, message: str, key: str | None = None, cause: Exception | None = None):
        self.key = key
        self.cause = cause
        super().__init__(message)


class StorageNotFoundError(StorageError):
    """The store reported the archive object as missing."""


class StoragePermissionError(StorageError):
    """The bucket rejected the credentials or denied access to the archive."""


class StorageConnectionError(StorageError):
    """The bucket endpoint was unreachable or the transfer stream broke off."""


class StorageTimeoutError(StorageConnectionError):
    """A probe or listing did not complete within its timeout."""
