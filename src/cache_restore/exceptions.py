"""Exception hierarchy for cache archive restore."""


class CacheRestoreError(Exception):
    """Base exception for all cache restore failures."""

    def __init__(self, message: str, cause: Exception | None = None):
        self.cause = cause
        super().__init__(message)


class KeyValidationError(CacheRestoreError):
    """Raised when the supplied cache keys are unusable."""


class NoKeysProvidedError(KeyValidationError):
    """Raised when no cache keys were supplied."""


class TooManyKeysError(KeyValidationError):
    """Raised when more cache keys were supplied than are allowed."""


class InvalidKeyError(KeyValidationError):
    """Raised when a cache key is empty or contains a reserved character."""

    def __init__(self, message: str, key: str):
        self.key = key
        super().__init__(message)


class ConfigError(CacheRestoreError):
    """Raised when the store client cannot be configured."""


class StoreTransportError(CacheRestoreError):
    """Raised when a lookup against the store fails for a reason other than "not found"."""

    def __init__(self, message: str, key: str | None = None, cause: Exception | None = None):
        self.key = key
        super().__init__(message, cause=cause)


class CacheNotFoundError(CacheRestoreError):
    """Raised when none of the keys matched an archive. Callers usually treat this as non-fatal."""

    def __init__(self, keys: list[str]):
        self.keys = keys
        super().__init__("no cache archive found for the provided keys")


class AllRetriesFailedError(CacheRestoreError):
    """Raised when every download attempt failed."""

    def __init__(self, key: str, attempts: int, cause: Exception | None = None):
        self.key = key
        self.attempts = attempts
        super().__init__(f"all retries failed downloading {key!r} after {attempts} attempt(s): {cause}", cause=cause)


class OperationCancelledError(CacheRestoreError):
    """Raised when the request's cancellation signal was set."""
