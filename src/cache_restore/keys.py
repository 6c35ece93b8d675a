"""Validation and normalization of caller-supplied cache keys."""

from collections.abc import Sequence

from .exceptions import InvalidKeyError, NoKeysProvidedError, TooManyKeysError

MAX_KEY_LENGTH = 512
MAX_KEY_COUNT = 8
KEY_SEPARATOR = ","


def validate_keys(keys: Sequence[str]) -> list[str]:
    """Check *keys* and return them in the same order, truncated to ``MAX_KEY_LENGTH``.

    Overlong keys are truncated rather than rejected. Commas are reserved
    because key lists are passed around comma-separated elsewhere.

    Raises:
        NoKeysProvidedError: If *keys* is empty.
        TooManyKeysError: If more than ``MAX_KEY_COUNT`` keys are given.
        InvalidKeyError: If a key is empty or contains a comma.
    """
    if not keys:
        raise NoKeysProvidedError("no keys provided")
    if len(keys) > MAX_KEY_COUNT:
        raise TooManyKeysError(f"maximum number of keys is {MAX_KEY_COUNT}, {len(keys)} provided")

    truncated: list[str] = []
    for key in keys:
        if not key:
            raise InvalidKeyError("empty keys are not allowed", key=key)
        if KEY_SEPARATOR in key:
            raise InvalidKeyError(f"commas are not allowed in keys (invalid key: {key})", key=key)
        truncated.append(key[:MAX_KEY_LENGTH])
    return truncated
