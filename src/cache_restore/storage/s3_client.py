"""S3-compatible object store (AWS S3, SeaweedFS, MinIO)."""

import logging
import threading
from typing import BinaryIO

import boto3
from boto3.s3.transfer import TransferConfig
from botocore.config import Config
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    ReadTimeoutError,
)
from s3transfer.exceptions import RetriesExceededError, S3DownloadFailedError

from .base import ObjectStore
from .exceptions import (
    StorageConnectionError,
    StorageError,
    StorageNotFoundError,
    StoragePermissionError,
    StorageTimeoutError,
)

log = logging.getLogger(__name__)

_ERROR_CODE_MAP = {
    "NoSuchKey": StorageNotFoundError,
    "NotFound": StorageNotFoundError,
    "404": StorageNotFoundError,
    "AccessDenied": StoragePermissionError,
    "403": StoragePermissionError,
    "InvalidAccessKeyId": StoragePermissionError,
    "SignatureDoesNotMatch": StoragePermissionError,
    "ExpiredToken": StoragePermissionError,
}


class TransferCancelled(Exception):
    """Raised from the transfer progress callback to abort an in-flight download."""


class S3ObjectStore(ObjectStore):
    """S3-compatible object store client bound to a single bucket."""

    def __init__(
        self,
        bucket_name: str,
        region: str,
        endpoint_url: str | None = None,
        aws_access_key_id: str | None = None,
        aws_secret_access_key: str | None = None,
        aws_session_token: str | None = None,
        probe_timeout: float = 5.0,
    ):
        self._bucket = bucket_name
        self._probe_timeout = probe_timeout
        self._config = Config(
            region_name=region,
            signature_version="s3v4",
            retries={"max_attempts": 3, "mode": "standard"},
        )

        self._client_kwargs: dict = {}
        if aws_access_key_id and aws_secret_access_key:
            log.debug("Static AWS credentials provided, using them")
            self._client_kwargs["aws_access_key_id"] = aws_access_key_id
            self._client_kwargs["aws_secret_access_key"] = aws_secret_access_key
            if aws_session_token:
                self._client_kwargs["aws_session_token"] = aws_session_token
        if endpoint_url:
            self._client_kwargs["endpoint_url"] = endpoint_url

        self._client = boto3.client("s3", config=self._config, **self._client_kwargs)
        self._bounded_clients: dict[float, object] = {}

    @property
    def bucket(self) -> str:
        return self._bucket

    def object_exists(self, key: str) -> bool:
        try:
            self._bounded_client(self._probe_timeout).head_object(Bucket=self._bucket, Key=key)
            return True
        except (ClientError, BotoCoreError) as e:
            translated = self._translate_error(e, key)
            if isinstance(translated, StorageNotFoundError):
                return False
            raise translated from e

    def list_keys(self, prefix: str, max_keys: int = 1, timeout: float | None = None) -> list[str]:
        client = self._client if timeout is None else self._bounded_client(timeout)
        try:
            page = client.list_objects_v2(Bucket=self._bucket, Prefix=prefix, MaxKeys=max_keys)
        except (ClientError, BotoCoreError) as e:
            raise self._translate_error(e, prefix) from e
        return [obj["Key"] for obj in page.get("Contents", []) if obj.get("Key")][:max_keys]

    def download_to_file(
        self,
        key: str,
        fileobj: BinaryIO,
        part_size: int,
        concurrency: int,
        cancel_event: threading.Event | None = None,
    ) -> None:
        transfer_config = TransferConfig(
            multipart_threshold=part_size,
            multipart_chunksize=part_size,
            max_concurrency=concurrency,
            use_threads=concurrency > 1,
        )

        def _on_progress(_bytes_transferred: int) -> None:
            if cancel_event is not None and cancel_event.is_set():
                raise TransferCancelled(f"download of {key!r} cancelled")

        try:
            self._client.download_fileobj(
                Bucket=self._bucket,
                Key=key,
                Fileobj=fileobj,
                Config=transfer_config,
                Callback=_on_progress,
            )
        except TransferCancelled as e:
            raise StorageError(str(e), key=key, cause=e) from e
        except (ClientError, BotoCoreError, RetriesExceededError, S3DownloadFailedError) as e:
            raise self._translate_error(e, key) from e

    def _bounded_client(self, timeout: float):
        """Return a client whose connect and read timeouts are *timeout* seconds, without SDK retries."""
        client = self._bounded_clients.get(timeout)
        if client is None:
            config = self._config.merge(
                Config(
                    connect_timeout=timeout,
                    read_timeout=timeout,
                    retries={"max_attempts": 1, "mode": "standard"},
                )
            )
            client = boto3.client("s3", config=config, **self._client_kwargs)
            self._bounded_clients[timeout] = client
        return client

    @staticmethod
    def _translate_error(error: Exception, key: str | None = None) -> StorageError:
        if isinstance(error, (ConnectTimeoutError, ReadTimeoutError)):
            return StorageTimeoutError(str(error), key=key, cause=error)
        if isinstance(error, EndpointConnectionError):
            return StorageConnectionError(str(error), key=key, cause=error)
        if isinstance(error, (RetriesExceededError, S3DownloadFailedError)):
            # s3transfer gave up on a streaming error (reset, truncated body)
            return StorageConnectionError(str(error), key=key, cause=error)
        if isinstance(error, ClientError):
            code = error.response.get("Error", {}).get("Code", "")
            exc_cls = _ERROR_CODE_MAP.get(code, StorageError)
            return exc_cls(str(error), key=key, cause=error)
        return StorageError(str(error), key=key, cause=error)
