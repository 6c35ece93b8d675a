"""Tests for CacheDownloadService orchestration."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from s3transfer.exceptions import RetriesExceededError

from cache_restore.config import StoreSettings
from cache_restore.exceptions import (
    AllRetriesFailedError,
    CacheNotFoundError,
    ConfigError,
    InvalidKeyError,
    NoKeysProvidedError,
    StoreTransportError,
)
from cache_restore.models import DownloadRequest
from cache_restore.service import CacheDownloadService
from cache_restore.storage.exceptions import StorageError
from cache_restore.storage.s3_client import S3ObjectStore


@pytest.fixture
def settings() -> StoreSettings:
    return StoreSettings(bucket_name="ci-cache", region="eu-west-1")


def _service(settings, store, **kwargs) -> tuple[CacheDownloadService, MagicMock]:
    factory = MagicMock(return_value=store)
    return CacheDownloadService(settings, store_factory=factory, retry_wait=0, **kwargs), factory


class TestSuccessfulRestore:
    def test_exact_match_downloaded(self, settings, make_store, tmp_path: Path):
        store = make_store(existing={"main-abc.tzst"}, content=b"cache")
        service, factory = _service(settings, store)
        dest = tmp_path / "cache.tzst"

        result = service.download(DownloadRequest(cache_keys=["branch-abc", "main-abc"], download_path=dest))

        assert result.matched_key == "main-abc.tzst"
        assert result.download_path == dest
        assert dest.read_bytes() == b"cache"
        factory.assert_called_once_with(settings)
        assert store.calls_of("get")[0][1] == "main-abc.tzst"

    def test_prefix_match_downloaded(self, settings, make_store, tmp_path: Path):
        store = make_store(listings={"main": ["main-1700000000.tzst"]})
        service, _ = _service(settings, store)

        result = service.download(DownloadRequest(cache_keys=["main"], download_path=tmp_path / "c"))
        assert result.matched_key == "main-1700000000.tzst"

    def test_retries_transient_failures(self, settings, make_store, tmp_path: Path):
        store = make_store(existing={"k.tzst"}, download_failures=[StorageError("a"), StorageError("b")])
        service, _ = _service(settings, store)

        service.download(DownloadRequest(cache_keys=["k"], download_path=tmp_path / "c", num_full_retries=2))
        assert len(store.calls_of("get")) == 3

    def test_long_keys_are_truncated_before_lookup(self, settings, make_store, tmp_path: Path):
        store = make_store()
        service, _ = _service(settings, store)

        with pytest.raises(CacheNotFoundError):
            service.download(DownloadRequest(cache_keys=["k" * 600], download_path=tmp_path / "c"))
        assert store.calls_of("head")[0][1] == "k" * 512 + ".tzst"


class TestFailures:
    def test_validation_happens_before_store_creation(self, settings, make_store, tmp_path: Path):
        service, factory = _service(settings, make_store())

        with pytest.raises(NoKeysProvidedError):
            service.download(DownloadRequest(cache_keys=[], download_path=tmp_path / "c"))
        with pytest.raises(InvalidKeyError):
            service.download(DownloadRequest(cache_keys=["a,b"], download_path=tmp_path / "c"))
        factory.assert_not_called()

    def test_empty_bucket_is_config_error(self, make_store, tmp_path: Path):
        service, factory = _service(StoreSettings(region="us-east-1"), make_store())

        with pytest.raises(ConfigError, match="bucket must not be empty"):
            service.download(DownloadRequest(cache_keys=["k"], download_path=tmp_path / "c"))
        factory.assert_not_called()

    def test_cache_not_found(self, settings, make_store, tmp_path: Path):
        store = make_store()
        service, _ = _service(settings, store)

        with pytest.raises(CacheNotFoundError):
            service.download(DownloadRequest(cache_keys=["a", "b"], download_path=tmp_path / "c"))
        assert store.calls_of("get") == []

    def test_transport_error_skips_download(self, settings, make_store, tmp_path: Path):
        store = make_store(probe_errors={"a.tzst": StorageError("500")})
        service, _ = _service(settings, store)

        with pytest.raises(StoreTransportError):
            service.download(DownloadRequest(cache_keys=["a"], download_path=tmp_path / "c"))
        assert store.calls_of("get") == []

    def test_all_retries_failed(self, settings, make_store, tmp_path: Path):
        store = make_store(existing={"k.tzst"}, download_failures=[StorageError("x")] * 3)
        service, _ = _service(settings, store)

        with pytest.raises(AllRetriesFailedError) as exc_info:
            service.download(
                DownloadRequest(cache_keys=["k"], download_path=tmp_path / "c", num_full_retries=2)
            )
        assert exc_info.value.attempts == 3

    @patch("cache_restore.storage.s3_client.boto3")
    def test_broken_transfer_stream_uses_retry_budget(self, mock_boto3, settings, tmp_path: Path):
        client = MagicMock()
        client.download_fileobj.side_effect = RetriesExceededError(ConnectionResetError("reset"))
        mock_boto3.client.return_value = client
        service = CacheDownloadService(
            settings,
            store_factory=lambda s: S3ObjectStore(bucket_name=s.bucket_name, region=s.region),
            retry_wait=0,
        )

        with pytest.raises(AllRetriesFailedError) as exc_info:
            service.download(
                DownloadRequest(cache_keys=["k"], download_path=tmp_path / "c", num_full_retries=2)
            )

        assert exc_info.value.attempts == 3
        assert client.download_fileobj.call_count == 3
        client.head_object.assert_called_once_with(Bucket="ci-cache", Key="k.tzst")
