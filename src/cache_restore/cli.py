import logging
import signal
import sys
import threading

import click
from dotenv import find_dotenv, load_dotenv

from . import __version__
from .config import StoreSettings
from .exceptions import CacheNotFoundError, CacheRestoreError, OperationCancelledError
from .logging_config import setup_colored_logging
from .models import DownloadRequest
from .service import CacheDownloadService

log = logging.getLogger(__name__)


def _install_cancel_handlers(cancel_event: threading.Event) -> dict:
    """Route SIGINT and SIGTERM to *cancel_event*; returns the previous handlers."""

    def _handler(signum, _frame):
        log.warning("Received signal %s, cancelling restore", signal.Signals(signum).name)
        cancel_event.set()

    return {signum: signal.signal(signum, _handler) for signum in (signal.SIGINT, signal.SIGTERM)}


@click.command(context_settings=dict(help_option_names=['-h', '--help']))
@click.version_option(__version__, "-v", "--version", help="Show the version and exit.")
@click.option(
    "-k",
    "--key",
    "keys",
    multiple=True,
    required=True,
    help="Cache key to look up; repeat for fallbacks, most preferred first.",
)
@click.option(
    "-p",
    "--path",
    "download_path",
    required=True,
    type=click.Path(dir_okay=False, writable=True),
    help="Local file the archive is written to.",
)
@click.option(
    "-r",
    "--retries",
    "num_full_retries",
    default=0,
    show_default=True,
    type=click.IntRange(min=0),
    help="Extra full download attempts after the first one fails.",
)
@click.option("--bucket", help="Bucket name. Defaults to S3_BUCKET_NAME.")
@click.option("--region", help="Bucket region. Defaults to S3_REGION or AWS_REGION.")
@click.option("--access-key-id", help="Static access key id. Defaults to AWS_ACCESS_KEY_ID.")
@click.option("--secret-access-key", help="Static secret access key. Defaults to AWS_SECRET_ACCESS_KEY.")
@click.option("--endpoint-url", help="Endpoint of an S3-compatible store. Defaults to S3_ENDPOINT_URL.")
@click.option(
    "-u",
    "--system-env",
    is_flag=True,
    default=False,
    help="Use system environment variables only; do not load .env file.",
)
@click.option("--verbose", is_flag=True, default=False, help="Enable debug logging.")
def restore(
    keys: tuple[str, ...],
    download_path: str,
    num_full_retries: int,
    bucket: str | None,
    region: str | None,
    access_key_id: str | None,
    secret_access_key: str | None,
    endpoint_url: str | None,
    system_env: bool,
    verbose: bool,
):
    """
    Restore a cache archive from an S3 bucket.

    Keys are tried in the order given, first as exact `<key>.tzst` archive
    names, then as name prefixes. Prints the matched object name on success.
    A cache miss is reported but is not an error.
    """
    setup_colored_logging(level=logging.DEBUG if verbose else logging.INFO)

    if not system_env:
        env_path = find_dotenv(usecwd=True)
        if env_path:
            load_dotenv(dotenv_path=env_path, override=False)
            log.debug("Loaded environment variables from: %s", env_path)

    settings = StoreSettings.from_env(
        bucket_name=bucket,
        region=region,
        aws_access_key_id=access_key_id,
        aws_secret_access_key=secret_access_key,
        endpoint_url=endpoint_url,
    )
    request = DownloadRequest(
        cache_keys=list(keys),
        download_path=download_path,
        num_full_retries=num_full_retries,
    )

    cancel_event = threading.Event()
    previous_handlers = _install_cancel_handlers(cancel_event)

    try:
        result = CacheDownloadService(settings).download(request, cancel_event=cancel_event)
    except CacheNotFoundError as e:
        log.warning("Cache not found: %s", e)
        return
    except OperationCancelledError as e:
        log.error("Restore cancelled: %s", e)
        sys.exit(130)
    except CacheRestoreError as e:
        log.error("Restore failed: %s", e)
        sys.exit(1)
    finally:
        for signum, handler in previous_handlers.items():
            signal.signal(signum, handler if handler is not None else signal.SIG_DFL)

    log.info("Restored %s to %s", result.matched_key, result.download_path)
    click.echo(result.matched_key)


def main():
    restore()


if __name__ == "__main__":
    main()
