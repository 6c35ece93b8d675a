"""Request and result models for a cache restore."""

from pathlib import Path
from typing import List

from pydantic import BaseModel, Field


class DownloadRequest(BaseModel):
    """
    One restore request: candidate keys in priority order, where to write
    the archive, and how many extra attempts the transfer may make.
    """

    cache_keys: List[str] = Field(..., description="Cache keys, most preferred first")
    download_path: Path = Field(..., description="Local file the archive is written to")
    num_full_retries: int = Field(
        default=0, ge=0, description="Extra whole-transfer attempts after the first"
    )


class DownloadResult(BaseModel):
    """Outcome of a successful restore."""

    matched_key: str = Field(..., description="Full object name that was downloaded")
    download_path: Path = Field(..., description="Local file holding the archive")
