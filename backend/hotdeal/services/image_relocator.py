"""Image relocation: download a remote thumbnail and re-host it.

Failures never propagate: the caller gets None and keeps the source URL.
"""

import random
import time
from datetime import datetime, timezone
from pathlib import PurePosixPath
from typing import Optional
from urllib.parse import urlparse

import httpx
import structlog

from hotdeal.core.exceptions import RelocationError
from hotdeal.scrapers.utils.normalizer import normalize_image_url
from hotdeal.scrapers.utils.retry import http_retry
from hotdeal.scrapers.utils.user_agents import get_random_user_agent


DOWNLOAD_TIMEOUT = 10.0
DEFAULT_EXTENSION = ".jpg"

CONTENT_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
}


def content_type_for(filename: str) -> str:
    """Map a file name's extension to an image content type (default JPEG)."""
    return CONTENT_TYPES.get(PurePosixPath(filename).suffix.lower(), "image/jpeg")


def generate_file_name(url: str, timestamp_ms: Optional[int] = None) -> str:
    """Build a unique object name from the URL's base name.

    Format: ``<timestamp>_<random>_<stem><ext>``, ``.jpg`` when the source
    has no extension. The query string is ignored.
    """
    original = PurePosixPath(urlparse(url).path).name or "image"
    if "." not in original:
        original += DEFAULT_EXTENSION

    path = PurePosixPath(original)
    timestamp_ms = timestamp_ms if timestamp_ms is not None else int(time.time() * 1000)
    suffix = random.randint(0, 999_999)
    return f"{timestamp_ms}_{suffix}_{path.stem}{path.suffix}"


class ImageRelocator:
    """Downloads images and hands them to object storage."""

    def __init__(self, storage, http_client: Optional[httpx.AsyncClient] = None, logger=None,
                 timeout: float = DOWNLOAD_TIMEOUT):
        """
        Args:
            storage: Object storage exposing ``put_object(key, body, content_type)``
                and ``public_url(key)``
            http_client: Shared async HTTP client (created per call if omitted)
            logger: Bound structlog logger
            timeout: Download timeout in seconds
        """
        self.storage = storage
        self.http_client = http_client
        self.timeout = timeout
        self.logger = (logger or structlog.get_logger(__name__)).bind(service="image_relocator")

    async def relocate(self, source_url: Optional[str], folder: str = "images") -> Optional[str]:
        """Download ``source_url`` and store it under ``folder/yyyy-mm/``.

        Returns:
            Public URL of the stored copy, or None on any failure
        """
        url = normalize_image_url(source_url or "")
        if not url:
            self.logger.warning("invalid_image_url", source_url=source_url)
            return None

        try:
            body = await self._download(url)
            if not body:
                raise RelocationError(url, "empty response body")

            file_name = generate_file_name(url)
            key = f"{folder}/{datetime.now(timezone.utc):%Y-%m}/{file_name}"
            await self.storage.put_object(key, body, content_type_for(file_name))

            stored_url = self.storage.public_url(key)
            self.logger.debug("image_relocated", source_url=url, stored_url=stored_url)
            return stored_url

        except Exception as e:
            self.logger.warning("image_relocation_failed", source_url=url, error=str(e))
            return None

    @http_retry
    async def _download(self, url: str) -> bytes:
        headers = {"User-Agent": get_random_user_agent()}

        if self.http_client is not None:
            response = await self.http_client.get(url, headers=headers, timeout=self.timeout)
        else:
            async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                response = await client.get(url, headers=headers)

        response.raise_for_status()
        return response.content
