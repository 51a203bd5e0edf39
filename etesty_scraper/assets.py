"""Capture question media from the browser's network traffic."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from urllib.parse import urljoin, urlparse

from playwright.async_api import Error as PlaywrightError

from .config import ASSET_PATH_PREFIX, MEDIA_TYPES, ScrapeConfig
from .utils import local_ref, progress

logger = logging.getLogger("etesty_scraper")


def extension_for_content_type(content_type: Optional[str]) -> str:
    """Derive a file extension from a response content type."""
    if content_type is None:
        logger.error("missing content-type")
        return ""
    if content_type in MEDIA_TYPES:
        return content_type.split("/")[1]
    logger.warning("unknown content-type: %s", content_type)
    return content_type.replace("/", ".")


def asset_filename(path: str, extension: str) -> str:
    """Flatten an asset URL path into a single file name."""
    suffix = path[len(ASSET_PATH_PREFIX) :].replace("/", "-")
    return f"{suffix}.{extension}"


class AssetStore:
    """Response subscriber that saves question media and remembers where.

    The store is the only writer of its table. The extractor reads it through
    :meth:`lookup` once a question has been rendered; assets that have not
    arrived yet simply are not found.
    """

    def __init__(self, config: ScrapeConfig) -> None:
        self.config = config
        self._table: Dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._table)

    def attach(self, page: Any) -> None:
        page.on("response", self.handle_response)

    def lookup(self, url: str) -> Optional[str]:
        return self._table.get(url)

    async def handle_response(self, response: Any) -> Optional[str]:
        """Persist a matching response body and record its local reference."""
        if response.request.method.lower() != "get":
            return None
        url = response.url
        path = urlparse(urljoin(self.config.base_url, url)).path
        if not path.startswith(ASSET_PATH_PREFIX):
            return None

        progress(f"downloading asset {path}")
        extension = extension_for_content_type(response.headers.get("content-type"))
        try:
            body = await response.body()
        except PlaywrightError as exc:
            logger.error("couldn't get body for %s: %s", url, exc)
            return None

        filename = asset_filename(path, extension)
        reference = local_ref("assets", filename)
        destination = self.config.assets_dir / filename
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(body)
        self._table[url] = reference
        logger.debug("Saved asset %s to %s", url, destination)
        return reference
