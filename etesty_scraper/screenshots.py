"""Screenshot fallback for media frames without a single media element."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from .config import ScrapeConfig
from .utils import local_ref, progress

logger = logging.getLogger("etesty_scraper")


def screenshot_ref(code: str) -> str:
    return local_ref("screenshots", f"{code}.png")


async def capture_frame(frame: Any, config: ScrapeConfig, code: str) -> Path:
    """Screenshot the question frame element to ``screenshots/<code>.png``."""
    destination = config.screenshots_dir / f"{code}.png"
    progress(f"screenshotting {screenshot_ref(code)}")
    destination.parent.mkdir(parents=True, exist_ok=True)
    await frame.screenshot(path=str(destination))
    logger.debug("Saved screenshot to %s", destination)
    return destination
