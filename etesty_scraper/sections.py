"""Discover the topic sections listed on the portal."""

from __future__ import annotations

import logging
from typing import Any, List

from bs4 import BeautifulSoup

from .config import SECTIONS_PATH, SECTIONS_SELECTOR, ScrapeConfig
from .models import Section

logger = logging.getLogger("etesty_scraper")


def parse_sections(html: str) -> List[Section]:
    """Map the navigation menu links to sections, in page order."""
    soup = BeautifulSoup(html, "html.parser")
    sections: List[Section] = []
    for anchor in soup.select(SECTIONS_SELECTOR):
        href = anchor.get("href")
        if not href:
            continue
        sections.append(
            Section(id=href.rstrip("/").split("/")[-1], name=anchor.get_text().strip())
        )
    return sections


async def list_sections(page: Any, config: ScrapeConfig) -> List[Section]:
    url = config.url(SECTIONS_PATH)
    logger.info("Loading %s", url)
    await page.goto(url)
    sections = parse_sections(await page.content())
    logger.info("Found %d sections", len(sections))
    return sections
