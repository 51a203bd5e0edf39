"""Configuration objects and constants for the scraper."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

BASE_URL = "https://etesty2.mdcr.cz"

SECTIONS_PATH = "/Home/Tests/ro"
PRACTICE_PATH = "/Test/GeneratePractise/"
RENDER_QUESTION_PATH = "/Test/RenderQuestion"
ASSET_PATH_PREFIX = "/Content/ImageQuestion/"

SECTIONS_SELECTOR = "#VerticalMenuPanel > ul:first-of-type > li > a"
FRAME_SELECTOR = "div.image-frame"
ANSWER_SELECTOR = ".answer-container > .answer"
QUESTION_TEXT_SELECTOR = ".question-text"
SUBMIT_SELECTOR = "button#submit"

ANSWER_PREFIXES = ("A: ", "B: ", "C: ")
MEDIA_TYPES = {"video/mp4", "image/gif", "image/jpg", "image/png"}
SECTION_NAME_LIMIT = 50

BULLETIN_PATH = "/Vestnik"
BULLETIN_PAGE_PATH = "/Vestnik/ShowPartial"
BULLETIN_SECTIONS_SELECTOR = "#VerticalMenuPanel > ul > li > a"
BULLETIN_NAME_LIMIT = 30
BULLETIN_PAGE_LIMIT = 200


@dataclass
class ScrapeConfig:
    """Settings for the browser-driven practice question scrape."""

    output_root: Path
    base_url: str = BASE_URL
    headless: bool = True
    # 0 disables the navigation timeout entirely.
    navigation_timeout: float = 0.0
    keep_going: bool = False
    write_header: bool = False

    @property
    def assets_dir(self) -> Path:
        return self.output_root / "assets"

    @property
    def screenshots_dir(self) -> Path:
        return self.output_root / "screenshots"

    @property
    def navigation_timeout_ms(self) -> float:
        return self.navigation_timeout * 1000

    def url(self, path: str) -> str:
        return self.base_url.rstrip("/") + path


@dataclass
class BulletinConfig:
    """Settings for the plain-HTTP bulletin scrape."""

    output_root: Path
    base_url: str = BASE_URL
    page_limit: int = BULLETIN_PAGE_LIMIT
    request_timeout: float = 30.0

    def url(self, path: str) -> str:
        return self.base_url.rstrip("/") + path
