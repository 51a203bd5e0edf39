"""Scrape the public question bulletin over plain HTTP.

The bulletin serves every question of the bank, correct answers included, as
server-rendered HTML split into pages. No browser is needed: pages are
fetched with ``requests`` and parsed with BeautifulSoup until the server
returns an empty page.
"""

from __future__ import annotations

import csv
import dataclasses
import logging
from pathlib import Path
from typing import List, Optional, Tuple
from urllib.parse import parse_qs, urljoin, urlparse

import requests
from bs4 import BeautifulSoup, Tag

from .config import (
    BULLETIN_NAME_LIMIT,
    BULLETIN_PAGE_PATH,
    BULLETIN_PATH,
    BULLETIN_SECTIONS_SELECTOR,
    BulletinConfig,
)
from .models import BulletinQuestion, ExtractionError, Section
from .utils import file_safe_name

logger = logging.getLogger("etesty_scraper")

BULLETIN_COLUMNS = [field.name for field in dataclasses.fields(BulletinQuestion)]


def _clean(text: str) -> str:
    return text.replace("\n", " ").strip()


def _required(parent: Tag, selector: str, code: str) -> Tag:
    node = parent.select_one(selector)
    if node is None:
        raise ExtractionError(code, f"{selector} not found")
    return node


def parse_bulletin_sections(html: str, base_url: str) -> List[Section]:
    soup = BeautifulSoup(html, "html.parser")
    sections: List[Section] = []
    for anchor in soup.select(BULLETIN_SECTIONS_SELECTOR):
        href = anchor.get("href", "")
        query = parse_qs(urlparse(urljoin(base_url, href)).query)
        if "basketScope" not in query:
            raise ExtractionError(href, "section link has no basketScope parameter")
        sections.append(Section(id=query["basketScope"][0], name=anchor.get_text().strip()))
    return sections


def list_bulletin_sections(session: requests.Session, config: BulletinConfig) -> List[Section]:
    resp = session.get(config.url(BULLETIN_PATH), timeout=config.request_timeout)
    resp.raise_for_status()
    return parse_bulletin_sections(resp.text, config.base_url)


def parse_bulletin_question(panel: Tag) -> BulletinQuestion:
    """Turn one ``div.QuestionPanel`` into a question record."""
    text_node = _required(panel, "div.QuestionText", "?")
    code = _required(text_node, "span.QuestionCode", "?").get_text()
    change_date = _required(text_node, "span.QuestionChangeDate", code).get_text()
    strings = list(text_node.strings)
    if not strings:
        raise ExtractionError(code, "question text is empty")

    answers: List[Tuple[bool, str]] = []
    for answer in panel.select("div.AnswersPanel > div.Answer"):
        text = _required(answer, "div.AnswerText > a", code).get_text()
        answers.append((answer.get("data-correct") == "True", _clean(text)))
    if not answers:
        raise ExtractionError(code, "no answer options found")
    answers.sort(key=lambda item: not item[0])

    media = ""
    source = panel.select_one("div.QuestionImagePanel > video > source")
    image = panel.select_one("div.QuestionImagePanel > img")
    if source is not None:
        media = source.get("src", "")
    elif image is not None:
        media = image.get("src", "")

    return BulletinQuestion(
        code=code,
        change_date=change_date,
        question=_clean(strings[-1]),
        media=media,
        right_answer=answers[0][1],
        first_wrong_answer=answers[1][1] if len(answers) > 1 else None,
        second_wrong_answer=answers[2][1] if len(answers) > 2 else None,
    )


def parse_bulletin_page(html: str) -> List[BulletinQuestion]:
    soup = BeautifulSoup(html, "html.parser")
    root = soup.body or soup
    panels = root.find_all("div", class_="QuestionPanel", recursive=False)
    return [parse_bulletin_question(panel) for panel in panels]


def fetch_bulletin_page(
    session: requests.Session,
    config: BulletinConfig,
    page: int,
    section: Optional[Section] = None,
) -> Optional[str]:
    """Return the HTML of a bulletin page, or ``None`` past the last page."""
    params = {"page": str(page)}
    if section is not None:
        params["basketScope"] = section.id
    resp = session.get(
        config.url(BULLETIN_PAGE_PATH), params=params, timeout=config.request_timeout
    )
    resp.raise_for_status()
    if not resp.text.strip():
        return None
    return resp.text


def bulletin_output_paths(config: BulletinConfig, section: Optional[Section]) -> Tuple[Path, Path]:
    if section is None:
        stem = "scrape"
    else:
        stem = f"scrape.{section.id}.{file_safe_name(section.name, BULLETIN_NAME_LIMIT)}"
    return config.output_root / f"{stem}.csv", config.output_root / f"{stem}.html"


def scrape_bulletin(
    session: requests.Session,
    config: BulletinConfig,
    section: Optional[Section] = None,
) -> int:
    """Page through the bulletin, writing CSV rows and the raw page HTML."""
    csv_path, html_path = bulletin_output_paths(config, section)
    csv_path.parent.mkdir(parents=True, exist_ok=True)
    count = 0
    with csv_path.open("w", encoding="utf-8", newline="") as csv_fh, html_path.open(
        "w", encoding="utf-8"
    ) as html_fh:
        writer = csv.DictWriter(csv_fh, fieldnames=BULLETIN_COLUMNS, lineterminator="\n")
        writer.writeheader()
        for page in range(1, config.page_limit):
            html = fetch_bulletin_page(session, config, page, section)
            if html is None:
                logger.info("  done scraping %d pages", page - 1)
                break
            html_fh.write(f"<!-- Page {page} -->\n{html}\n")
            for question in parse_bulletin_page(html):
                writer.writerow(dataclasses.asdict(question))
                count += 1
            logger.info("  fetched and parsed page %d", page)
    return count


def run_bulletin(config: BulletinConfig) -> int:
    """Scrape the whole bulletin, then every bulletin section separately."""
    config.output_root.mkdir(parents=True, exist_ok=True)
    with requests.Session() as session:
        logger.info("Scraping full bulletin")
        total = scrape_bulletin(session, config)
        logger.info("Listing bulletin sections")
        for section in list_bulletin_sections(session, config):
            logger.info("Scraping %s", section.name)
            scrape_bulletin(session, config, section)
    return total
