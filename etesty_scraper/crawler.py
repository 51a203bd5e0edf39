"""High-level orchestration of the practice question scrape."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Any, List

import requests
from playwright.async_api import async_playwright

from .assets import AssetStore
from .config import ScrapeConfig
from .extractor import scrape_question
from .fetcher import fetch_questions
from .models import Question, Section, SectionReport
from .sections import list_sections
from .utils import progress
from .writer import write_section

logger = logging.getLogger("etesty_scraper")


async def scrape_section(
    page: Any,
    session: requests.Session,
    config: ScrapeConfig,
    assets: AssetStore,
    section: Section,
) -> SectionReport:
    """Scrape every practice question of a section and write its CSV file."""
    logger.info("Scraping section %s", section.name)
    response = await asyncio.to_thread(fetch_questions, session, config, section.id)
    total = len(response.questions)

    questions: List[Question] = []
    failures: List[str] = []
    for index, meta in enumerate(response.questions, start=1):
        progress(f"  {index}/{total}: {meta.code}")
        outcome = await scrape_question(page, config, assets, meta)
        if outcome.question is not None:
            questions.append(outcome.question)
            continue
        if not config.keep_going:
            raise outcome.error
        failures.append(meta.code)

    output_path = write_section(config, section, questions)
    progress(f"  {len(questions)} questions written to {output_path}")
    sys.stdout.write("\n")
    if failures:
        logger.warning(
            "Skipped %d questions in %s: %s", len(failures), section.name, ", ".join(failures)
        )
    return SectionReport(
        section=section,
        output_path=output_path,
        question_count=len(questions),
        failures=failures,
    )


async def scrape_sections(
    page: Any,
    session: requests.Session,
    config: ScrapeConfig,
    assets: AssetStore,
) -> List[SectionReport]:
    """Enumerate the sections and scrape them one after another."""
    reports: List[SectionReport] = []
    for section in await list_sections(page, config):
        reports.append(await scrape_section(page, session, config, assets, section))
    return reports


async def run_scraper(config: ScrapeConfig) -> List[SectionReport]:
    """Launch Chromium, capture assets and scrape all sections."""
    config.output_root.mkdir(parents=True, exist_ok=True)
    async with async_playwright() as playwright:
        browser = await playwright.chromium.launch(headless=config.headless)
        try:
            page = await browser.new_page()
            assets = AssetStore(config)
            assets.attach(page)
            with requests.Session() as session:
                reports = await scrape_sections(page, session, config, assets)
            logger.info("Captured %d assets", len(assets))
        finally:
            await browser.close()
    return reports
