"""Per-section CSV output."""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Sequence

from .config import SECTION_NAME_LIMIT, ScrapeConfig
from .models import CSV_COLUMNS, Question, Section
from .utils import file_safe_name

logger = logging.getLogger("etesty_scraper")


def section_csv_path(config: ScrapeConfig, section: Section) -> Path:
    name = file_safe_name(section.name, SECTION_NAME_LIMIT)
    return config.output_root / f"scrape.{section.id}.{name}.csv"


def write_section(
    config: ScrapeConfig,
    section: Section,
    questions: Sequence[Question],
) -> Path:
    """Write a section's questions, replacing any previous file."""
    output_path = section_csv_path(config, section)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8", newline="") as fh:
        writer = csv.DictWriter(fh, fieldnames=CSV_COLUMNS, lineterminator="\n")
        if config.write_header:
            writer.writeheader()
        for question in questions:
            writer.writerow(question.as_row())
    logger.debug("Wrote %d rows to %s", len(questions), output_path)
    return output_path
