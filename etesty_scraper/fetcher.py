"""Practice question requests against the portal's JSON endpoint."""

from __future__ import annotations

import logging

import requests

from .config import PRACTICE_PATH, ScrapeConfig
from .models import QuestionsResponse

logger = logging.getLogger("etesty_scraper")


def fetch_questions(
    session: requests.Session,
    config: ScrapeConfig,
    section_id: str,
) -> QuestionsResponse:
    """Request the practice question set of a section.

    Raises:
        requests.HTTPError: If the server answers with a 4xx/5xx status.
        ValueError: If the body is not the expected JSON document.
    """
    url = config.url(PRACTICE_PATH)
    resp = session.post(url, data={"lectureID": section_id})
    resp.raise_for_status()
    payload = resp.json()
    try:
        questions = QuestionsResponse.from_json(payload)
    except (KeyError, TypeError) as exc:
        raise ValueError(f"Unexpected practice response for section {section_id}") from exc
    logger.debug("Section %s returned %d questions", section_id, len(questions.questions))
    return questions
