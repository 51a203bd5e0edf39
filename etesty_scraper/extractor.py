"""Render practice questions in the browser and extract their contents.

The browser is only used to render a question and to screenshot its media
frame. Everything else works on an HTML snapshot of the rendered page:
:func:`parse_rendered_question` turns it into a :class:`RenderedQuestion`, and
the ordering, prefixing and media fallback rules are applied by plain
functions on that result.
"""

from __future__ import annotations

import html
import logging
from typing import Any, List, Optional, Sequence
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from requests.utils import requote_uri

from .assets import AssetStore
from .config import (
    ANSWER_PREFIXES,
    ANSWER_SELECTOR,
    FRAME_SELECTOR,
    QUESTION_TEXT_SELECTOR,
    RENDER_QUESTION_PATH,
    SUBMIT_SELECTOR,
    ScrapeConfig,
)
from .models import (
    ExtractionError,
    Question,
    QuestionMeta,
    QuestionOutcome,
    RenderedAnswer,
    RenderedQuestion,
)
from .screenshots import capture_frame, screenshot_ref

logger = logging.getLogger("etesty_scraper")

REPLACE_DOCUMENT_JS = "(root, markup) => { root.innerHTML = markup; }"

NORMALIZE_FRAME_JS = """
frame => {
    frame.style.width = "644px";
    frame.style.height = "327px";
    frame.style.textAlign = "center";
    frame.style.verticalAlign = "middle";
    frame.style.display = "table";
}
"""


def render_form_html(config: ScrapeConfig, question_id: int) -> str:
    """Markup of a form that POSTs a question id to the render endpoint."""
    action = html.escape(config.url(RENDER_QUESTION_PATH), quote=True)
    return (
        f'<form action="{action}" method="POST">'
        f'<input type="hidden" name="id" value="{int(question_id)}">'
        '<button id="submit" type="submit"></button>'
        "</form>"
    )


def _frame_sources(soup: BeautifulSoup) -> List[Optional[str]]:
    children = soup.select(f"{FRAME_SELECTOR} > *")
    if len(children) == 1 and children[0].name == "video" and not children[0].get("src"):
        source = children[0].find("source", recursive=False)
        return [source.get("src") if source is not None else None]
    return [child.get("src") for child in children]


def parse_rendered_question(page_html: str) -> RenderedQuestion:
    """Collect answers, question texts and frame media from a rendered page."""
    soup = BeautifulSoup(page_html, "html.parser")

    answers: List[RenderedAnswer] = []
    for element in soup.select(ANSWER_SELECTOR):
        paragraph = element.find("p")
        text = (paragraph or element).get_text().strip()
        answers.append(RenderedAnswer(answer_id=element.get("data-answerid"), text=text))

    question_texts = [node.get_text().strip() for node in soup.select(QUESTION_TEXT_SELECTOR)]
    return RenderedQuestion(
        answers=answers,
        question_texts=question_texts,
        media_sources=_frame_sources(soup),
    )


def order_answers(answers: Sequence[RenderedAnswer], correct_id: Optional[int]) -> List[str]:
    """Move the correct answer to the front and label the first three options."""
    wanted = str(correct_id) if correct_id is not None else None
    # sorted() is stable, so the remaining options keep their page order.
    ordered = sorted(answers, key=lambda answer: wanted is None or answer.answer_id != wanted)
    labelled = []
    for position, answer in enumerate(ordered):
        prefix = ANSWER_PREFIXES[position] if position < len(ANSWER_PREFIXES) else ""
        labelled.append(prefix + answer.text)
    return labelled


def pick_question_text(texts: Sequence[str]) -> Optional[str]:
    for text in texts:
        if text:
            return text
    return None


def resolve_media(
    sources: Sequence[Optional[str]],
    base_url: str,
    assets: AssetStore,
    screenshot: str,
) -> Optional[str]:
    """Choose the media reference for a question.

    A single frame element resolves to its downloaded asset, or to its
    absolute URL when the asset was never captured. Any other element count
    resolves to the screenshot reference.
    """
    if len(sources) != 1:
        return screenshot
    src = sources[0]
    if src is None:
        return None
    # Response URLs are percent-encoded, so table keys are too.
    absolute = requote_uri(urljoin(base_url, src))
    return assets.lookup(absolute) or absolute


def build_question(
    meta: QuestionMeta,
    rendered: RenderedQuestion,
    config: ScrapeConfig,
    assets: AssetStore,
) -> Question:
    """Apply the extraction rules to a rendered question."""
    answers = order_answers(rendered.answers, meta.first_correct_id)
    if not answers:
        raise ExtractionError(meta.code, "no answer options found")
    name = pick_question_text(rendered.question_texts)
    if name is None:
        raise ExtractionError(meta.code, "question text is empty")

    media = resolve_media(
        rendered.media_sources, config.base_url, assets, screenshot_ref(meta.code)
    )
    return Question(
        id=meta.question_id,
        code=meta.code,
        name=name,
        answer=answers[0],
        media=media,
        first_wrong=answers[1] if len(answers) > 1 else None,
        second_wrong=answers[2] if len(answers) > 2 else None,
    )


async def open_question(page: Any, config: ScrapeConfig, meta: QuestionMeta) -> None:
    """Replace the current document with a form and submit it."""
    await page.eval_on_selector("html", REPLACE_DOCUMENT_JS, render_form_html(config, meta.question_id))
    async with page.expect_navigation(timeout=config.navigation_timeout_ms):
        await page.click(SUBMIT_SELECTOR)


async def extract_question(
    page: Any,
    config: ScrapeConfig,
    assets: AssetStore,
    meta: QuestionMeta,
) -> Question:
    await open_question(page, config, meta)

    frame = await page.query_selector(FRAME_SELECTOR)
    if frame is None:
        raise ExtractionError(meta.code, f"{FRAME_SELECTOR} not found")
    await frame.evaluate(NORMALIZE_FRAME_JS)

    rendered = parse_rendered_question(await page.content())
    question = build_question(meta, rendered, config, assets)
    if question.media == screenshot_ref(meta.code):
        await capture_frame(frame, config, meta.code)
    return question


async def scrape_question(
    page: Any,
    config: ScrapeConfig,
    assets: AssetStore,
    meta: QuestionMeta,
) -> QuestionOutcome:
    """Extract one question, capturing structural failures in the outcome."""
    try:
        question = await extract_question(page, config, assets, meta)
    except ExtractionError as exc:
        logger.error("Failed to extract question %s: %s", meta.code, exc.reason)
        return QuestionOutcome(meta=meta, error=exc)
    return QuestionOutcome(meta=meta, question=question)
