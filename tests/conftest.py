"""Shared fakes for the Playwright page and the HTTP session.

Nothing in the suite launches a browser or touches the network: the page
fake serves canned HTML for the section listing and for each rendered
question, and the session fake answers practice and bulletin requests from
in-memory payloads.
"""

from __future__ import annotations

import re
from contextlib import asynccontextmanager
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pytest
import requests

from etesty_scraper.config import ScrapeConfig

LISTING_HTML = """\
<html><body>
<div id="VerticalMenuPanel">
  <ul>
    <li><a href="/Home/Tests/ro/42">Signs</a></li>
    <li><a href="/Home/Tests/ro/7"> Rules of the road </a></li>
  </ul>
  <ul>
    <li><a href="/Home/Tests/ro/99">Not a section</a></li>
  </ul>
</div>
</body></html>
"""


def question_html(
    text: str,
    answers: Sequence[Tuple[str, str]],
    frame: Optional[str] = "",
    extra_texts: Sequence[str] = (),
) -> str:
    """Build a rendered question document.

    ``frame`` is the inner markup of ``div.image-frame``; ``None`` leaves the
    frame out entirely.
    """
    texts = "".join(f'<div class="question-text">{value}</div>' for value in extra_texts)
    options = "".join(
        f'<div class="answer" data-answerid="{answer_id}"><p> {label} </p></div>'
        for answer_id, label in answers
    )
    frame_html = "" if frame is None else f'<div class="image-frame">{frame}</div>'
    return (
        "<html><body>"
        f'{texts}<div class="question-text"> {text} </div>'
        f"{frame_html}"
        f'<div class="answer-container">{options}</div>'
        "</body></html>"
    )


class FakeElement:
    def __init__(self) -> None:
        self.scripts: List[str] = []
        self.screenshots: List[str] = []

    async def evaluate(self, script: str) -> None:
        self.scripts.append(script)

    async def screenshot(self, path: str) -> None:
        self.screenshots.append(path)
        Path(path).write_bytes(b"\x89PNG")


class FakePage:
    """Serves canned documents in place of a Chromium page."""

    def __init__(self, listing_html: str = LISTING_HTML, questions: Optional[Dict[int, str]] = None) -> None:
        self.listing_html = listing_html
        self.questions = questions or {}
        self.html = ""
        self.handlers: Dict[str, Any] = {}
        self.visited: List[str] = []
        self.submitted: List[int] = []
        self.navigation_timeouts: List[float] = []
        self.frames: List[FakeElement] = []
        self._pending: Optional[int] = None

    def on(self, event: str, handler: Any) -> None:
        self.handlers[event] = handler

    async def goto(self, url: str) -> None:
        self.visited.append(url)
        self.html = self.listing_html

    async def content(self) -> str:
        return self.html

    async def eval_on_selector(self, selector: str, script: str, markup: str) -> None:
        assert selector == "html"
        self.html = markup
        self._pending = int(re.search(r'name="id" value="(\d+)"', markup).group(1))

    async def click(self, selector: str) -> None:
        assert selector == "button#submit"
        assert 'id="submit"' in self.html

    @asynccontextmanager
    async def expect_navigation(self, timeout: float):
        self.navigation_timeouts.append(timeout)
        yield
        self.submitted.append(self._pending)
        self.html = self.questions[self._pending]

    async def query_selector(self, selector: str) -> Optional[FakeElement]:
        if 'class="image-frame"' not in self.html:
            return None
        element = FakeElement()
        self.frames.append(element)
        return element


class FakeResponse:
    """Stand-in for a Playwright network response."""

    def __init__(
        self,
        url: str,
        body: bytes = b"data",
        content_type: Optional[str] = "image/png",
        method: str = "GET",
        error: Optional[Exception] = None,
    ) -> None:
        self.url = url
        self.request = SimpleNamespace(method=method)
        self.headers = {} if content_type is None else {"content-type": content_type}
        self._body = body
        self._error = error

    async def body(self) -> bytes:
        if self._error is not None:
            raise self._error
        return self._body


class FakeHTTPResponse:
    def __init__(self, payload: Any = None, text: str = "", status_code: int = 200) -> None:
        self._payload = payload
        self.text = text
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("Expecting value")
        return self._payload


class FakeSession:
    """Answers practice POSTs and bulletin GETs from dictionaries."""

    def __init__(
        self,
        practice: Optional[Dict[str, Any]] = None,
        pages: Optional[Dict[Tuple[Optional[str], int], str]] = None,
        listing: str = "",
    ) -> None:
        self.practice = practice or {}
        self.pages = pages or {}
        self.listing = listing
        self.posts: List[Tuple[str, Dict[str, str]]] = []
        self.gets: List[Tuple[str, Optional[Dict[str, str]]]] = []

    def post(self, url: str, data: Dict[str, str]) -> FakeHTTPResponse:
        self.posts.append((url, data))
        payload = self.practice.get(data["lectureID"])
        if payload is None:
            return FakeHTTPResponse(status_code=500)
        return FakeHTTPResponse(payload=payload)

    def get(self, url: str, params: Optional[Dict[str, str]] = None, timeout: float = 0) -> FakeHTTPResponse:
        self.gets.append((url, params))
        if params is None:
            return FakeHTTPResponse(text=self.listing)
        key = (params.get("basketScope"), int(params["page"]))
        return FakeHTTPResponse(text=self.pages.get(key, "  \n"))


def practice_payload(*questions: Tuple[int, str, List[int]]) -> Dict[str, Any]:
    return {
        "Questions": [
            {"QuestionID": qid, "Code": code, "CorrectAnswers": correct}
            for qid, code, correct in questions
        ]
    }


@pytest.fixture
def config(tmp_path: Path) -> ScrapeConfig:
    return ScrapeConfig(output_root=tmp_path, base_url="https://etesty2.mdcr.cz")
