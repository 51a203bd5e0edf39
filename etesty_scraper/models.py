"""Data models used throughout the scraper pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

CSV_COLUMNS = ["id", "code", "name", "answer", "firstWrong", "secondWrong", "media"]


class ExtractionError(RuntimeError):
    """Raised when a rendered page does not have the expected structure."""

    def __init__(self, code: str, reason: str) -> None:
        super().__init__(f"{code}: {reason}")
        self.code = code
        self.reason = reason


@dataclass
class Section:
    """Topic grouping listed in the portal navigation menu."""

    id: str
    name: str


@dataclass
class QuestionMeta:
    """Question entry returned by the practice endpoint."""

    question_id: int
    code: str
    correct_answer_ids: List[int] = field(default_factory=list)

    @property
    def first_correct_id(self) -> Optional[int]:
        # Multi-answer questions only ever promote their first correct answer.
        return self.correct_answer_ids[0] if self.correct_answer_ids else None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "QuestionMeta":
        return cls(
            question_id=int(data["QuestionID"]),
            code=str(data["Code"]),
            correct_answer_ids=[int(value) for value in data.get("CorrectAnswers") or []],
        )


@dataclass
class QuestionsResponse:
    """Parsed body of a practice question request."""

    questions: List[QuestionMeta]

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "QuestionsResponse":
        return cls(questions=[QuestionMeta.from_json(item) for item in data["Questions"]])


@dataclass
class Question:
    """Fully extracted question, one CSV row."""

    id: int
    code: str
    name: str
    answer: str
    media: Optional[str] = None
    first_wrong: Optional[str] = None
    second_wrong: Optional[str] = None

    def as_row(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "code": self.code,
            "name": self.name,
            "answer": self.answer,
            "firstWrong": self.first_wrong,
            "secondWrong": self.second_wrong,
            "media": self.media,
        }


@dataclass
class RenderedAnswer:
    """Answer option as found in the rendered question document."""

    answer_id: Optional[str]
    text: str


@dataclass
class RenderedQuestion:
    """Raw values pulled out of a rendered question document."""

    answers: List[RenderedAnswer]
    question_texts: List[str]
    # None marks a frame child that carries no usable src attribute.
    media_sources: List[Optional[str]]


@dataclass
class QuestionOutcome:
    """Result of scraping a single question."""

    meta: QuestionMeta
    question: Optional[Question] = None
    error: Optional[ExtractionError] = None

    @property
    def ok(self) -> bool:
        return self.question is not None


@dataclass
class SectionReport:
    """Summary of a written section file."""

    section: Section
    output_path: Path
    question_count: int
    failures: List[str] = field(default_factory=list)


@dataclass
class BulletinQuestion:
    """Question parsed from the public question bulletin."""

    code: str
    change_date: str
    question: str
    media: str
    right_answer: str
    first_wrong_answer: Optional[str] = None
    second_wrong_answer: Optional[str] = None
