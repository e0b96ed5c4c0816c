"""Data classes for the tutor domain model."""
from dataclasses import dataclass, field
from typing import Optional


def percent(part: int, whole: int) -> int:
    """Whole-number percentage rounded half up; 0 when whole is 0."""
    if whole == 0:
        return 0
    return (part * 200 + whole) // (whole * 2)


@dataclass(frozen=True)
class Question:
    id: str
    exam_year: int
    subject: str
    number: int
    question: str
    options: list
    answer: str
    round: int = 0
    explanation: str = ""
    memory_tip: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Question":
        return cls(
            id=str(data["id"]),
            exam_year=int(data["exam_year"]),
            subject=data["subject"],
            number=int(data["number"]),
            question=data["question"],
            options=list(data["options"]),
            answer=str(data["answer"]),
            round=int(data.get("round") or 0),
            explanation=data.get("explanation") or "",
            memory_tip=data.get("memory_tip") or "",
        )


@dataclass(frozen=True)
class Flashcard:
    id: str
    subject: str
    front: str
    back: str

    @classmethod
    def from_dict(cls, data: dict) -> "Flashcard":
        return cls(
            id=str(data["id"]),
            subject=data["subject"],
            front=data["front"],
            back=data["back"],
        )


@dataclass
class SolvedEntry:
    correct: bool
    count: int
    last_date: Optional[str] = None
    selected_answer: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "correct": self.correct,
            "count": self.count,
            "lastDate": self.last_date,
            "selectedAnswer": self.selected_answer,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SolvedEntry":
        return cls(
            correct=bool(data["correct"]),
            count=int(data.get("count") or 0),
            last_date=data.get("lastDate"),
            selected_answer=data.get("selectedAnswer"),
        )


@dataclass
class CardProgress:
    level: int = 0
    next_review: int = 0  # epoch milliseconds

    def is_due(self, now: int) -> bool:
        return self.next_review <= now

    def to_dict(self) -> dict:
        return {"level": self.level, "nextReview": self.next_review}

    @classmethod
    def from_dict(cls, data: dict) -> "CardProgress":
        level = min(max(int(data.get("level") or 0), 0), 3)
        return cls(level=level, next_review=int(data.get("nextReview") or 0))


@dataclass
class ProgressSnapshot:
    """Everything that survives a restart: answers, bookmarks, card levels."""

    solved: dict = field(default_factory=dict)
    bookmarks: list = field(default_factory=list)
    fc_cards: dict = field(default_factory=dict)

    def is_bookmarked(self, question_id: str) -> bool:
        return question_id in self.bookmarks

    def to_dict(self) -> dict:
        return {
            "solved": {qid: entry.to_dict() for qid, entry in self.solved.items()},
            "bookmarks": list(self.bookmarks),
            "fcCards": {cid: p.to_dict() for cid, p in self.fc_cards.items()},
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ProgressSnapshot":
        solved = data.get("solved") or {}
        bookmarks = data.get("bookmarks") or []
        fc_cards = data.get("fcCards") or {}
        return cls(
            solved={str(qid): SolvedEntry.from_dict(v) for qid, v in solved.items()},
            bookmarks=list(dict.fromkeys(str(qid) for qid in bookmarks)),
            fc_cards={str(cid): CardProgress.from_dict(v) for cid, v in fc_cards.items()},
        )


@dataclass
class WrongAnswer:
    question: Question
    selected_option: int
    correct_answer: str
    index: int = 0


@dataclass
class QuizResult:
    correct_count: int
    total: int
    wrong_list: list = field(default_factory=list)

    @property
    def percentage(self) -> int:
        return percent(self.correct_count, self.total)


@dataclass
class LawArticle:
    title: str
    content: str = ""
    is_chapter: bool = False
