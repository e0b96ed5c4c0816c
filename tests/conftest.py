import pytest

from adjuster_tutor.models import Flashcard, Question
from adjuster_tutor.store import ProgressStore


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_tutor.db")
    return db_path


@pytest.fixture
def store(tmp_db):
    store = ProgressStore(tmp_db)
    store.load()
    return store


@pytest.fixture
def make_question():
    def _make(qid, year=2023, subject="상법(보험편)", answer="2", memory_tip="", number=1):
        return Question(
            id=qid, exam_year=year, subject=subject, number=number,
            question=f"Question {qid}?", options=["one", "two", "three", "four"],
            answer=answer, memory_tip=memory_tip,
        )
    return _make


@pytest.fixture
def make_card():
    def _make(cid, subject="상법(보험편)"):
        return Flashcard(id=cid, subject=subject, front=f"front {cid}", back=f"back {cid}")
    return _make
