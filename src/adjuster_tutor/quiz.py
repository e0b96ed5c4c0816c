"""Quiz engine: answer checking, the quiz session state machine and review sets."""
import logging
import random
from datetime import datetime

from adjuster_tutor.filters import shuffle
from adjuster_tutor.models import Question, QuizResult, SolvedEntry, WrongAnswer
from adjuster_tutor.store import ProgressStore

logger = logging.getLogger(__name__)

QUICK_QUIZ_SIZE = 10

SETUP = "setup"
ACTIVE = "active"
RESULT = "result"


def parse_correct_answers(answer: str) -> set[int]:
    """Parse "2" or "2,3" into option numbers; non-numeric tokens are dropped."""
    numbers = set()
    for token in str(answer).split(","):
        token = token.strip()
        if token.isdigit():
            numbers.add(int(token))
    return numbers


def is_correct_answer(selected: int | None, answer: str) -> bool:
    return selected in parse_correct_answers(answer)


class QuizSession:
    """One pass over an ordered list of questions.

    Answers are kept per index for the session and written through to the
    progress store as they are given.
    """

    def __init__(self, store: ProgressStore):
        self.store = store
        self.questions: list[Question] = []
        self.index = 0
        self.answers: dict[int, int] = {}
        self.state = SETUP

    def start(self, questions: list) -> bool:
        if not questions:
            logger.info("Quiz not started: empty selection")
            return False
        self.questions = list(questions)
        self.index = 0
        self.answers = {}
        self.state = ACTIVE
        return True

    @property
    def current_question(self) -> Question | None:
        if not self.questions:
            return None
        return self.questions[self.index]

    @property
    def is_answered(self) -> bool:
        return self.index in self.answers

    @property
    def selected_option(self) -> int | None:
        return self.answers.get(self.index)

    @property
    def is_last(self) -> bool:
        return self.index == len(self.questions) - 1

    @property
    def progress_label(self) -> str:
        return f"{self.index + 1} / {len(self.questions)}"

    def answer(self, option: int, now: datetime | None = None) -> bool | None:
        """Record ``option`` for the current question and return whether it was right.

        Returns None without touching anything if the question was already answered.
        """
        if self.state != ACTIVE or self.is_answered:
            return None
        question = self.current_question
        correct = is_correct_answer(option, question.answer)
        self.answers[self.index] = option

        solved = self.store.snapshot.solved
        previous = solved.get(question.id)
        solved[question.id] = SolvedEntry(
            correct=correct,
            count=(previous.count if previous else 0) + 1,
            last_date=(now or datetime.now()).isoformat(),
            selected_answer=option,
        )
        self.store.save()
        return correct

    def next(self) -> None:
        if self.state != ACTIVE:
            return
        if not self.is_last:
            self.index += 1
        elif self.is_answered:
            self.state = RESULT

    def prev(self) -> None:
        if self.state == ACTIVE and self.index > 0:
            self.index -= 1

    def toggle_bookmark(self) -> bool:
        """Flip the bookmark on the current question; returns the new membership."""
        question = self.current_question
        if question is None:
            return False
        bookmarks = self.store.snapshot.bookmarks
        if question.id in bookmarks:
            bookmarks.remove(question.id)
            bookmarked = False
        else:
            bookmarks.append(question.id)
            bookmarked = True
        self.store.save()
        return bookmarked

    def compute_result(self) -> QuizResult:
        correct = 0
        wrong_list = []
        for i, question in enumerate(self.questions):
            selected = self.answers.get(i)
            if selected is None:
                continue
            if is_correct_answer(selected, question.answer):
                correct += 1
            else:
                wrong_list.append(WrongAnswer(
                    question=question,
                    selected_option=selected,
                    correct_answer=question.answer,
                    index=i,
                ))
        return QuizResult(correct_count=correct, total=len(self.questions), wrong_list=wrong_list)

    def wrong_questions(self) -> list[Question]:
        """Questions answered wrongly in this session, in session order."""
        return [w.question for w in self.compute_result().wrong_list]


def quick_quiz_questions(
    questions: list, size: int = QUICK_QUIZ_SIZE, rng: random.Random | None = None
) -> list[Question]:
    return shuffle(questions, rng)[:size]


def wrong_review_questions(
    questions: list, solved: dict, rng: random.Random | None = None
) -> list[Question]:
    """Every question whose latest stored answer was wrong, shuffled."""
    wrong = [q for q in questions if q.id in solved and not solved[q.id].correct]
    return shuffle(wrong, rng)


def bookmark_review_questions(questions: list, bookmarks: list) -> list[Question]:
    marked = set(bookmarks)
    return [q for q in questions if q.id in marked]
