"""Question bank selection: year/subject filters and quiz ordering modes."""
import random

from adjuster_tutor.models import Question

QUIZ_MODES = ("sequential", "random", "weak")

SUBJECT_SHORT_NAMES = {
    "상법(보험편)": "상법 보험편",
    "농어업재해보험법령": "재해보험법",
    "농학개론 중 재배학 및 원예작물학": "농학개론",
}

# Weak mode: previously wrong first, then unsolved, then previously correct.
WRONG_PRIORITY = 0
UNSOLVED_PRIORITY = 1
CORRECT_PRIORITY = 2


def short_subject_name(subject: str) -> str:
    return SUBJECT_SHORT_NAMES.get(subject, subject)


def available_years(questions: list) -> list[int]:
    return sorted({q.exam_year for q in questions})


def available_subjects(items: list) -> list[str]:
    """Unique subjects in first-seen order."""
    return list(dict.fromkeys(item.subject for item in items))


def shuffle(items: list, rng: random.Random | None = None) -> list:
    """Fisher-Yates shuffle of a copy of ``items``."""
    rng = rng or random.Random()
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def filter_questions(questions: list, years, subjects) -> list[Question]:
    """Questions whose year AND subject are both selected.

    An empty selection on either axis means nothing is selected.
    """
    years = set(years)
    subjects = set(subjects)
    return [q for q in questions if q.exam_year in years and q.subject in subjects]


def weak_priority(question: Question, solved: dict) -> int:
    entry = solved.get(question.id)
    if entry is None:
        return UNSOLVED_PRIORITY
    return CORRECT_PRIORITY if entry.correct else WRONG_PRIORITY


def order_questions(
    questions: list,
    mode: str,
    solved: dict,
    rng: random.Random | None = None,
) -> list[Question]:
    if mode == "sequential":
        return list(questions)
    if mode == "random":
        return shuffle(questions, rng)
    if mode == "weak":
        # sorted() is stable, so ties keep bank order
        return sorted(questions, key=lambda q: weak_priority(q, solved))
    raise ValueError(f"Unknown quiz mode: {mode!r} (expected one of {', '.join(QUIZ_MODES)})")


def select_questions(
    questions: list,
    years,
    subjects,
    mode: str,
    solved: dict,
    rng: random.Random | None = None,
) -> list[Question]:
    return order_questions(filter_questions(questions, years, subjects), mode, solved, rng)
