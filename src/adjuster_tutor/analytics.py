"""Progress statistics for the home screen and analytics view."""
from adjuster_tutor.filters import available_subjects, available_years, short_subject_name
from adjuster_tutor.models import ProgressSnapshot, percent

PASS_MARK = 60
UNGROUPED_TIP = "기타"


def get_score_color(score: float) -> str:
    return "green" if score >= PASS_MARK else "red"


def get_wrong_rate_color(rate: float) -> str:
    if rate >= 70:
        return "red"
    elif rate >= 40:
        return "yellow"
    return "green"


def home_stats(questions: list, flashcards: list, snapshot: ProgressSnapshot) -> dict:
    solved = snapshot.solved
    solved_count = len(solved)
    correct_count = sum(1 for entry in solved.values() if entry.correct)
    return {
        "total_questions": len(questions),
        "total_flashcards": len(flashcards),
        "solved": solved_count,
        "correct": correct_count,
        "accuracy": percent(correct_count, solved_count),
        "progress": percent(solved_count, len(questions)),
        "wrong": solved_count - correct_count,
        "bookmarks": len(snapshot.bookmarks),
    }


def subject_stats(questions: list, solved: dict) -> list[dict]:
    results = []
    for subject in available_subjects(questions):
        in_subject = [q for q in questions if q.subject == subject]
        answered = [q for q in in_subject if q.id in solved]
        correct = sum(1 for q in answered if solved[q.id].correct)
        results.append({
            "subject": subject,
            "short_name": short_subject_name(subject),
            "total": len(in_subject),
            "solved": len(answered),
            "correct": correct,
            "accuracy": percent(correct, len(answered)),
            "progress": percent(len(answered), len(in_subject)),
        })
    return results


def year_stats(questions: list, solved: dict) -> list[dict]:
    results = []
    for year in available_years(questions):
        answered = [q for q in questions if q.exam_year == year and q.id in solved]
        correct = sum(1 for q in answered if solved[q.id].correct)
        results.append({
            "year": year,
            "solved": len(answered),
            "correct": correct,
            "wrong": len(answered) - correct,
            "accuracy": percent(correct, len(answered)),
        })
    return results


def weak_points(questions: list, solved: dict, limit: int = 10) -> list[dict]:
    """Memory-tip groups with at least one wrong answer, worst wrong rate first."""
    groups = {}
    for q in questions:
        entry = solved.get(q.id)
        if entry is None:
            continue
        group = groups.setdefault(q.memory_tip or UNGROUPED_TIP, {"total": 0, "wrong": 0})
        group["total"] += 1
        if not entry.correct:
            group["wrong"] += 1
    points = [
        {
            "tip": tip,
            "total": g["total"],
            "wrong": g["wrong"],
            "wrong_rate": percent(g["wrong"], g["total"]),
        }
        for tip, g in groups.items()
        if g["wrong"] > 0
    ]
    points.sort(key=lambda p: p["wrong_rate"], reverse=True)
    return points[:limit]


def recent_wrong(questions: list, solved: dict, limit: int = 10) -> list[tuple]:
    """(question, entry) pairs for the latest wrong answers, newest first."""
    by_id = {q.id: q for q in questions}
    wrong = [
        (qid, entry) for qid, entry in solved.items()
        if not entry.correct and entry.last_date
    ]
    wrong.sort(key=lambda item: item[1].last_date, reverse=True)
    return [(by_id[qid], entry) for qid, entry in wrong[:limit] if qid in by_id]
