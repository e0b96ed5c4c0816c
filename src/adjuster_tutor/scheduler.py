"""Level-based spaced repetition for flashcards."""
import time

from adjuster_tutor.models import CardProgress

MAX_LEVEL = 3

MINUTE_MS = 60 * 1000
DAY_MS = 24 * 60 * MINUTE_MS

# Delay after a "known" answer, indexed by new level - 1.
REVIEW_INTERVALS_MS = [10 * MINUTE_MS, DAY_MS, 7 * DAY_MS]
MASTERED_INTERVAL_MS = 30 * DAY_MS


def now_ms() -> int:
    return int(time.time() * 1000)


def review_delay(level: int) -> int:
    """Milliseconds until the next review for a card that just reached ``level``.

    Levels 1 and 2 read the interval table; the capped level always gets the
    flat mastered interval, so the table's 7-day slot is never reached.
    """
    if level <= 2:
        return REVIEW_INTERVALS_MS[level - 1]
    return MASTERED_INTERVAL_MS


def initialize_progress(cards: list, fc_cards: dict) -> dict:
    """Give every card without progress a new, immediately-due entry."""
    for card in cards:
        if card.id not in fc_cards:
            fc_cards[card.id] = CardProgress()
    return fc_cards


def mark_known(card_id: str, fc_cards: dict, now: int | None = None) -> CardProgress:
    now = now_ms() if now is None else now
    progress = fc_cards.get(card_id) or CardProgress()
    level = min(progress.level + 1, MAX_LEVEL)
    updated = CardProgress(level=level, next_review=now + review_delay(level))
    fc_cards[card_id] = updated
    return updated


def mark_unknown(card_id: str, fc_cards: dict) -> CardProgress:
    """Any miss sends the card back to level 0, due immediately."""
    reset = CardProgress()
    fc_cards[card_id] = reset
    return reset
