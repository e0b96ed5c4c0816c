"""Flashcard deck ordering and the review cursor."""
from adjuster_tutor.models import CardProgress, Flashcard
from adjuster_tutor.scheduler import MAX_LEVEL, mark_known, mark_unknown, now_ms
from adjuster_tutor.store import ProgressStore

LEVEL_NAMES = ("새 카드", "학습중", "복습", "마스터")


def level_name(level: int) -> str:
    if 0 <= level < len(LEVEL_NAMES):
        return LEVEL_NAMES[level]
    return LEVEL_NAMES[0]


def order_cards(cards: list, fc_cards: dict, subjects, now: int) -> list[Flashcard]:
    """Cards of the selected subjects, due ones first, lower levels first within each group."""
    subjects = set(subjects)
    selected = [c for c in cards if c.subject in subjects]

    def sort_key(card):
        progress = fc_cards.get(card.id) or CardProgress()
        return (0 if progress.is_due(now) else 1, progress.level)

    return sorted(selected, key=sort_key)


class FlashcardDeck:
    """A circular deck over the selected cards.

    know/dont_know/skip always move on to the next card and wrap to the
    first one after the last; the deck never ends by itself.
    """

    def __init__(self, store: ProgressStore, cards: list):
        self.store = store
        self.cards = list(cards)
        self.deck: list[Flashcard] = []
        self.index = 0

    def filter(self, subjects, now: int | None = None) -> list[Flashcard]:
        now = now_ms() if now is None else now
        self.deck = order_cards(self.cards, self.store.snapshot.fc_cards, subjects, now)
        self.index = 0
        return self.deck

    @property
    def current_card(self) -> Flashcard | None:
        if not self.deck:
            return None
        return self.deck[self.index]

    @property
    def current_progress(self) -> CardProgress:
        card = self.current_card
        if card is None:
            return CardProgress()
        return self.store.snapshot.fc_cards.get(card.id) or CardProgress()

    @property
    def progress_label(self) -> str:
        if not self.deck:
            return "0 / 0"
        return f"{self.index + 1} / {len(self.deck)}"

    def mastered_count(self) -> int:
        return sum(1 for p in self.store.snapshot.fc_cards.values() if p.level >= MAX_LEVEL)

    def know(self, now: int | None = None) -> None:
        card = self.current_card
        if card is None:
            return
        mark_known(card.id, self.store.snapshot.fc_cards, now)
        self.store.save()
        self._advance()

    def dont_know(self) -> None:
        card = self.current_card
        if card is None:
            return
        mark_unknown(card.id, self.store.snapshot.fc_cards)
        self.store.save()
        self._advance()

    def skip(self) -> None:
        if self.deck:
            self._advance()

    def _advance(self) -> None:
        if self.index < len(self.deck) - 1:
            self.index += 1
        else:
            self.index = 0
