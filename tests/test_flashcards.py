# tests/test_flashcards.py
from adjuster_tutor.flashcards import FlashcardDeck, level_name, order_cards
from adjuster_tutor.models import CardProgress
from adjuster_tutor.scheduler import DAY_MS
from adjuster_tutor.store import load_snapshot

NOW = 1_700_000_000_000
LAW = "상법(보험편)"
AGRI = "농학개론 중 재배학 및 원예작물학"


def test_order_due_first_then_level(make_card):
    cards = [make_card(c) for c in ("mastered", "due2", "new", "due1", "later1")]
    fc_cards = {
        "mastered": CardProgress(level=3, next_review=NOW + 30 * DAY_MS),
        "due2": CardProgress(level=2, next_review=NOW - 1),
        "due1": CardProgress(level=1, next_review=NOW),
        "later1": CardProgress(level=1, next_review=NOW + DAY_MS),
    }
    ordered = order_cards(cards, fc_cards, {LAW}, NOW)
    assert [c.id for c in ordered] == ["new", "due1", "due2", "later1", "mastered"]


def test_order_filters_subjects(make_card):
    cards = [make_card("a", LAW), make_card("b", AGRI), make_card("c", LAW)]
    assert [c.id for c in order_cards(cards, {}, {AGRI}, NOW)] == ["b"]
    assert order_cards(cards, {}, set(), NOW) == []


def test_order_is_stable_for_equal_keys(make_card):
    cards = [make_card(c) for c in "xyz"]
    assert [c.id for c in order_cards(cards, {}, {LAW}, NOW)] == ["x", "y", "z"]


def test_deck_know_persists_and_advances(store, make_card, tmp_db):
    deck = FlashcardDeck(store, [make_card("a"), make_card("b")])
    deck.filter({LAW}, now=NOW)
    deck.know(now=NOW)
    assert store.snapshot.fc_cards["a"].level == 1
    assert load_snapshot(tmp_db).fc_cards["a"].level == 1
    assert deck.current_card.id == "b"


def test_deck_dont_know_resets(store, make_card):
    store.snapshot.fc_cards["a"] = CardProgress(level=2, next_review=NOW - 1)
    deck = FlashcardDeck(store, [make_card("a")])
    deck.filter({LAW}, now=NOW)
    deck.dont_know()
    assert store.snapshot.fc_cards["a"] == CardProgress()


def test_deck_skip_does_not_touch_progress(store, make_card):
    deck = FlashcardDeck(store, [make_card("a"), make_card("b")])
    deck.filter({LAW}, now=NOW)
    deck.skip()
    assert store.snapshot.fc_cards == {}
    assert deck.index == 1


def test_deck_wraps_around(store, make_card):
    deck = FlashcardDeck(store, [make_card("a"), make_card("b"), make_card("c")])
    deck.filter({LAW}, now=NOW)
    deck.skip()
    deck.skip()
    assert deck.progress_label == "3 / 3"
    deck.know(now=NOW)
    assert deck.index == 0
    assert deck.current_card.id == "a"


def test_empty_deck_operations_are_no_ops(store, make_card):
    deck = FlashcardDeck(store, [make_card("a")])
    deck.filter(set(), now=NOW)
    assert deck.current_card is None
    assert deck.progress_label == "0 / 0"
    deck.know(now=NOW)
    deck.dont_know()
    deck.skip()
    assert store.snapshot.fc_cards == {}


def test_filter_resets_cursor(store, make_card):
    deck = FlashcardDeck(store, [make_card("a"), make_card("b")])
    deck.filter({LAW}, now=NOW)
    deck.skip()
    deck.filter({LAW}, now=NOW)
    assert deck.index == 0


def test_mastered_count(store, make_card):
    store.snapshot.fc_cards.update({
        "a": CardProgress(level=3, next_review=NOW),
        "b": CardProgress(level=2, next_review=NOW),
    })
    deck = FlashcardDeck(store, [make_card("a"), make_card("b")])
    assert deck.mastered_count() == 1


def test_level_names():
    assert [level_name(i) for i in range(4)] == ["새 카드", "학습중", "복습", "마스터"]
    assert level_name(7) == "새 카드"
