import itertools

import numpy as np
import pytest

from drawpoker.cards import RANKS, SUITS, Card, random_hand
from drawpoker.evaluator import PayoutSchedule, classify, encode_cards, four_kind_key, score_hands
from drawpoker.models import HandCategory
from drawpoker.paytables import Paytable

from .helpers import BONUS_POKER, DOUBLE_DOUBLE_BONUS, JOB_9_6, hand

CATEGORY_CASES = [
    (["As", "Ks", "Qs", "Js", "Ts"], HandCategory.ROYAL, "ROYAL", 800),
    (["9h", "8h", "7h", "6h", "5h"], HandCategory.STRAIGHT_FLUSH, "STRAIGHT_FLUSH", 50),
    (["Ah", "2h", "3h", "4h", "5h"], HandCategory.STRAIGHT_FLUSH, "STRAIGHT_FLUSH", 50),  # steel wheel
    (["Kh", "Kd", "Kc", "Ks", "2h"], HandCategory.FOUR_KIND, "FOUR_KIND", 25),
    (["Qh", "Qd", "Qc", "7s", "7h"], HandCategory.FULL_HOUSE, "FULL_HOUSE", 9),
    (["Ad", "9d", "7d", "5d", "2d"], HandCategory.FLUSH, "FLUSH", 6),
    (["5c", "4d", "3h", "2s", "Ah"], HandCategory.STRAIGHT, "STRAIGHT", 4),
    (["Ts", "Jd", "Qh", "Kc", "Ac"], HandCategory.STRAIGHT, "STRAIGHT", 4),
    (["8h", "8d", "8c", "Ks", "2h"], HandCategory.THREE_KIND, "THREE_KIND", 3),
    (["Jh", "Jd", "5c", "5s", "2h"], HandCategory.TWO_PAIR, "TWO_PAIR", 2),
    (["Ah", "Ad", "8c", "5s", "2h"], HandCategory.JACKS_OR_BETTER, "JacksOrBetter", 1),
    (["Jh", "Jd", "8c", "5s", "2h"], HandCategory.JACKS_OR_BETTER, "JacksOrBetter", 1),
    (["7h", "7d", "Kc", "Qs", "2h"], HandCategory.NOTHING, None, 0),  # low pair
    (["Th", "Td", "Kc", "Qs", "2h"], HandCategory.NOTHING, None, 0),  # tens do not qualify
    (["Ah", "Kd", "Qc", "Js", "9h"], HandCategory.NOTHING, None, 0),
    (["Qh", "Kh", "Ah", "2h", "3d"], HandCategory.NOTHING, None, 0),  # no wrap-around straight
]

# Hands whose quad rank / kicker exercise every step of the fallback chain.
FOUR_KIND_CASES = [
    (["As", "Ah", "Ad", "Ac", "2s"], DOUBLE_DOUBLE_BONUS, "FOUR_ACES_WITH_234", 400),
    (["As", "Ah", "Ad", "Ac", "4d"], DOUBLE_DOUBLE_BONUS, "FOUR_ACES_WITH_234", 400),
    (["As", "Ah", "Ad", "Ac", "Kd"], DOUBLE_DOUBLE_BONUS, "FOUR_ACES", 160),
    (["3s", "3h", "3d", "3c", "Ad"], DOUBLE_DOUBLE_BONUS, "FOUR_2_4_WITH_A_4", 160),
    (["4s", "4h", "4d", "4c", "2d"], DOUBLE_DOUBLE_BONUS, "FOUR_2_4_WITH_A_4", 160),
    (["2s", "2h", "2d", "2c", "9d"], DOUBLE_DOUBLE_BONUS, "FOUR_2_4", 80),
    (["7s", "7h", "7d", "7c", "Ad"], DOUBLE_DOUBLE_BONUS, "FOUR_5_K", 50),
    (["Ks", "Kh", "Kd", "Kc", "3d"], DOUBLE_DOUBLE_BONUS, "FOUR_5_K", 50),
    (["As", "Ah", "Ad", "Ac", "3d"], BONUS_POKER, "FOUR_ACES_WITH_234", 160),
    (["5s", "5h", "5d", "5c", "Ad"], BONUS_POKER, "FOUR_5_K", 25),
    (["As", "Ah", "Ad", "Ac", "2s"], JOB_9_6, "FOUR_KIND", 25),
    (["3s", "3h", "3d", "3c", "Ad"], JOB_9_6, "FOUR_KIND", 25),
]


def test_classify_identifies_all_hand_categories():
    for labels, category, key, payout in CATEGORY_CASES:
        result = classify(hand(*labels), JOB_9_6)
        assert result.category is category, f"labels={labels}"
        assert result.key == key, f"labels={labels}"
        assert result.payout == payout, f"labels={labels}"


def test_classify_accepts_symbol_labels():
    royal = classify(["A♠", "K♠", "Q♠", "J♠", "10♠"], JOB_9_6)
    assert royal.key == "ROYAL"
    assert royal.payout == 800
    assert royal.name == "Royal Flush"

    wheel = classify(["A♠", "2♥", "3♦", "4♣", "5♠"], JOB_9_6)
    assert wheel.category is HandCategory.STRAIGHT

    aces = classify(["A♠", "A♥", "A♦", "A♣", "2♠"], DOUBLE_DOUBLE_BONUS)
    assert aces.key == "FOUR_ACES_WITH_234"
    assert aces.payout == 400
    assert aces.name == "Four Aces (with 2)"


def test_four_of_a_kind_resolves_through_fallback_chain():
    for labels, paytable, key, payout in FOUR_KIND_CASES:
        result = classify(hand(*labels), paytable)
        assert result.category is HandCategory.FOUR_KIND, f"labels={labels}"
        assert result.key == key, f"labels={labels} paytable={paytable.name}"
        assert result.payout == payout, f"labels={labels} paytable={paytable.name}"


def test_four_kind_key_skips_absent_split_keys():
    aces_only = Paytable("aces", {"FOUR_ACES": 100, "FOUR_KIND": 30})
    assert four_kind_key("A", "3", aces_only) == "FOUR_ACES"
    assert four_kind_key("3", "A", aces_only) == "FOUR_KIND"

    small_quads = Paytable("small", {"FOUR_2_4": 70, "FOUR_KIND": 20})
    assert four_kind_key("2", "3", small_quads) == "FOUR_2_4"
    assert four_kind_key("A", "2", small_quads) == "FOUR_KIND"
    assert four_kind_key("9", "2", small_quads) == "FOUR_KIND"

    generic = Paytable("generic", {"FOUR_5_K": 50})
    assert four_kind_key("A", "2", generic) == "FOUR_5_K"


def test_missing_paytable_key_pays_zero():
    sparse = Paytable("sparse", {"ROYAL": 800})
    flush = classify(hand("Ad", "9d", "7d", "5d", "2d"), sparse)
    assert flush.category is HandCategory.FLUSH
    assert flush.key == "FLUSH"
    assert flush.payout == 0

    quads = classify(hand("7s", "7h", "7d", "7c", "Ad"), sparse)
    assert quads.key == "FOUR_KIND"
    assert quads.payout == 0


def test_classification_ignores_card_order():
    labels = ["Qh", "Qd", "Qc", "7s", "7h"]
    expected = classify(hand(*labels), JOB_9_6)
    for ordering in itertools.permutations(labels):
        assert classify(hand(*ordering), JOB_9_6) == expected


def test_hand_names_describe_the_made_hand():
    assert classify(hand("8h", "8d", "8c", "Ks", "2h"), JOB_9_6).name == "Three of a Kind (8s)"
    assert classify(hand("Qh", "Qd", "8c", "5s", "2h"), JOB_9_6).name == "Jacks or Better (Queens)"
    assert classify(hand("3s", "3h", "3d", "3c", "Ad"), DOUBLE_DOUBLE_BONUS).name == "Four 3s (with A)"
    assert classify(hand("Ks", "Kh", "Kd", "Kc", "3d"), DOUBLE_DOUBLE_BONUS).name == "Four Kings"
    assert classify(hand("7h", "7d", "Kc", "Qs", "2h"), JOB_9_6).name == "Nothing"


def test_classified_hand_serialises_for_callers():
    payload = classify(hand("Jh", "Jd", "5c", "5s", "2h"), JOB_9_6).as_dict()
    assert payload == {"name": "Two Pair", "key": "TWO_PAIR", "payout": 2, "category": "TWO_PAIR"}


def _score(hands, paytable):
    encoded = [encode_cards(cards) for cards in hands]
    values = np.stack([v for v, _ in encoded])
    suits = np.stack([s for _, s in encoded])
    return score_hands(values, suits, PayoutSchedule.for_paytable(paytable))


def test_vectorised_scoring_matches_classify():
    hands = [hand(*labels) for labels, *_ in CATEGORY_CASES]
    hands += [hand(*labels) for labels, *_ in FOUR_KIND_CASES]
    hands += [random_hand(seed) for seed in range(300)]
    for paytable in (JOB_9_6, DOUBLE_DOUBLE_BONUS, BONUS_POKER):
        scores = _score(hands, paytable)
        expected = [classify(cards, paytable).payout for cards in hands]
        assert scores.tolist() == expected, paytable.name


def test_vectorised_scoring_covers_every_quad_and_kicker():
    hands = [
        [Card(quad, s) for s in SUITS] + [Card(kicker, "s")]
        for quad in RANKS
        for kicker in RANKS
        if kicker != quad
    ]
    scores = _score(hands, DOUBLE_DOUBLE_BONUS)
    expected = [classify(cards, DOUBLE_DOUBLE_BONUS).payout for cards in hands]
    assert scores.tolist() == expected
