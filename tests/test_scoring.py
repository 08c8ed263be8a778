"""Tests for the scoring engine."""

import itertools

import pytest

from models import DraftRecord, SCORED_QUESTIONS, get_question
from scoring import (
    DEFAULT_SCORING,
    RiskTier,
    ScoringConfig,
    TIER_ORDER,
    assess,
    classify,
    is_flagged,
    score,
)


def _draft(**scores):
    return DraftRecord(**scores)


def test_score_is_sum_of_answers(filled_draft):
    assert score(filled_draft) == 6


def test_low_tier_example(filled_draft):
    result = assess(filled_draft)
    assert result.score == 6
    assert result.tier == RiskTier.LOW
    assert result.max_score == 19


def test_more_cats_moves_to_medium(filled_draft):
    filled_draft.cat_count_score = 4
    result = assess(filled_draft)
    assert result.score == 8
    assert result.tier == RiskTier.MEDIUM


def test_maximum_is_nineteen():
    assert DEFAULT_SCORING.max_score == 19
    worst = _draft(**{q.field: q.max_value for q in SCORED_QUESTIONS})
    assert assess(worst).score == 19
    assert assess(worst).tier == RiskTier.HIGH


def test_minimum_is_one():
    best = _draft(**{q.field: q.min_value for q in SCORED_QUESTIONS})
    assert score(best) == 1
    assert classify(score(best)) == RiskTier.LOW


@pytest.mark.parametrize("total,expected", [
    (1, RiskTier.LOW),
    (6, RiskTier.LOW),
    (7, RiskTier.MEDIUM),
    (13, RiskTier.MEDIUM),
    (14, RiskTier.HIGH),
    (19, RiskTier.HIGH),
])
def test_classify_cut_points(total, expected):
    assert classify(total) == expected


def test_score_ignores_answer_order():
    """Shuffling the 0-3 answers between questions keeps the total."""
    values = (3, 0, 2, 1, 3)
    fields = [q.field for q in SCORED_QUESTIONS if q.id != "cat_count"]
    totals = {
        score(_draft(cat_count_score=2, **dict(zip(fields, perm))))
        for perm in itertools.permutations(values)
    }
    assert totals == {2 + sum(values)}


def test_raising_an_answer_never_lowers_the_tier(filled_draft):
    base = assess(filled_draft)
    for question in SCORED_QUESTIONS:
        current = getattr(filled_draft, question.field)
        for option in question.options:
            if option.value <= current:
                continue
            bumped = filled_draft.model_copy(update={question.field: option.value})
            result = assess(bumped)
            assert result.score > base.score
            assert TIER_ORDER.index(result.tier) >= TIER_ORDER.index(base.tier)


def test_custom_cut_points():
    config = ScoringConfig(low_max=4, medium_max=10)
    assert classify(5, config) == RiskTier.MEDIUM
    assert classify(11, config) == RiskTier.HIGH


def test_cut_points_must_ascend():
    with pytest.raises(ValueError, match="must ascend"):
        ScoringConfig(low_max=13, medium_max=6)


def test_profile_follows_tier():
    profile = assess(_draft(**{q.field: q.max_value for q in SCORED_QUESTIONS})).profile
    assert profile.tier == RiskTier.HIGH
    assert profile.label_key == "report.tier.high"
    assert profile.color_token == "risk-high"


def test_flag_thresholds():
    cat_count = get_question("cat_count_score")
    edge = get_question("edge_behavior_score")
    assert not is_flagged(cat_count, 2)
    assert is_flagged(cat_count, 3)
    assert not is_flagged(edge, 1)
    assert is_flagged(edge, 2)
