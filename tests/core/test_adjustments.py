from __future__ import annotations

import pytest

from skillscoring.core import AdjustmentConfig, AdjustmentPipeline, IntegrityAssessment


def clean() -> IntegrityAssessment:
    return IntegrityAssessment()


def test_exact_copy_caps_score_and_suppresses_positive_corpus_delta():
    integrity = IntegrityAssessment(risk="high", is_exact_copy=True, flags=["exact_copy"])

    adjusted = AdjustmentPipeline().apply(
        ensemble_score=95,
        integrity=integrity,
        corpus_adjustment=8,
        hints_used=1,
    )

    assert adjusted.final_score == 47
    assert adjusted.breakdown.integrity_penalty == 45
    assert adjusted.breakdown.corpus_adjustment == 0
    assert adjusted.breakdown.hint_penalty == 3


def test_high_risk_without_copy_applies_multiplier():
    adjusted = AdjustmentPipeline().apply(
        ensemble_score=80,
        integrity=IntegrityAssessment(risk="high"),
        corpus_adjustment=-5,
        hints_used=0,
    )

    assert adjusted.breakdown.integrity_penalty == 12
    assert adjusted.final_score == 63


def test_medium_risk_is_not_penalized():
    adjusted = AdjustmentPipeline().apply(
        ensemble_score=80,
        integrity=IntegrityAssessment(risk="medium"),
        corpus_adjustment=0,
        hints_used=0,
    )

    assert adjusted.final_score == 80


def test_two_hints_cost_six_points():
    adjusted = AdjustmentPipeline().apply(ensemble_score=80, integrity=clean(), corpus_adjustment=0, hints_used=2)

    assert adjusted.final_score == 74
    assert adjusted.hint_penalty == 6


@pytest.mark.parametrize("hints", [0, 1, 2, 3, 4, 7])
def test_hint_penalty_is_capped(hints: int):
    adjusted = AdjustmentPipeline().apply(ensemble_score=70, integrity=clean(), corpus_adjustment=0, hints_used=hints)

    assert adjusted.hint_penalty == min(hints, 3) * 3
    assert adjusted.final_score == 70 - min(hints, 3) * 3


def test_scores_never_leave_bounds():
    pipeline = AdjustmentPipeline()

    low = pipeline.apply(ensemble_score=5, integrity=clean(), corpus_adjustment=-10, hints_used=3)
    high = pipeline.apply(ensemble_score=98, integrity=clean(), corpus_adjustment=10, hints_used=0)

    assert low.final_score == 0
    assert high.final_score == 100
    assert high.breakdown.corpus_adjustment == 2


def test_fractional_and_negative_hint_counts_are_normalized():
    pipeline = AdjustmentPipeline()

    assert pipeline.normalize_hints(2.9) == 2
    assert pipeline.normalize_hints(-1) == 0
    assert pipeline.normalize_hints(None) == 0


def test_custom_hint_points():
    pipeline = AdjustmentPipeline(config=AdjustmentConfig(hint_penalty_points=5))

    assert pipeline.hint_penalty(2) == 10


@pytest.mark.parametrize("ensemble_score", [0, 30, 50, 51, 75, 100])
@pytest.mark.parametrize("corpus_adjustment", [-10, 0, 10])
def test_exact_copy_never_exceeds_fifty(ensemble_score: int, corpus_adjustment: int):
    integrity = IntegrityAssessment(risk="high", is_exact_copy=True, flags=["exact_copy"])

    adjusted = AdjustmentPipeline().apply(
        ensemble_score=ensemble_score,
        integrity=integrity,
        corpus_adjustment=corpus_adjustment,
        hints_used=0,
    )

    assert 0 <= adjusted.final_score <= 50
