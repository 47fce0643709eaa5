from __future__ import annotations

import itertools

import pytest

from skillscoring.core import EnsembleArbitrator


def test_all_signals_are_weighted_and_confidence_tracks_agreement():
    result = EnsembleArbitrator().arbitrate(
        validation_score=80,
        ai_score=90,
        embedding_similarity=0.7,
        embedding_expected=True,
    )

    assert result.components == {"validation": 80, "ai": 90, "embedding": 70}
    assert result.final_score == 84
    assert result.confidence == 84
    assert result.confidence_level == "high"
    assert result.used_ai is True
    assert pytest.approx(1.0) == sum(result.weights.values())


def test_weights_are_renormalized_over_present_signals():
    result = EnsembleArbitrator().arbitrate(
        validation_score=60,
        ai_score=80,
        embedding_similarity=None,
        embedding_expected=False,
    )

    assert set(result.weights) == {"validation", "ai"}
    assert pytest.approx(0.55 / 0.85) == result.weights["ai"]
    assert result.final_score == 73
    assert result.confidence == 80


def test_missing_signals_lower_confidence():
    result = EnsembleArbitrator().arbitrate(
        validation_score=70,
        ai_score=None,
        embedding_similarity=None,
        embedding_expected=True,
    )

    assert result.final_score == 70
    assert result.weights == {"validation": 1.0}
    assert result.confidence == 60
    assert result.confidence_level == "medium"
    assert result.used_ai is False
    assert "generative signal unavailable" in result.notes


def test_custom_weights_are_respected():
    arbitrator = EnsembleArbitrator(weights={"ai": 0.5, "validation": 0.5, "embedding": 0.0})

    result = arbitrator.arbitrate(validation_score=60, ai_score=80, embedding_similarity=1.0, embedding_expected=True)

    assert result.confidence == 67
    assert result.final_score == 70


def test_disagreement_reduces_generative_weight():
    result = EnsembleArbitrator().arbitrate(
        validation_score=20,
        ai_score=90,
        embedding_similarity=None,
        embedding_expected=False,
    )

    assert result.confidence == 30
    assert pytest.approx(0.33 / 0.63) == result.weights["ai"]
    assert result.final_score == 57
    assert any(note.startswith("ai weight reduced") for note in result.notes)


def test_reduced_generative_weight_is_floored():
    arbitrator = EnsembleArbitrator(weights={"ai": 0.3, "validation": 0.7})

    assert arbitrator.ai_weight_for(30) == pytest.approx(0.2)
    assert arbitrator.ai_weight_for(50) == pytest.approx(0.24)
    assert arbitrator.ai_weight_for(90) == pytest.approx(0.3)
    assert EnsembleArbitrator(weights={"ai": 0.1, "validation": 0.9}).ai_weight_for(10) == pytest.approx(0.1)


def test_confidence_is_non_increasing_in_signal_variance():
    arbitrator = EnsembleArbitrator()
    triples = list(itertools.product(range(0, 101, 20), repeat=3))
    results = [
        arbitrator.arbitrate(
            validation_score=v,
            ai_score=a,
            embedding_similarity=e / 100,
            embedding_expected=True,
        )
        for v, a, e in triples
    ]
    ordered = sorted(results, key=lambda result: result.std_dev)

    for lower, higher in zip(ordered, ordered[1:]):
        if higher.std_dev > lower.std_dev:
            assert higher.confidence <= lower.confidence


def test_final_score_and_range_stay_in_bounds():
    result = EnsembleArbitrator().arbitrate(
        validation_score=0,
        ai_score=100,
        embedding_similarity=1.0,
        embedding_expected=True,
    )

    assert 0 <= result.final_score <= 100
    low, high = result.score_range
    assert 0 <= low <= result.final_score <= high <= 100
