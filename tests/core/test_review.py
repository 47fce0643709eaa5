from __future__ import annotations

import pytest

from skillscoring.core import GamingAssessment, IntegrityAssessment, ReviewConfig, ReviewRouter


def route(confidence: int, integrity: IntegrityAssessment | None = None, router: ReviewRouter | None = None):
    return (router or ReviewRouter()).route(confidence=confidence, integrity=integrity or IntegrityAssessment())


def test_confident_clean_attempt_is_not_escalated():
    decision = route(90)

    assert decision.should_review is False
    assert decision.reasons == []


def test_low_confidence_is_escalated_with_reason():
    decision = route(55)

    assert decision.should_review is True
    assert decision.reasons == ["Low confidence (55%)"]


def test_exact_copy_lists_risk_and_flag_reasons():
    integrity = IntegrityAssessment(risk="high", is_exact_copy=True, flags=["exact_copy", "too_short"])

    decision = route(90, integrity)

    assert "Integrity risk: high" in decision.reasons
    assert "Flags: exact_copy" in decision.reasons


def test_gaming_action_triggers_review():
    integrity = IntegrityAssessment(gaming=GamingAssessment(risk="critical", recommended_action="reject"))

    decision = route(90, integrity)

    assert decision.reasons == ["Gaming risk: critical", "Recommended action: reject"]


def test_threshold_is_configurable():
    router = ReviewRouter(config=ReviewConfig(min_confidence=80))

    assert route(75, router=router).should_review is True


def test_build_item_requires_reasons():
    router = ReviewRouter()
    decision = route(95)

    with pytest.raises(ValueError):
        router.build_item(
            decision,
            attempt_id="A-1",
            player_id="P-1",
            game_id="G-1",
            score=80,
            confidence=95,
            integrity=IntegrityAssessment(),
        )


def test_build_item_carries_decision_context():
    router = ReviewRouter()
    integrity = IntegrityAssessment(risk="medium", flags=["unfilled_placeholders"])
    decision = router.route(confidence=40, integrity=integrity)

    item = router.build_item(
        decision,
        attempt_id="A-1",
        player_id="P-1",
        game_id="G-1",
        score=35,
        confidence=40,
        integrity=integrity,
    )

    assert item.status == "pending"
    assert item.reasons == decision.reasons
    assert item.integrity_risk == "medium"
    assert item.flags == ["unfilled_placeholders"]
    assert item.created_at
