from __future__ import annotations

from skillscoring.core import FLAG_DESCRIPTIONS, GamingDetector, IntegrityEvaluator
from skillscoring.core.review import ReviewRouter

EXAMPLE = (
    "Search LinkedIn for site reliability engineers in Berlin using (SRE OR \"site reliability\") "
    "AND (Kubernetes OR Terraform), then message the shortlist with a note about their conference talks."
)

GENUINE = (
    "We map target companies first, then review public engineering blogs and conference speaker lists "
    "to find people who shipped distributed databases. Each shortlist is reviewed weekly with the "
    "hiring manager to refine the criteria."
)


def test_exact_copy_is_high_risk():
    assessment = IntegrityEvaluator().assess(
        EXAMPLE,
        example=EXAMPLE,
        example_similarity=1.0,
        provisional_score=95,
    )

    assert assessment.is_exact_copy is True
    assert assessment.risk == "high"
    assert "exact_copy" in assessment.flags
    assert assessment.gaming.recommended_action == "reject"


def test_whitespace_and_case_changes_still_count_as_copy():
    assessment = IntegrityEvaluator().assess(
        "  " + EXAMPLE.upper().replace(" ", "   "),
        example=EXAMPLE,
        example_similarity=0.5,
        provisional_score=50,
    )

    assert assessment.is_exact_copy is True


def test_near_identical_embedding_raises_medium_risk():
    assessment = IntegrityEvaluator().assess(
        GENUINE,
        example=EXAMPLE,
        example_similarity=0.92,
        provisional_score=50,
    )

    assert assessment.is_exact_copy is False
    assert "near_identical_example" in assessment.flags
    assert assessment.risk == "medium"


def test_low_effort_indicators_combine_to_medium_risk():
    assessment = IntegrityEvaluator().assess(
        "TODO [insert answer here]",
        example=None,
        example_similarity=0.0,
        provisional_score=10,
    )

    assert "too_short" in assessment.flags
    assert "unfilled_placeholders" in assessment.flags
    assert assessment.risk == "medium"


def test_genuine_answer_is_low_risk():
    assessment = IntegrityEvaluator().assess(
        GENUINE,
        example=None,
        example_similarity=0.0,
        provisional_score=85,
    )

    assert assessment.risk == "low"
    assert assessment.flags == []
    assert assessment.gaming.risk == "none"
    assert assessment.gaming.recommended_action == "allow"


def test_flag_descriptions_cover_every_flag():
    assessment = IntegrityEvaluator().assess(
        "TODO [insert answer here]",
        example=None,
        example_similarity=0.0,
        provisional_score=10,
    )

    described = assessment.describe()

    assert described == [FLAG_DESCRIPTIONS[flag] for flag in assessment.flags]


def test_keyword_stuffing_is_critical_gaming():
    text = "candidate recruiting hiring talent sourcing strategy skills " * 7

    gaming = GamingDetector().detect(text, skill_category="general")

    assert "keyword_stuffing" in gaming.signals
    assert gaming.risk == "critical"
    assert gaming.recommended_action == "reject"


def test_gaming_risk_escalates_integrity_to_medium():
    text = "candidate recruiting hiring talent sourcing strategy skills " * 7

    assessment = IntegrityEvaluator().assess(text, example=None, example_similarity=0.0, provisional_score=40)

    assert assessment.risk == "medium"
    assert "keyword_stuffing" in assessment.flags


def test_assistant_phrasing_with_high_score_is_escalated():
    text = (
        "As an AI, I'd be happy to help. Certainly! I would search LinkedIn for backend engineers, "
        "review their repositories, and send a short personalised note about their recent work. "
        "I hope this helps with your sourcing plan for the quarter ahead."
    )

    assessment = IntegrityEvaluator().assess(text, example=None, example_similarity=0.0, provisional_score=90)

    assert "ai_phrasing" in assessment.flags
    assert "templated_high_score" in assessment.flags
    assert assessment.risk in ("medium", "high")


BOOLEAN_QUERY = '(python OR golang) AND (senior OR lead) AND "distributed systems" AND berlin'


def test_well_formed_boolean_string_is_not_low_effort():
    assessment = IntegrityEvaluator().assess(
        BOOLEAN_QUERY,
        example=None,
        example_similarity=0.0,
        provisional_score=90,
        skill_category="boolean",
    )

    assert assessment.risk == "low"
    assert assessment.flags == []
    assert assessment.gaming.risk == "none"
    assert assessment.gaming.recommended_action == "allow"
    assert ReviewRouter().route(confidence=80, integrity=assessment).should_review is False


def test_same_boolean_string_is_short_for_prose_categories():
    assessment = IntegrityEvaluator().assess(
        BOOLEAN_QUERY,
        example=None,
        example_similarity=0.0,
        provisional_score=90,
        skill_category="general",
    )

    assert "too_short" in assessment.flags
    assert assessment.gaming.scores["low_effort"] > 0


def test_extended_query_is_not_treated_as_templated():
    assessment = IntegrityEvaluator().assess(
        "(python OR golang) AND (senior OR lead OR staff) AND (kubernetes OR k8s) AND (berlin OR munich) NOT intern",
        example="(python OR golang) AND senior",
        example_similarity=0.6,
        provisional_score=88,
        skill_category="boolean",
    )

    assert "templated_high_score" not in assessment.flags
    assert assessment.flags == []
    assert assessment.risk == "low"


def test_formal_categories_soften_assistant_phrasing():
    text = (
        "The role offers ownership of the payments platform and the team ships weekly, "
        "which makes it a rare chance to lead. I hope this helps you decide. I'd be happy to share more."
    )

    general = GamingDetector().detect(text, skill_category="general")
    outreach = GamingDetector().detect(text, skill_category="outreach")

    assert "ai_phrasing" in general.signals
    assert "ai_phrasing" not in outreach.signals
    assert outreach.scores["ai_generated"] < general.scores["ai_generated"]
