from __future__ import annotations

from skillscoring.core.validators import (
    FILLER_FEEDBACK,
    GeneralValidator,
    JobDescriptionValidator,
    OutreachValidator,
    PlatformSourcingValidator,
    StrategyValidator,
)
from skillscoring.schemas import ValidationConfig

PERSONALIZED_MESSAGE = (
    "Subject: Your Kubernetes operator talk at KubeCon\n\n"
    "Hi Maria, I watched your talk at the KubeCon conference on scaling operators and your "
    "open-source work on GitHub. Our platform team is building a multi-region scheduler and "
    "your experience would have real impact. Would you be open to a quick 15-min call next week?"
)

SOLID_ANSWER = " ".join(
    ["We map target companies and shortlist engineers with relevant platform experience."] * 5
)


def test_personalized_outreach_scores_full_marks():
    result = OutreachValidator().validate(PERSONALIZED_MESSAGE, ValidationConfig())

    assert result.score == 100
    assert result.checks["deep_personalization"] is True
    assert result.checks["has_subject_line"] is True
    assert result.feedback == [FILLER_FEEDBACK]


def test_outreach_cliches_are_deducted_by_tier():
    text = (
        "Hi there, just checking in. I came across your profile and think this is a "
        "great opportunity for you. Let me know."
    )

    result = OutreachValidator().validate(text, ValidationConfig())

    # severe 8 + two recruiting cliches 14 + missing subject 8
    assert result.score == 70
    assert result.checks["has_cliches"] is True
    assert any('"just checking in"' in line for line in result.feedback)


def test_very_short_outreach_is_heavily_penalized():
    result = OutreachValidator().validate("Hey, interested?", ValidationConfig())

    assert result.score == 32
    assert result.checks["length_ok"] is False
    assert result.checks["has_call_to_action"] is True


def test_general_answer_below_word_floor_is_capped():
    result = GeneralValidator().validate("Source on LinkedIn.", ValidationConfig())

    assert result.score == 5
    assert result.checks["length_ok"] is False
    assert result.checks["has_structure"] is False


def test_general_answer_with_depth_passes():
    result = GeneralValidator().validate(SOLID_ANSWER, ValidationConfig())

    assert result.score == 100
    assert result.feedback == [FILLER_FEEDBACK]


def test_general_must_mention_terms_are_required():
    config = ValidationConfig(must_mention=["diversity", "budget"])

    result = GeneralValidator().validate(SOLID_ANSWER, config)

    assert result.score == 70
    assert result.checks["mentions_required_terms"] is False
    assert "Address these required points: diversity, budget" in result.feedback


def test_strategy_blends_general_and_data_driven_checks():
    text = (
        "First we review 200 profiles per week and track reply rate through the funnel. "
        "Then we prioritise the top 20% for outreach and expect a 3x improvement in conversion "
        "within 6 weeks of launching the new sourcing plan across every region we hire in."
    )

    result = StrategyValidator().validate(text, ValidationConfig())

    assert result.category == "strategy"
    assert result.checks["includes_metrics"] is True
    assert result.checks["tracks_pipeline"] is True
    assert 0 <= result.score <= 100


def test_job_description_bias_terms_are_penalized():
    text = (
        "We need a rockstar engineer who is a culture fit. Responsibilities: build APIs. "
        "Requirements: 5 years Python. Benefits: remote work."
    )

    result = JobDescriptionValidator().validate(text, ValidationConfig())

    # severe 10 + moderate 7 + thin text 15, offset by the remote-work bonus 5
    assert result.score == 73
    assert result.checks["bias_free"] is False
    assert result.checks["no_culture_fit_bias"] is False
    assert any(line.startswith("SEVERE: culture fit bias") for line in result.feedback)


def test_platform_validator_detects_linkedin_context():
    text = (
        'Use LinkedIn Recruiter with "site reliability engineer" AND (Kubernetes OR Terraform) NOT intern, '
        "filtered by location, industry and years of experience. Review headline, skills and tenure, "
        "then message the top 30 profiles and track reply rate weekly."
    )

    result = PlatformSourcingValidator().validate(text, ValidationConfig())

    assert result.category == "linkedin"
    assert result.checks["uses_search_syntax"] is True
    assert 0 <= result.score <= 100
