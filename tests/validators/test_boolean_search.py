from __future__ import annotations

from typing import Any

from skillscoring.core.validators import FILLER_FEEDBACK, BooleanSearchValidator
from skillscoring.schemas import ValidationConfig


def build_config(**kwargs: Any) -> ValidationConfig:
    return ValidationConfig(**kwargs)


def test_well_grouped_search_keeps_full_score():
    validator = BooleanSearchValidator()

    result = validator.validate('(React OR Vue) AND (senior OR lead) AND "frontend engineer role"', build_config())

    assert result.score == 100
    assert result.feedback == [FILLER_FEEDBACK]
    assert result.checks["has_parentheses"] is True
    assert "Uses parentheses for clear grouping" in result.strengths


def test_missing_operators_and_proximity_are_deducted():
    result = BooleanSearchValidator().validate("React Vue senior", build_config())

    assert result.score == 75
    assert result.checks["has_and"] is False
    assert any("lacks boolean operators" in line for line in result.feedback)


def test_implicit_and_is_accepted_when_allowed():
    result = BooleanSearchValidator().validate("React Vue senior", build_config(allow_implicit_and=True))

    assert result.score == 95
    assert "Uses implicit AND (multiple search terms)" in result.strengths


def test_mixed_operators_without_parentheses_lose_precedence_points():
    result = BooleanSearchValidator().validate("React OR Vue AND senior", build_config())

    assert result.score == 80
    assert any("parentheses" in line for line in result.feedback)


def test_overly_complex_search_is_flagged():
    text = " OR ".join(f"skill{i}" for i in range(14))

    result = BooleanSearchValidator().validate(text, build_config())

    assert result.checks["is_overly_complex"] is True
    assert result.score == 85


def test_keyword_synonyms_count_unless_strict():
    text = '(k8s OR docker) AND "platform engineer role"'
    validator = BooleanSearchValidator()

    flexible = validator.validate(text, build_config(keywords=["kubernetes"]))
    strict = validator.validate(text, build_config(keywords=["kubernetes"], strict_keyword_match=True))

    assert flexible.score == 100
    assert flexible.checks["has_keywords"] is True
    assert strict.score == 90
    assert "Missing required keywords: kubernetes" in strict.feedback


def test_custom_synonyms_extend_defaults():
    text = '(Rust OR C++) AND "embedded firmware role"'

    result = BooleanSearchValidator().validate(
        text,
        build_config(keywords=["systems"], synonym_map={"systems": ["rust"]}),
    )

    assert result.checks["has_keywords"] is True


def test_location_matching_uses_local_names():
    text = '(React OR Vue) AND "frontend engineer role"'
    validator = BooleanSearchValidator()

    found = validator.validate(f"{text} AND Wien", build_config(location="Vienna"))
    missing_required = validator.validate(text, build_config(location="Berlin", location_required=True))
    missing_optional = validator.validate(text, build_config(location="Berlin"))

    assert found.checks["has_location"] is True
    assert found.score == 100
    assert missing_required.score == 90
    assert missing_optional.score == 95
