from __future__ import annotations

import pytest

from skillscoring.core.validators import (
    BooleanSearchValidator,
    GeneralValidator,
    OutreachValidator,
    ValidatorRegistry,
    default_validators,
)
from skillscoring.schemas import ValidationConfig


class ExplodingValidator:
    categories = ("general", "explode")

    def validate(self, text: str, config: ValidationConfig):
        raise RuntimeError("validator blew up")


def build_registry() -> ValidatorRegistry:
    return ValidatorRegistry(default_validators())


def test_registry_resolves_categories_case_insensitively():
    registry = build_registry()

    assert isinstance(registry.get("BOOLEAN"), BooleanSearchValidator)
    assert isinstance(registry.get("xray"), BooleanSearchValidator)
    assert isinstance(registry.get("outreach"), OutreachValidator)
    assert "job-description" in registry.categories()


def test_unknown_category_falls_back_to_default():
    registry = build_registry()

    assert isinstance(registry.get("underwater-basket-weaving"), GeneralValidator)
    assert isinstance(registry.get(None), GeneralValidator)


def test_registry_requires_default_category():
    with pytest.raises(KeyError):
        ValidatorRegistry([OutreachValidator()])


def test_validator_failure_degrades_to_zero_score():
    registry = ValidatorRegistry([ExplodingValidator()])

    result = registry.validate("explode", "anything")

    assert result.score == 0
    assert result.feedback
    assert result.category == "explode"


@pytest.mark.parametrize(
    "category",
    ["general", "boolean", "xray", "outreach", "linkedin", "multiplatform", "job-description", "ats", "persona"],
)
@pytest.mark.parametrize(
    "text",
    ["", "   ", "AND OR NOT", "(((", "Subject:", "a" * 10_000, "日本語のテキストだけ", "Hi [name], ..."],
)
def test_validators_never_raise_and_always_explain(category: str, text: str):
    result = build_registry().validate(category, text, ValidationConfig(keywords=["python"], location="Berlin"))

    assert 0 <= result.score <= 100
    assert result.feedback
