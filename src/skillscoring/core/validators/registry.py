"\"\"\"Registry mapping skill categories to validator strategies.\"\"\""

from __future__ import annotations

from typing import Iterable

import structlog

from ...schemas import ValidationConfig
from .base import SkillValidator, ValidationResult


class ValidatorRegistry:
    """Resolve a validator per category, falling back to the default strategy."""

    def __init__(self, validators: Iterable[SkillValidator], *, default_category: str = "general"):
        self._validators: dict[str, SkillValidator] = {}
        for validator in validators:
            for category in validator.categories:
                self._validators[category.lower()] = validator
        if default_category not in self._validators:
            raise KeyError(f"No validator registered for default category {default_category!r}")
        self._default_category = default_category
        self._logger = structlog.get_logger(__name__)

    def get(self, category: str | None) -> SkillValidator:
        key = (category or "").lower()
        return self._validators.get(key, self._validators[self._default_category])

    def categories(self) -> list[str]:
        return sorted(self._validators)

    def validate(self, category: str | None, text: str, config: ValidationConfig | None = None) -> ValidationResult:
        validator = self.get(category)
        try:
            return validator.validate(text, config or ValidationConfig())
        except Exception as exc:  # noqa: BLE001
            self._logger.error(
                "validator.failed",
                category=category,
                validator=type(validator).__name__,
                error=str(exc),
            )
            return ValidationResult(
                score=0,
                checks={},
                feedback=["Automated checks could not run on this submission; scoring relies on other signals."],
                strengths=[],
                category=category or self._default_category,
            )
