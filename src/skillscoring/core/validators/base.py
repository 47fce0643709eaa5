"\"\"\"Shared types and helpers for rule-based validators.\"\"\""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Protocol, Sequence, runtime_checkable

from ...schemas import ValidationConfig

FILLER_FEEDBACK = "Automated checks passed; AI will handle nuanced scoring."

_SENTENCE_END = re.compile(r"[.!?]")


@dataclass(slots=True)
class ValidationResult:
    """Deterministic validator output; feedback is never empty."""

    score: int
    checks: dict[str, bool] = field(default_factory=dict)
    feedback: list[str] = field(default_factory=list)
    strengths: list[str] = field(default_factory=list)
    category: str = "general"

    def issues(self) -> list[str]:
        return [line for line in self.feedback if line != FILLER_FEEDBACK]


@runtime_checkable
class SkillValidator(Protocol):
    """Validator contract; one strategy per skill category family."""

    categories: tuple[str, ...]

    def validate(self, text: str, config: ValidationConfig) -> ValidationResult:
        """Return a validation result for the submission text."""


def word_count(text: str) -> int:
    stripped = text.strip()
    return len(stripped.split()) if stripped else 0


def sentence_count(text: str) -> int:
    return len(_SENTENCE_END.findall(text))


def clamp_score(value: float) -> int:
    return max(0, min(100, int(round(value))))


def finalize(
    score: float,
    *,
    checks: dict[str, bool],
    feedback: list[str],
    strengths: list[str],
    category: str,
) -> ValidationResult:
    if not feedback:
        feedback.append(FILLER_FEEDBACK)
    return ValidationResult(
        score=clamp_score(score),
        checks=checks,
        feedback=feedback,
        strengths=strengths,
        category=category,
    )


def blend(
    parts: Sequence[tuple[ValidationResult, float]],
    *,
    category: str,
) -> ValidationResult:
    """Weighted blend of several results, merging checks and messages."""

    total_weight = sum(weight for _, weight in parts) or 1.0
    score = sum(result.score * weight for result, weight in parts) / total_weight
    checks: dict[str, bool] = {}
    feedback: list[str] = []
    strengths: list[str] = []
    for result, _ in parts:
        checks.update(result.checks)
        feedback.extend(result.issues())
        strengths.extend(result.strengths)
    return finalize(score, checks=checks, feedback=feedback, strengths=strengths, category=category)


def phrase_pattern(phrase: str) -> re.Pattern[str]:
    return re.compile(rf"(?<!\w){re.escape(phrase)}(?!\w)", re.IGNORECASE)


def find_phrases(text: str, phrases: Sequence[str]) -> list[str]:
    return [phrase for phrase in phrases if phrase_pattern(phrase).search(text)]
