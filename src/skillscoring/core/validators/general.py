"\"\"\"General-purpose and strategy answer validators.\"\"\""

from __future__ import annotations

import re
from dataclasses import dataclass

from ...schemas import ValidationConfig
from .base import ValidationResult, blend, find_phrases, finalize, sentence_count, word_count

_METRIC_PATTERNS = (
    re.compile(r"\d+\s*%"),
    re.compile(r"\d+\s*(candidates?|profiles?|people|hires?)", re.IGNORECASE),
    re.compile(r"\d+\s*(hours?|days?|weeks?|months?)", re.IGNORECASE),
    re.compile(r"\d+\s*to\s*\d+"),
    re.compile(r"\$\d+[Kk]?"),
    re.compile(r"\d+x\b", re.IGNORECASE),
    re.compile(r"\d+:\d+"),
)
_PIPELINE = re.compile(
    r"\b(funnel|pipeline|conversion|response rate|reply rate|pass[- ]through|time[- ]to[- ](fill|hire))\b",
    re.IGNORECASE,
)
_PRIORITISATION = re.compile(r"\b(first|then|priorit\w*|phase|step \d|week \d|day \d)\b", re.IGNORECASE)


@dataclass
class GeneralConfig:
    """Defaults for length and structure floors."""

    min_words: int = 25
    min_sentences: int = 2
    recommended_floor: int = 45
    recommended_penalty: int = 15
    sentence_penalty: int = 20
    must_mention_penalty: int = 15


class GeneralValidator:
    """Length, structure and must-mention checks for free-text answers."""

    categories = ("general", "screening", "negotiation", "talent-intelligence", "strategy")

    def __init__(self, *, config: GeneralConfig | None = None) -> None:
        self._config = config or GeneralConfig()

    def validate(self, text: str, config: ValidationConfig) -> ValidationResult:
        cfg = self._config
        stripped = text.strip()
        words = word_count(stripped)
        sentences = sentence_count(stripped)
        min_words = config.min_words if config.min_words is not None else cfg.min_words
        recommended = (
            config.recommended_min_words
            if config.recommended_min_words is not None
            else max(cfg.recommended_floor, (config.min_words or 0) + 5)
        )
        min_sentences = config.min_sentences if config.min_sentences is not None else cfg.min_sentences
        min_chars = config.min_chars or 0

        feedback: list[str] = []
        strengths: list[str] = []
        score = 100

        if min_chars > 0 and len(stripped) < min_chars:
            feedback.append(f"Too short; add more detail (at least {min_chars} characters).")
            score = min(score, 30)

        if words < min_words:
            feedback.append(f"Too short; aim for at least {min_words} words so the reasoning can be evaluated.")
            score = min(score, 25)
        elif words < recommended:
            feedback.append(f"Add more depth (aim for ~{recommended} words) to cover the key points.")
            score -= cfg.recommended_penalty
        else:
            strengths.append("Provides enough detail to evaluate reasoning")

        if sentences < min_sentences:
            feedback.append(f"Provide at least {min_sentences} sentences (set up the issue, then your recommendation).")
            score -= cfg.sentence_penalty
        else:
            strengths.append("Structured response with clear sentences")

        checks = {
            "length_ok": words >= min_words,
            "has_structure": sentences >= min_sentences,
            "meets_char_floor": min_chars == 0 or len(stripped) >= min_chars,
        }

        if config.must_mention:
            missing = [term for term in config.must_mention if not find_phrases(stripped, [term])]
            checks["mentions_required_terms"] = not missing
            if missing:
                feedback.append(f"Address these required points: {', '.join(missing)}")
                score -= cfg.must_mention_penalty * len(missing)
            else:
                strengths.append("Covers every required point")

        return finalize(score, checks=checks, feedback=feedback, strengths=strengths, category="general")


def validate_data_driven(text: str) -> ValidationResult:
    """Quantitative-thinking checks shared by strategy-style categories."""

    feedback: list[str] = []
    strengths: list[str] = []
    score = 100

    has_metrics = any(pattern.search(text) for pattern in _METRIC_PATTERNS)
    has_pipeline = _PIPELINE.search(text) is not None
    has_plan = _PRIORITISATION.search(text) is not None

    if has_metrics:
        strengths.append("Includes quantitative metrics")
        score += 5
    else:
        feedback.append("Include numbers: conversion rates, time estimates, candidate volumes or success metrics.")
        score -= 25
    if has_pipeline:
        strengths.append("Reasons about funnel or pipeline performance")
    else:
        feedback.append("Explain how you would measure the pipeline (response rate, conversion, time-to-fill).")
        score -= 10
    if has_plan:
        strengths.append("Sequences the work into concrete steps")
    else:
        feedback.append("Lay out the plan as ordered steps or phases.")
        score -= 10

    return finalize(
        score,
        checks={"includes_metrics": has_metrics, "tracks_pipeline": has_pipeline, "has_actionable_plan": has_plan},
        feedback=feedback,
        strengths=strengths,
        category="data-driven",
    )


class StrategyValidator:
    """General checks blended with data-driven sourcing signals."""

    categories = ("ats", "diversity", "persona")

    def __init__(
        self,
        *,
        general: GeneralValidator | None = None,
        general_weight: float = 0.6,
    ) -> None:
        self._general = general or GeneralValidator()
        self._general_weight = general_weight

    def validate(self, text: str, config: ValidationConfig) -> ValidationResult:
        base = self._general.validate(text, config)
        data_driven = validate_data_driven(text)
        return blend(
            [(base, self._general_weight), (data_driven, 1.0 - self._general_weight)],
            category="strategy",
        )
