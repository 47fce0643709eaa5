"\"\"\"Ordered post-ensemble score adjustments.\"\"\""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..schemas import MAX_HINTS, ScoreBreakdown
from .integrity import IntegrityAssessment

HINT_PENALTY_POINTS = 3


@dataclass
class AdjustmentConfig:
    exact_copy_cap: int = 50
    high_risk_multiplier: float = 0.85
    hint_penalty_points: int = HINT_PENALTY_POINTS
    max_hints: int = MAX_HINTS


@dataclass(slots=True)
class AdjustedScore:
    final_score: int
    breakdown: ScoreBreakdown
    hint_penalty: int
    hints_used: int


class AdjustmentPipeline:
    """Integrity cap, corpus delta, then hint penalty, always in that order."""

    def __init__(self, *, config: AdjustmentConfig | None = None) -> None:
        self._config = config or AdjustmentConfig()

    def normalize_hints(self, hints_used: float | int | None) -> int:
        if hints_used is None:
            return 0
        return max(0, min(self._config.max_hints, math.floor(hints_used)))

    def hint_penalty(self, hints_used: float | int | None) -> int:
        return self.normalize_hints(hints_used) * self._config.hint_penalty_points

    def apply(
        self,
        *,
        ensemble_score: int,
        integrity: IntegrityAssessment,
        corpus_adjustment: int,
        hints_used: float | int | None,
    ) -> AdjustedScore:
        cfg = self._config
        score = _clamp(ensemble_score)

        if integrity.is_exact_copy:
            after_integrity = min(score, cfg.exact_copy_cap)
        elif integrity.risk == "high":
            after_integrity = _clamp(score * cfg.high_risk_multiplier)
        else:
            after_integrity = score
        integrity_penalty = score - after_integrity

        delta = corpus_adjustment
        if integrity.is_exact_copy and delta > 0:
            delta = 0
        after_corpus = _clamp(after_integrity + delta)
        applied_delta = after_corpus - after_integrity

        hints = self.normalize_hints(hints_used)
        penalty = hints * cfg.hint_penalty_points
        final_score = max(0, after_corpus - penalty)

        return AdjustedScore(
            final_score=final_score,
            breakdown=ScoreBreakdown(
                ensemble_score=score,
                integrity_penalty=integrity_penalty,
                corpus_adjustment=applied_delta,
                hint_penalty=penalty,
                final_score=final_score,
            ),
            hint_penalty=penalty,
            hints_used=hints,
        )


def _clamp(value: float) -> int:
    return max(0, min(100, int(round(value))))
