"\"\"\"Ensemble arbitration over the available scoring signals.\"\"\""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Literal, Sequence

ConfidenceLevel = Literal["high", "medium", "low"]


@dataclass
class ConfidenceConfig:
    """Closed-form confidence policy; monotone non-increasing in signal variance."""

    std_penalty: float = 2.0
    missing_ai_penalty: float = 30.0
    missing_embedding_penalty: float = 10.0
    high_threshold: int = 75
    medium_threshold: int = 50
    range_factor: float = 1.5
    low_confidence: int = 60
    very_low_confidence: int = 40
    low_ai_multiplier: float = 0.8
    very_low_ai_multiplier: float = 0.6
    min_ai_weight: float = 0.2


@dataclass(slots=True)
class EnsembleResult:
    final_score: int
    confidence: int
    confidence_level: ConfidenceLevel
    weights: dict[str, float]
    components: dict[str, int]
    std_dev: float
    score_range: tuple[int, int]
    notes: list[str] = field(default_factory=list)

    @property
    def used_ai(self) -> bool:
        return "ai" in self.components


class EnsembleArbitrator:
    """Weights present signals, renormalising over what actually arrived."""

    DEFAULT_WEIGHTS: dict[str, float] = {
        "ai": 0.55,
        "validation": 0.30,
        "embedding": 0.15,
    }

    def __init__(
        self,
        *,
        weights: dict[str, float] | None = None,
        config: ConfidenceConfig | None = None,
    ) -> None:
        self._weights = weights or self.DEFAULT_WEIGHTS.copy()
        self._config = config or ConfidenceConfig()

    def arbitrate(
        self,
        *,
        validation_score: int,
        ai_score: int | None,
        embedding_similarity: float | None,
        embedding_expected: bool,
    ) -> EnsembleResult:
        components: dict[str, int] = {"validation": _clamp(validation_score)}
        notes: list[str] = []
        if ai_score is not None:
            components["ai"] = _clamp(ai_score)
        else:
            notes.append("generative signal unavailable")
        if embedding_expected and embedding_similarity is not None:
            components["embedding"] = _clamp(embedding_similarity * 100)
        elif embedding_expected:
            notes.append("embedding signal unavailable")

        std_dev = population_std(list(components.values()))
        confidence = self.confidence_for(
            std_dev,
            ai_present="ai" in components,
            embedding_missing=embedding_expected and "embedding" not in components,
        )
        ai_weight = self.ai_weight_for(confidence) if "ai" in components else None
        if ai_weight is not None and ai_weight < self._weights.get("ai", 0.0):
            notes.append(f"ai weight reduced to {ai_weight:.2f} (confidence {confidence}%)")

        weights = self.normalized_weights(components, ai_weight=ai_weight)
        final_score = _clamp(sum(weights[name] * score for name, score in components.items()))
        spread = int(round(self._config.range_factor * std_dev))
        return EnsembleResult(
            final_score=final_score,
            confidence=confidence,
            confidence_level=self.level_for(confidence),
            weights=weights,
            components=components,
            std_dev=round(std_dev, 3),
            score_range=(max(0, final_score - spread), min(100, final_score + spread)),
            notes=notes,
        )

    def normalized_weights(self, components: dict[str, int], *, ai_weight: float | None = None) -> dict[str, float]:
        raw = {name: self._weights.get(name, 0.0) for name in components}
        if ai_weight is not None and "ai" in raw:
            raw["ai"] = ai_weight
        total = sum(raw.values())
        if total <= 0:
            return {name: 1.0 / len(components) for name in components}
        return {name: value / total for name, value in raw.items()}

    def ai_weight_for(self, confidence: int) -> float:
        """Raw generative weight after low-agreement reduction; never raised, floored at ``min_ai_weight``."""

        cfg = self._config
        base = self._weights.get("ai", 0.0)
        if confidence < cfg.very_low_confidence:
            reduced = base * cfg.very_low_ai_multiplier
        elif confidence < cfg.low_confidence:
            reduced = base * cfg.low_ai_multiplier
        else:
            return base
        return min(base, max(cfg.min_ai_weight, reduced))

    def confidence_for(self, std_dev: float, *, ai_present: bool, embedding_missing: bool) -> int:
        cfg = self._config
        value = 100.0 - cfg.std_penalty * std_dev
        if not ai_present:
            value -= cfg.missing_ai_penalty
        if embedding_missing:
            value -= cfg.missing_embedding_penalty
        return _clamp(value)

    def level_for(self, confidence: int) -> ConfidenceLevel:
        if confidence >= self._config.high_threshold:
            return "high"
        if confidence >= self._config.medium_threshold:
            return "medium"
        return "low"


def population_std(values: Sequence[float]) -> float:
    if len(values) < 2:
        return 0.0
    mean = sum(values) / len(values)
    return math.sqrt(sum((value - mean) ** 2 for value in values) / len(values))


def _clamp(value: float) -> int:
    return max(0, min(100, int(round(value))))
