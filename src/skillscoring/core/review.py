"\"\"\"Human review routing.\"\"\""

from __future__ import annotations

from dataclasses import dataclass, field

import pendulum

from ..schemas import ReviewQueueItem
from .integrity import IntegrityAssessment


@dataclass
class ReviewConfig:
    min_confidence: int = 60
    integrity_risks: tuple[str, ...] = ("medium", "high")
    gaming_risks: tuple[str, ...] = ("high", "critical")
    gaming_actions: tuple[str, ...] = ("flag_review", "reject")
    trigger_flags: tuple[str, ...] = ("exact_copy", "near_identical_example", "unfilled_placeholders")


@dataclass(slots=True)
class ReviewDecision:
    should_review: bool
    reasons: list[str] = field(default_factory=list)


class ReviewRouter:
    """Pure decision over confidence and integrity signals."""

    def __init__(self, *, config: ReviewConfig | None = None) -> None:
        self._config = config or ReviewConfig()

    def route(self, *, confidence: int, integrity: IntegrityAssessment) -> ReviewDecision:
        cfg = self._config
        reasons: list[str] = []
        if confidence < cfg.min_confidence:
            reasons.append(f"Low confidence ({confidence}%)")
        if integrity.risk in cfg.integrity_risks:
            reasons.append(f"Integrity risk: {integrity.risk}")
        if integrity.gaming.risk in cfg.gaming_risks:
            reasons.append(f"Gaming risk: {integrity.gaming.risk}")
        if integrity.gaming.recommended_action in cfg.gaming_actions:
            reasons.append(f"Recommended action: {integrity.gaming.recommended_action}")
        flagged = [flag for flag in integrity.flags if flag in cfg.trigger_flags]
        if flagged:
            reasons.append(f"Flags: {', '.join(flagged)}")
        return ReviewDecision(should_review=bool(reasons), reasons=reasons)

    def build_item(
        self,
        decision: ReviewDecision,
        *,
        attempt_id: str,
        player_id: str,
        game_id: str,
        score: int,
        confidence: int,
        integrity: IntegrityAssessment,
    ) -> ReviewQueueItem:
        if not decision.should_review or not decision.reasons:
            raise ValueError("Review items require at least one reason")
        return ReviewQueueItem(
            attempt_id=attempt_id,
            player_id=player_id,
            game_id=game_id,
            score=score,
            confidence=confidence,
            reasons=list(decision.reasons),
            integrity_risk=integrity.risk,
            gaming_risk=integrity.gaming.risk,
            flags=list(integrity.flags),
            created_at=pendulum.now("UTC").to_iso8601_string(),
        )
