from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

SourceType = Literal["seed", "curated", "player"]
RiskLevel = Literal["low", "medium", "high"]
ConfidenceLevel = Literal["high", "medium", "low"]


def _round_score(value: Any) -> Any:
    if isinstance(value, float):
        return int(round(value))
    return value


class DimensionScores(BaseModel):
    """Per-dimension model scores (0-100)."""

    technical_accuracy: float = Field(alias="technicalAccuracy", ge=0, le=100)
    creativity: float = Field(ge=0, le=100)
    completeness: float = Field(ge=0, le=100)
    clarity: float = Field(ge=0, le=100)
    best_practices: float = Field(alias="bestPractices", ge=0, le=100)

    model_config = ConfigDict(populate_by_name=True)


class RubricPoints(BaseModel):
    points: float = Field(ge=0)
    max_points: float = Field(alias="maxPoints", gt=0)
    reasoning: str = ""

    model_config = ConfigDict(populate_by_name=True)


class ModelScoreResult(BaseModel):
    """Strictly validated generative scorer output."""

    score: Annotated[int, BeforeValidator(_round_score)] = Field(ge=0, le=100)
    dimension_scores: DimensionScores = Field(alias="dimensions")
    skills_radar: dict[str, float] = Field(default_factory=dict, alias="skillsRadar")
    rubric_breakdown: dict[str, RubricPoints] = Field(alias="rubricBreakdown")
    strengths: list[str] = Field(min_length=1, max_length=5)
    improvements: list[str] = Field(min_length=1, max_length=5)
    narrative: str = Field(alias="feedback", min_length=1)
    model: str | None = None
    cross_check_model: str | None = None
    cross_check_score: int | None = None
    consistency_flags: list[str] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


class ReferenceAnswer(BaseModel):
    """Scored reference entry stored per game."""

    id: str
    game_id: str
    embedding: list[float] = Field(default_factory=list)
    score: int = Field(ge=0, le=100)
    source_type: SourceType = "player"
    verified: bool = False
    created_at: str | None = None
    submission_text: str | None = None
    usage_count: int = Field(default=0, ge=0)

    model_config = ConfigDict(extra="forbid")

    @property
    def is_trusted(self) -> bool:
        return self.verified or self.source_type in ("seed", "curated")

    def to_row(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "game_id": self.game_id,
            "embedding_vector": list(self.embedding),
            "score": self.score,
            "source_type": self.source_type,
            "verified": self.verified,
            "created_at": self.created_at,
            "submission_text": self.submission_text,
            "usage_count": self.usage_count,
        }

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "ReferenceAnswer":
        payload = dict(row)
        if "embedding_vector" in payload:
            payload["embedding"] = payload.pop("embedding_vector") or []
        return cls.model_validate(payload)


class ScoreBreakdown(BaseModel):
    """Contribution of each adjustment stage."""

    ensemble_score: int
    integrity_penalty: int = 0
    corpus_adjustment: int = 0
    hint_penalty: int = 0
    final_score: int


class RubricLine(BaseModel):
    criterion: str
    points: float
    max_points: float
    reasoning: str = ""


class FeedbackReport(BaseModel):
    """Structured feedback before rendering."""

    summary: str
    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)
    rubric: list[RubricLine] = Field(default_factory=list)
    integrity_notices: list[str] = Field(default_factory=list)
    hint_notice: str | None = None
    validation_only_notice: str | None = None
    next_steps: list[str] = Field(default_factory=list)
    peer_terms: list[str] = Field(default_factory=list)
    suggested_terms: list[str] = Field(default_factory=list)


class FeedbackPayload(BaseModel):
    structured: FeedbackReport
    rendered: str


class EnsembleBreakdown(BaseModel):
    ai: int | None = None
    validation: int
    embedding: int | None = None
    corpus_adjustment: int = 0
    confidence: int
    confidence_level: ConfidenceLevel
    weights: dict[str, float] = Field(default_factory=dict)
    score_range: tuple[int, int] = (0, 100)
    notes: list[str] = Field(default_factory=list)


class ScoringResponse(BaseModel):
    """Response returned to the transport layer."""

    attempt_id: str
    game_id: str
    player_id: str
    final_score: int = Field(ge=0, le=100)
    feedback: FeedbackPayload
    ensemble_breakdown: EnsembleBreakdown
    breakdown: ScoreBreakdown
    integrity_risk: RiskLevel
    integrity_flags: list[str] = Field(default_factory=list)
    gaming_risk: str = "none"
    gaming_penalty: int = 0
    hints_used: int = 0
    hint_penalty: int = 0
    used_ai_scoring: bool
    model: str | None = None
    review_queued: bool = False
    review_reasons: list[str] = Field(default_factory=list)


class AttemptRecord(BaseModel):
    """Persisted attempt; at most one per (player_id, game_id)."""

    attempt_id: str
    player_id: str
    game_id: str
    team_id: str | None = None
    submission_text: str
    score: int = Field(ge=0, le=100)
    feedback: str
    created_at: str

    model_config = ConfigDict(extra="forbid", frozen=True)


class ReviewQueueItem(BaseModel):
    """Attempt escalated for human review."""

    attempt_id: str
    player_id: str
    game_id: str
    score: int
    confidence: int
    reasons: list[str] = Field(min_length=1)
    integrity_risk: RiskLevel = "low"
    gaming_risk: str = "none"
    flags: list[str] = Field(default_factory=list)
    status: Literal["pending", "approved", "adjusted", "dismissed"] = "pending"
    created_at: str

    model_config = ConfigDict(extra="forbid")
