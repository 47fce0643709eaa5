"\"\"\"Pydantic schema definitions for submissions, games and scoring output.\"\"\""

from __future__ import annotations

from .scoring import (
    AttemptRecord,
    DimensionScores,
    EnsembleBreakdown,
    FeedbackPayload,
    FeedbackReport,
    ModelScoreResult,
    ReferenceAnswer,
    ReviewQueueItem,
    RubricLine,
    RubricPoints,
    ScoreBreakdown,
    ScoringResponse,
)
from .submission import (
    DEFAULT_RUBRICS,
    MAX_HINTS,
    MAX_SUBMISSION_CHARS,
    GameDefinition,
    RubricCriterion,
    ScoringRequest,
    SeedReference,
    Submission,
    ValidationConfig,
)

__all__ = [
    "AttemptRecord",
    "DEFAULT_RUBRICS",
    "DimensionScores",
    "EnsembleBreakdown",
    "FeedbackPayload",
    "FeedbackReport",
    "GameDefinition",
    "MAX_HINTS",
    "MAX_SUBMISSION_CHARS",
    "ModelScoreResult",
    "ReferenceAnswer",
    "ReviewQueueItem",
    "RubricCriterion",
    "RubricLine",
    "RubricPoints",
    "ScoreBreakdown",
    "ScoringRequest",
    "ScoringResponse",
    "SeedReference",
    "Submission",
    "ValidationConfig",
]
