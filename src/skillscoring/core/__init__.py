"\"\"\"Core scoring engine components.\"\"\""

from __future__ import annotations

# NOTE: keep imports explicit for export clarity.
from .adjustments import AdjustedScore, AdjustmentConfig, AdjustmentPipeline
from .corpus import CorpusConfig, CorpusScore, ReferenceCorpusScorer
from .curator import CorpusCurator, CurationOutcome, CuratorConfig
from .ensemble import ConfidenceConfig, EnsembleArbitrator, EnsembleResult
from .integrity import (
    FLAG_DESCRIPTIONS,
    GamingAssessment,
    GamingConfig,
    GamingDetector,
    IntegrityAssessment,
    IntegrityConfig,
    IntegrityEvaluator,
    WritingContext,
)
from .review import ReviewConfig, ReviewDecision, ReviewRouter
from .similarity import SimilarityEngine, SimilarityResult, cosine_similarity
from .validators import SkillValidator, ValidationResult, ValidatorRegistry

__all__ = [
    "AdjustedScore",
    "AdjustmentConfig",
    "AdjustmentPipeline",
    "ConfidenceConfig",
    "CorpusConfig",
    "CorpusCurator",
    "CorpusScore",
    "CurationOutcome",
    "CuratorConfig",
    "EnsembleArbitrator",
    "EnsembleResult",
    "FLAG_DESCRIPTIONS",
    "GamingAssessment",
    "GamingConfig",
    "GamingDetector",
    "IntegrityAssessment",
    "IntegrityConfig",
    "IntegrityEvaluator",
    "ReferenceCorpusScorer",
    "ReviewConfig",
    "ReviewDecision",
    "ReviewRouter",
    "SimilarityEngine",
    "SimilarityResult",
    "SkillValidator",
    "ValidationResult",
    "ValidatorRegistry",
    "WritingContext",
    "cosine_similarity",
]
