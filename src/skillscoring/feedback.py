"\"\"\"Feedback composition and plain-text rendering.\"\"\""

from __future__ import annotations

import math
import re
from collections import Counter
from dataclasses import dataclass
from typing import Sequence

from .core.adjustments import AdjustedScore
from .core.corpus import CorpusScore
from .core.ensemble import EnsembleResult
from .core.integrity import IntegrityAssessment
from .core.validators import ValidationResult
from .schemas import FeedbackPayload, FeedbackReport, ModelScoreResult, RubricLine

VALIDATION_ONLY_NOTICE = (
    "AI scoring was unavailable, so this score is based on automated checks only."
)

PEER_STOPWORDS = frozenset(
    "and or not the a an to for of in on with by at from is are was were be been being as that this "
    "these those it your you we our their they them us i me my mine yours "
    "site intitle inurl filetype linkedin github stackoverflow".split()
)
_NON_ALNUM = re.compile(r"[^a-z0-9]+")


@dataclass
class FeedbackConfig:
    max_items: int = 5
    min_references: int = 3
    term_share: float = 0.5
    min_term_count: int = 2
    max_common_terms: int = 8
    max_shown_terms: int = 6


class FeedbackComposer:
    """Builds the structured report shown to players, then renders it."""

    def __init__(self, *, config: FeedbackConfig | None = None) -> None:
        self._config = config or FeedbackConfig()

    def compose(
        self,
        *,
        validation: ValidationResult,
        model_result: ModelScoreResult | None,
        ensemble: EnsembleResult,
        integrity: IntegrityAssessment,
        adjusted: AdjustedScore,
        corpus: CorpusScore | None = None,
        submission_text: str = "",
    ) -> FeedbackReport:
        limit = self._config.max_items
        if model_result is not None:
            summary = model_result.narrative
            strengths = list(model_result.strengths)
            improvements = list(model_result.improvements)
            rubric = [
                RubricLine(
                    criterion=name,
                    points=points.points,
                    max_points=points.max_points,
                    reasoning=points.reasoning,
                )
                for name, points in model_result.rubric_breakdown.items()
            ]
        else:
            summary = f"Scored {adjusted.final_score}/100 from automated checks."
            strengths = list(validation.strengths)
            improvements = validation.issues()
            rubric = []

        notices = integrity.describe() if integrity.flags else []
        hint_notice = None
        if adjusted.hints_used:
            hint_notice = (
                f"{adjusted.hints_used} hint(s) used: -{adjusted.hint_penalty} points."
            )

        validation_only_notice = None
        next_steps: list[str] = []
        if not ensemble.used_ai:
            validation_only_notice = VALIDATION_ONLY_NOTICE
            next_steps = improvements[:3] or ["Expand your answer with concrete, task-specific detail."]

        peer_terms, suggested_terms = self.peer_insights(
            corpus.reference_texts if corpus is not None else [], submission_text
        )

        return FeedbackReport(
            summary=summary,
            strengths=strengths[:limit],
            improvements=improvements[:limit],
            rubric=rubric,
            integrity_notices=notices,
            hint_notice=hint_notice,
            validation_only_notice=validation_only_notice,
            next_steps=next_steps,
            peer_terms=peer_terms,
            suggested_terms=suggested_terms,
        )

    def render(self, report: FeedbackReport) -> str:
        lines = [report.summary]
        if report.validation_only_notice:
            lines.extend(["", report.validation_only_notice])
        if report.strengths:
            lines.extend(["", "Strengths:"])
            lines.extend(f"- {item}" for item in report.strengths)
        if report.improvements:
            lines.extend(["", "Improvements:"])
            lines.extend(f"- {item}" for item in report.improvements)
        if report.rubric:
            lines.extend(["", "Rubric:"])
            lines.extend(
                f"- {line.criterion}: {line.points:g}/{line.max_points:g}"
                + (f" ({line.reasoning})" if line.reasoning else "")
                for line in report.rubric
            )
        if report.integrity_notices:
            lines.extend(["", "Integrity:"])
            lines.extend(f"- {notice}" for notice in report.integrity_notices)
        if report.hint_notice:
            lines.extend(["", report.hint_notice])
        if report.next_steps:
            lines.extend(["", "Next steps:"])
            lines.extend(f"- {step}" for step in report.next_steps)
        if report.suggested_terms:
            lines.extend(["", "Top scorer patterns:"])
            lines.append(f"- High performers often include: {', '.join(report.peer_terms)}")
            lines.append(f"- Consider adding: {', '.join(report.suggested_terms)}")
        return "\n".join(lines)

    def payload(self, report: FeedbackReport) -> FeedbackPayload:
        return FeedbackPayload(structured=report, rendered=self.render(report))

    def peer_insights(self, references: Sequence[str], submission_text: str) -> tuple[list[str], list[str]]:
        """Terms shared by most high-scoring references, and those the submission lacks.

        Only vocabulary is reported; reference texts themselves never reach the player.
        """

        cfg = self._config
        if len(references) < cfg.min_references:
            return [], []
        counts: Counter[str] = Counter()
        for text in references:
            counts.update(list(dict.fromkeys(_terms(text))))
        threshold = max(cfg.min_term_count, math.ceil(len(references) * cfg.term_share))
        common = [term for term, count in counts.most_common() if count >= threshold][: cfg.max_common_terms]
        if not common:
            return [], []
        present = set(_terms(submission_text))
        missing = [term for term in common if term not in present]
        return common[: cfg.max_shown_terms], missing[: cfg.max_shown_terms]


def _terms(text: str) -> list[str]:
    tokens = _NON_ALNUM.sub(" ", text.lower()).split()
    return [token for token in tokens if len(token) >= 3 and token not in PEER_STOPWORDS and not token.isdigit()]
