"\"\"\"Reference-corpus scoring against high-scoring answers for the same game.\"\"\""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Sequence

import structlog

from ..errors import DatastoreUnavailable
from ..schemas import ReferenceAnswer
from ..stores import ReferenceCorpusStore
from .similarity import cosine_similarity


@dataclass
class CorpusConfig:
    """Thresholds and influence-weight policy for the reference corpus."""

    min_score: int = 80
    max_references: int = 10
    match_threshold: float = 0.70
    min_samples: int = 3
    base_weight: float = 0.10
    bonus_per_verified: float = 0.01
    max_verified_bonus: float = 0.05
    medium_corpus_size: int = 5
    medium_corpus_bonus: float = 0.01
    large_corpus_size: int = 10
    large_corpus_bonus: float = 0.02
    unverified_factor: float = 0.5
    max_weight: float = 0.20
    max_adjustment: int = 10


@dataclass(slots=True)
class CorpusScore:
    adjustment: int = 0
    weight: float = 0.0
    average_similarity: float = 0.0
    best_similarity: float = 0.0
    match_count: int = 0
    compared: int = 0
    verified_count: int = 0
    available: bool = False
    reference_texts: list[str] = field(default_factory=list)


class ReferenceCorpusScorer:
    """Bounded score adjustment from similarity to trusted reference answers."""

    def __init__(self, store: ReferenceCorpusStore, *, config: CorpusConfig | None = None) -> None:
        self._store = store
        self._config = config or CorpusConfig()
        self._logger = structlog.get_logger(__name__)

    async def score(self, game_id: str, embedding: Sequence[float]) -> CorpusScore:
        if not embedding:
            return CorpusScore()
        try:
            entries = await asyncio.to_thread(self._store.query_by_game, game_id)
        except DatastoreUnavailable as exc:
            self._logger.warning("corpus.store_unavailable", game_id=game_id, error=str(exc))
            return CorpusScore()
        except Exception as exc:  # noqa: BLE001
            self._logger.error("corpus.query_failed", game_id=game_id, error=str(exc))
            return CorpusScore()
        return self.score_entries(entries, embedding)

    def usable(self, entries: Sequence[ReferenceAnswer], dimensions: int | None = None) -> list[ReferenceAnswer]:
        return [
            entry
            for entry in entries
            if entry.score >= self._config.min_score
            and entry.embedding
            and (dimensions is None or len(entry.embedding) == dimensions)
        ]

    def score_entries(self, entries: Sequence[ReferenceAnswer], embedding: Sequence[float]) -> CorpusScore:
        cfg = self._config
        usable = self.usable(entries, len(embedding))
        weight = self.influence_weight(usable)
        verified = sum(1 for entry in usable if entry.is_trusted)
        if not usable:
            return CorpusScore(verified_count=verified)

        ranked = sorted(
            ((cosine_similarity(embedding, entry.embedding), entry) for entry in usable),
            key=lambda item: item[0],
            reverse=True,
        )[: cfg.max_references]
        similarities = [similarity for similarity, _ in ranked]
        average = sum(similarities) / len(similarities)
        adjustment = self.adjustment_for(average, weight)

        result = CorpusScore(
            adjustment=adjustment,
            weight=weight,
            average_similarity=round(average, 4),
            best_similarity=round(similarities[0], 4),
            match_count=sum(1 for value in similarities if value >= cfg.match_threshold),
            compared=len(ranked),
            verified_count=verified,
            available=weight > 0,
            reference_texts=[entry.submission_text for _, entry in ranked if entry.submission_text],
        )
        self._logger.debug(
            "corpus.scored",
            compared=result.compared,
            weight=weight,
            average_similarity=result.average_similarity,
            adjustment=adjustment,
        )
        return result

    def influence_weight(self, usable: Sequence[ReferenceAnswer]) -> float:
        """Weight in [0, max_weight]; zero below ``min_samples``, non-decreasing in corpus size."""

        cfg = self._config
        if len(usable) < cfg.min_samples:
            return 0.0
        verified = sum(1 for entry in usable if entry.is_trusted)
        unverified = len(usable) - verified
        effective = verified + cfg.unverified_factor * unverified

        weight = cfg.base_weight + min(cfg.max_verified_bonus, cfg.bonus_per_verified * verified)
        if effective >= cfg.large_corpus_size:
            weight += cfg.large_corpus_bonus
        elif effective >= cfg.medium_corpus_size:
            weight += cfg.medium_corpus_bonus
        return round(min(cfg.max_weight, weight), 4)

    def adjustment_for(self, average_similarity: float, weight: float) -> int:
        limit = self._config.max_adjustment
        raw = max(-10.0, min(10.0, (average_similarity - 0.5) * 20))
        adjustment = int(round(raw * weight * 10))
        return max(-limit, min(limit, adjustment))
