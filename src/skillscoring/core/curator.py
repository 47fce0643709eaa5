"\"\"\"Feeds high-scoring attempts back into the reference corpus.\"\"\""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Sequence

import pendulum
import structlog

from ..errors import DatastoreUnavailable
from ..schemas import ReferenceAnswer
from ..stores import ReferenceCorpusStore
from .similarity import cosine_similarity


@dataclass
class CuratorConfig:
    min_score: int = 80
    duplicate_similarity: float = 0.95


@dataclass(slots=True)
class CurationOutcome:
    added: bool
    reason: str
    reference_id: str | None = None


class CorpusCurator:
    """Appends unverified player references, skipping near-duplicates."""

    def __init__(self, store: ReferenceCorpusStore, *, config: CuratorConfig | None = None) -> None:
        self._store = store
        self._config = config or CuratorConfig()
        self._logger = structlog.get_logger(__name__)

    def curate(
        self,
        *,
        game_id: str,
        text: str,
        embedding: Sequence[float],
        final_score: int,
        is_exact_copy: bool = False,
    ) -> CurationOutcome:
        cfg = self._config
        if final_score < cfg.min_score:
            return CurationOutcome(False, "below_threshold")
        if not embedding:
            return CurationOutcome(False, "missing_embedding")
        if is_exact_copy:
            return CurationOutcome(False, "exact_copy")

        try:
            existing = self._store.query_by_game(game_id)
            duplicate = any(
                cosine_similarity(embedding, entry.embedding) > cfg.duplicate_similarity
                for entry in existing
                if entry.embedding
            )
            if duplicate:
                return CurationOutcome(False, "near_duplicate")
            entry = ReferenceAnswer(
                id=uuid.uuid4().hex,
                game_id=game_id,
                embedding=list(embedding),
                score=final_score,
                source_type="player",
                verified=False,
                created_at=pendulum.now("UTC").to_iso8601_string(),
                submission_text=text,
            )
            self._store.append(entry)
        except DatastoreUnavailable as exc:
            self._logger.warning("curator.store_unavailable", game_id=game_id, error=str(exc))
            return CurationOutcome(False, "store_unavailable")

        self._logger.info("curator.reference_added", game_id=game_id, reference_id=entry.id, score=final_score)
        return CurationOutcome(True, "added", entry.id)
