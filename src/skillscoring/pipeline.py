"\"\"\"Submission scoring pipeline assembly and execution.\"\"\""

from __future__ import annotations

import asyncio
import json
import time
import uuid
from pathlib import Path
from typing import Any

import pendulum
import structlog
from pydantic import ValidationError

from . import __version__
from .core.adjustments import AdjustmentPipeline
from .core.corpus import ReferenceCorpusScorer
from .core.curator import CorpusCurator
from .core.ensemble import EnsembleArbitrator
from .core.integrity import IntegrityEvaluator
from .core.review import ReviewRouter
from .core.similarity import SimilarityEngine
from .core.validators import ValidatorRegistry
from .errors import DuplicateSubmission, GameNotFound, InvalidInput
from .events import BackgroundPublisher
from .feedback import FeedbackComposer
from .llm import GenerativeScorer
from .schemas import (
    AttemptRecord,
    EnsembleBreakdown,
    ReviewQueueItem,
    ScoringRequest,
    ScoringResponse,
    Submission,
)
from .stores import AnalyticsSink, AttemptStore, GameRegistry, NullAnalyticsSink, ReviewQueueStore


class SubmissionPipeline:
    """End-to-end scoring orchestrator for a single submission."""

    def __init__(
        self,
        *,
        games: GameRegistry,
        attempts: AttemptStore,
        review_queue: ReviewQueueStore,
        validators: ValidatorRegistry,
        generative: GenerativeScorer,
        similarity: SimilarityEngine,
        corpus: ReferenceCorpusScorer,
        arbitrator: EnsembleArbitrator,
        integrity: IntegrityEvaluator,
        adjustments: AdjustmentPipeline,
        router: ReviewRouter,
        curator: CorpusCurator,
        composer: FeedbackComposer | None = None,
        analytics: AnalyticsSink | None = None,
        publisher: BackgroundPublisher | None = None,
    ) -> None:
        self._games = games
        self._attempts = attempts
        self._review_queue = review_queue
        self._validators = validators
        self._generative = generative
        self._similarity = similarity
        self._corpus = corpus
        self._arbitrator = arbitrator
        self._integrity = integrity
        self._adjustments = adjustments
        self._router = router
        self._curator = curator
        self._composer = composer or FeedbackComposer()
        self._analytics = analytics or NullAnalyticsSink()
        self._publisher = publisher or BackgroundPublisher()
        self._logger = structlog.get_logger(__name__)

    @property
    def publisher(self) -> BackgroundPublisher:
        return self._publisher

    async def score(self, request: ScoringRequest | dict[str, Any]) -> ScoringResponse:
        started = time.perf_counter()
        request = _coerce_request(request)
        game = self._games.lookup(request.game_id)
        if game is None:
            raise GameNotFound(request.game_id)
        submission = Submission.from_request(request, game)

        if await asyncio.to_thread(self._attempts.exists, request.player_id, game.game_id):
            raise DuplicateSubmission(request.player_id, game.game_id)

        validation = self._validators.validate(submission.skill_category, submission.text, game.validation)
        example = game.example_solution if game.has_example else None

        similarity, model_result = await asyncio.gather(
            self._similarity.compare(submission.text, example),
            self._generative.score(game=game, submission=submission, validation=validation),
        )
        corpus = await self._corpus.score(game.game_id, similarity.submission_embedding)

        ensemble = self._arbitrator.arbitrate(
            validation_score=validation.score,
            ai_score=model_result.score if model_result else None,
            embedding_similarity=similarity.similarity if similarity.available else None,
            embedding_expected=example is not None,
        )
        integrity = self._integrity.assess(
            submission.text,
            example=example,
            example_similarity=similarity.similarity,
            provisional_score=ensemble.final_score,
            skill_category=submission.skill_category,
        )
        adjusted = self._adjustments.apply(
            ensemble_score=ensemble.final_score,
            integrity=integrity,
            corpus_adjustment=corpus.adjustment,
            hints_used=submission.hints_used,
        )
        report = self._composer.compose(
            validation=validation,
            model_result=model_result,
            ensemble=ensemble,
            integrity=integrity,
            adjusted=adjusted,
            corpus=corpus,
            submission_text=submission.text,
        )
        feedback = self._composer.payload(report)

        attempt_id = uuid.uuid4().hex
        record = AttemptRecord(
            attempt_id=attempt_id,
            player_id=request.player_id,
            game_id=game.game_id,
            team_id=request.team_id,
            submission_text=submission.text,
            score=adjusted.final_score,
            feedback=feedback.rendered,
            created_at=pendulum.now("UTC").to_iso8601_string(),
        )
        if await asyncio.to_thread(self._attempts.insert_if_absent, record) == "conflict":
            raise DuplicateSubmission(request.player_id, game.game_id)

        decision = self._router.route(confidence=ensemble.confidence, integrity=integrity)
        if decision.should_review:
            item = self._router.build_item(
                decision,
                attempt_id=attempt_id,
                player_id=request.player_id,
                game_id=game.game_id,
                score=adjusted.final_score,
                confidence=ensemble.confidence,
                integrity=integrity,
            )
            self._publisher.publish("review.enqueue", self._enqueue_review(item))

        self._publisher.publish(
            "corpus.curate",
            asyncio.to_thread(
                self._curator.curate,
                game_id=game.game_id,
                text=submission.text,
                embedding=similarity.submission_embedding,
                final_score=adjusted.final_score,
                is_exact_copy=integrity.is_exact_copy,
            ),
        )

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        self._publisher.publish(
            "analytics.log",
            asyncio.to_thread(
                self._analytics.log,
                "submission_scored",
                {
                    "attempt_id": attempt_id,
                    "game_id": game.game_id,
                    "player_id": request.player_id,
                    "skill_category": submission.skill_category,
                    "final_score": adjusted.final_score,
                    "confidence": ensemble.confidence,
                    "score_range": list(ensemble.score_range),
                    "ensemble_notes": list(ensemble.notes),
                    "weights": ensemble.weights,
                    "signals": ensemble.components,
                    "corpus_weight": corpus.weight,
                    "integrity_risk": integrity.risk,
                    "gaming_risk": integrity.gaming.risk,
                    "gaming_penalty": integrity.gaming.penalty,
                    "gaming_action": integrity.gaming.recommended_action,
                    "consistency_flags": list(model_result.consistency_flags) if model_result else [],
                    "used_ai_scoring": ensemble.used_ai,
                    "model": model_result.model if model_result else None,
                    "processing_ms": elapsed_ms,
                },
            ),
        )

        self._logger.info(
            "pipeline.scored",
            attempt_id=attempt_id,
            game_id=game.game_id,
            final_score=adjusted.final_score,
            confidence=ensemble.confidence,
            used_ai=ensemble.used_ai,
            integrity_risk=integrity.risk,
            review=decision.should_review,
            processing_ms=elapsed_ms,
        )

        return ScoringResponse(
            attempt_id=attempt_id,
            game_id=game.game_id,
            player_id=request.player_id,
            final_score=adjusted.final_score,
            feedback=feedback,
            ensemble_breakdown=EnsembleBreakdown(
                ai=ensemble.components.get("ai"),
                validation=ensemble.components["validation"],
                embedding=ensemble.components.get("embedding"),
                corpus_adjustment=adjusted.breakdown.corpus_adjustment,
                confidence=ensemble.confidence,
                confidence_level=ensemble.confidence_level,
                weights=ensemble.weights,
                score_range=ensemble.score_range,
                notes=list(ensemble.notes),
            ),
            breakdown=adjusted.breakdown,
            integrity_risk=integrity.risk,
            integrity_flags=list(integrity.flags),
            gaming_risk=integrity.gaming.risk,
            gaming_penalty=integrity.gaming.penalty,
            hints_used=adjusted.hints_used,
            hint_penalty=adjusted.hint_penalty,
            used_ai_scoring=ensemble.used_ai,
            model=model_result.model if model_result else None,
            review_queued=decision.should_review,
            review_reasons=decision.reasons,
        )

    async def score_and_drain(self, request: ScoringRequest | dict[str, Any]) -> ScoringResponse:
        """Score, then wait for background side effects to settle."""
        try:
            return await self.score(request)
        finally:
            await self._publisher.drain()

    def score_sync(self, request: ScoringRequest | dict[str, Any]) -> ScoringResponse:
        return asyncio.run(self.score_and_drain(request))

    async def _enqueue_review(self, item: ReviewQueueItem) -> None:
        await asyncio.to_thread(self._review_queue.enqueue, item)
        self._logger.info("review.enqueued", attempt_id=item.attempt_id, reasons=item.reasons)


class OutputWriter:
    """Persist scoring responses."""

    def write(self, path: Path, response: ScoringResponse) -> None:
        payload = {
            "metadata": {
                "timestamp": pendulum.now("UTC").to_iso8601_string(),
                "app_version": __version__,
            },
            "result": response.model_dump(mode="json"),
        }
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")


def _coerce_request(request: ScoringRequest | dict[str, Any]) -> ScoringRequest:
    if isinstance(request, ScoringRequest):
        return request
    try:
        return ScoringRequest.model_validate(request)
    except ValidationError as exc:
        errors = [f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()]
        raise InvalidInput("Invalid scoring request", errors=errors) from exc
