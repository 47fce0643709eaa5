"\"\"\"Embedding similarity with per-call timeouts.\"\"\""

from __future__ import annotations

import asyncio
import math
from dataclasses import dataclass, field
from typing import Sequence

import structlog

from ..embeddings import EmbeddingClient


def cosine_similarity(vec_a: Sequence[float], vec_b: Sequence[float]) -> float:
    """Cosine of two dense vectors; 0.0 for empty, mismatched or zero-norm input."""
    if not vec_a or not vec_b or len(vec_a) != len(vec_b):
        return 0.0
    dot = sum(a * b for a, b in zip(vec_a, vec_b))
    norm_a = math.sqrt(sum(a * a for a in vec_a))
    norm_b = math.sqrt(sum(b * b for b in vec_b))
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return dot / (norm_a * norm_b)


@dataclass(slots=True)
class SimilarityResult:
    available: bool
    similarity: float = 0.0
    submission_embedding: list[float] = field(default_factory=list)
    example_embedding: list[float] = field(default_factory=list)


class SimilarityEngine:
    """Obtains embeddings off the event loop and compares them."""

    def __init__(self, client: EmbeddingClient, *, timeout: float = 8.0) -> None:
        self._client = client
        self._timeout = timeout
        self._logger = structlog.get_logger(__name__)

    async def embed(self, text: str, *, label: str = "submission") -> list[float]:
        if not text or not text.strip():
            return []
        try:
            vector = await asyncio.wait_for(asyncio.to_thread(self._client.embed, text), self._timeout)
        except asyncio.TimeoutError:
            self._logger.warning("similarity.timeout", label=label, timeout=self._timeout)
            return []
        except Exception as exc:  # noqa: BLE001
            self._logger.warning("similarity.embed_failed", label=label, error=str(exc))
            return []
        return list(vector or [])

    async def compare(self, text: str, example: str | None) -> SimilarityResult:
        if not example:
            submission_embedding = await self.embed(text)
            return SimilarityResult(available=False, submission_embedding=submission_embedding)
        submission_embedding, example_embedding = await asyncio.gather(
            self.embed(text),
            self.embed(example, label="example"),
        )
        return self.result_from(submission_embedding, example_embedding)

    def result_from(self, submission_embedding: list[float], example_embedding: list[float]) -> SimilarityResult:
        available = bool(submission_embedding and example_embedding)
        if not available:
            self._logger.info(
                "similarity.unavailable",
                has_submission=bool(submission_embedding),
                has_example=bool(example_embedding),
            )
        return SimilarityResult(
            available=available,
            similarity=max(0.0, cosine_similarity(submission_embedding, example_embedding)) if available else 0.0,
            submission_embedding=submission_embedding,
            example_embedding=example_embedding,
        )
