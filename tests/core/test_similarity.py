from __future__ import annotations

import asyncio
import math
import time

import pytest

from skillscoring.core import SimilarityEngine, cosine_similarity
from skillscoring.embeddings import HashedTermEmbeddingClient


class StubEmbeddingClient:
    def __init__(self, vectors: dict[str, list[float]], *, delay: float = 0.0, fail_on: str | None = None):
        self._vectors = vectors
        self._delay = delay
        self._fail_on = fail_on
        self.calls: list[str] = []

    def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        if self._delay:
            time.sleep(self._delay)
        if text == self._fail_on:
            raise ConnectionError("embedding backend down")
        return self._vectors.get(text, [])


def test_cosine_similarity_edge_cases():
    assert cosine_similarity([1.0, 0.0], [1.0, 0.0]) == pytest.approx(1.0)
    assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)
    assert cosine_similarity([], [1.0]) == 0.0
    assert cosine_similarity([1.0, 0.0], [1.0, 0.0, 0.0]) == 0.0
    assert cosine_similarity([0.0, 0.0], [1.0, 0.0]) == 0.0


def test_compare_embeds_both_texts():
    client = StubEmbeddingClient({"submission": [1.0, 0.0], "example": [1.0, 1.0]})

    result = asyncio.run(SimilarityEngine(client).compare("submission", "example"))

    assert result.available is True
    assert result.similarity == pytest.approx(1 / math.sqrt(2))
    assert sorted(client.calls) == ["example", "submission"]


def test_compare_without_example_still_embeds_submission():
    client = StubEmbeddingClient({"submission": [1.0, 0.0]})

    result = asyncio.run(SimilarityEngine(client).compare("submission", None))

    assert result.available is False
    assert result.submission_embedding == [1.0, 0.0]


def test_embedding_failure_marks_signal_unavailable():
    client = StubEmbeddingClient({"submission": [1.0, 0.0]}, fail_on="example")

    result = asyncio.run(SimilarityEngine(client).compare("submission", "example"))

    assert result.available is False
    assert result.similarity == 0.0
    assert result.submission_embedding == [1.0, 0.0]


def test_embedding_timeout_marks_signal_unavailable():
    client = StubEmbeddingClient({"submission": [1.0], "example": [1.0]}, delay=0.3)

    result = asyncio.run(SimilarityEngine(client, timeout=0.05).compare("submission", "example"))

    assert result.available is False


def test_hashed_embeddings_are_deterministic_and_normalized():
    client = HashedTermEmbeddingClient(dimensions=64)

    first = client.embed("Senior Kubernetes engineer in Berlin")
    second = client.embed("Senior Kubernetes engineer in Berlin")

    assert first == second
    assert len(first) == 64
    assert sum(value * value for value in first) == pytest.approx(1.0)
    assert client.embed("   ") == []


def test_hashed_embeddings_normalize_common_aliases():
    client = HashedTermEmbeddingClient()

    alias = client.embed("k8s platform engineer")
    canonical = client.embed("kubernetes platform engineer")

    assert cosine_similarity(alias, canonical) == pytest.approx(1.0)
