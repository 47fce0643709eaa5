from __future__ import annotations

from skillscoring.core import CorpusCurator
from skillscoring.schemas import ReferenceAnswer
from skillscoring.stores import InMemoryReferenceCorpus


def build_store(*embeddings: list[float]) -> InMemoryReferenceCorpus:
    return InMemoryReferenceCorpus(
        ReferenceAnswer(id=f"seed-{i}", game_id="G-1", embedding=vector, score=95, source_type="seed", verified=True)
        for i, vector in enumerate(embeddings)
    )


def curate(store: InMemoryReferenceCorpus, **kwargs):
    params = {"game_id": "G-1", "text": "A strong answer", "embedding": [0.0, 1.0], "final_score": 88}
    params.update(kwargs)
    return CorpusCurator(store).curate(**params)


def test_high_scoring_attempt_is_added_as_unverified_player_entry():
    store = build_store([1.0, 0.0])

    outcome = curate(store)

    assert outcome.added is True
    assert len(store) == 2
    entry = store.query_by_game("G-1")[-1]
    assert entry.id == outcome.reference_id
    assert entry.source_type == "player"
    assert entry.verified is False
    assert entry.created_at


def test_low_scores_missing_embeddings_and_copies_are_skipped():
    store = build_store()

    assert curate(store, final_score=79).reason == "below_threshold"
    assert curate(store, embedding=[]).reason == "missing_embedding"
    assert curate(store, is_exact_copy=True).reason == "exact_copy"
    assert len(store) == 0


def test_near_duplicates_are_not_added():
    store = build_store([0.0, 1.0])

    outcome = curate(store, embedding=[0.01, 1.0])

    assert outcome.added is False
    assert outcome.reason == "near_duplicate"
    assert len(store) == 1


def test_store_failure_is_reported_not_raised():
    store = build_store()
    store.available = False

    outcome = curate(store)

    assert outcome.added is False
    assert outcome.reason == "store_unavailable"
