# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-11
# Description: test_similarity_scorer.py
# -----------------------------------------------------------------------------
import pytest

from conftest import FakeEmbedder
from similarity.SimilarityScorer import SimilarityScorer, cosine_similarity
from utility.errors import DimensionMismatchError


def test_cosine_similarity_basic_geometry():
    assert cosine_similarity([1.0, 0.0], [2.0, 0.0]) == pytest.approx(1.0)
    assert cosine_similarity([1.0, 0.0], [0.0, 3.0]) == pytest.approx(0.0)
    assert cosine_similarity([1.0, 1.0], [-1.0, -1.0]) == pytest.approx(-1.0)


def test_zero_vector_scores_zero():
    assert cosine_similarity([0.0, 0.0, 0.0], [1.0, 2.0, 3.0]) == 0.0
    assert cosine_similarity([0.0, 0.0], [0.0, 0.0]) == 0.0


def test_result_stays_in_range():
    v = [0.1, 0.2, 0.3]
    assert -1.0 <= cosine_similarity(v, v) <= 1.0


def test_dimension_mismatch_raises():
    with pytest.raises(DimensionMismatchError) as exc:
        cosine_similarity([1.0, 2.0], [1.0, 2.0, 3.0])
    assert exc.value.expected == 2
    assert exc.value.actual == 3


def test_rank_orders_descending_and_keeps_ties_stable():
    ranked = SimilarityScorer.rank([1.0, 0.0], [[0.0, 1.0], [1.0, 0.0], [2.0, 0.0], [1.0, 1.0]], top_k=3)

    assert [i for i, _ in ranked] == [1, 2, 3]
    assert ranked[0][1] == pytest.approx(ranked[1][1])


def test_find_similar_returns_closest_text():
    embedder = FakeEmbedder()
    docs = [
        {"text": "charge the battery pack", "embedding": embedder.embed("charge the battery pack")},
        {"text": "steam sterilize at 134C", "embedding": embedder.embed("steam sterilize at 134C")},
    ]
    scorer = SimilarityScorer(embedder=embedder)

    hits = scorer.find_similar("how do I sterilize with steam", docs, top_k=1)

    assert len(hits) == 1
    assert hits[0].text == "steam sterilize at 134C"
    assert hits[0].index == 1


def test_find_similar_requires_embedder():
    with pytest.raises(RuntimeError):
        SimilarityScorer().find_similar("q", [], top_k=1)


def test_rank_treats_rounding_noise_as_a_tie():
    q = [0.3, 0.7, 0.1]
    scaled = [[k * x for x in q] for k in (1, 7, 0.1, 13, 0.37)]
    candidates = [[1.0, 2.0, 3.0]] + scaled

    ranked = SimilarityScorer.rank(q, candidates, top_k=6)

    # every scaled copy scores 1.0 up to the last bits; input order wins
    assert [i for i, _ in ranked] == [1, 2, 3, 4, 5, 0]
