# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-04
# Description: SimilarityScorer
# -----------------------------------------------------------------------------
import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, Sequence, Tuple

import numpy as np

from utility.errors import DimensionMismatchError
from utility.logging_utils import get_class_logger

# Scores closer than this rank as equal and keep their input order
SCORE_DECIMALS = 9


def ranking_key(score: float) -> float:
    """Sort key for descending, tolerance-stable ranking (use with a stable sort)."""
    return -round(float(score), SCORE_DECIMALS)


@dataclass(frozen=True)
class SimilarDocument:
    text: str
    score: float
    index: int  # position in the candidate list


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine similarity in [-1, 1].
    Vectors of different length raise DimensionMismatchError.
    A zero-magnitude vector has no direction; it scores 0.0 against everything.
    """
    va = np.asarray(a, dtype=np.float64).ravel()
    vb = np.asarray(b, dtype=np.float64).ravel()
    if va.shape[0] != vb.shape[0]:
        raise DimensionMismatchError(va.shape[0], vb.shape[0], "cosine_similarity")

    norm_a = np.linalg.norm(va)
    norm_b = np.linalg.norm(vb)
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0

    sim = float(np.dot(va, vb) / (norm_a * norm_b))
    # clip float rounding (e.g. 1.0000000002)
    return float(np.clip(sim, -1.0, 1.0))


class SimilarityScorer:
    """
    Brute-force cosine ranking for small candidate sets
    (a handful of documents' chunks, not a corpus).
    """

    def __init__(self, embedder: Any = None, logger: logging.Logger | None = None) -> None:
        self.embedder = embedder
        self.logger = logger or get_class_logger(self.__class__)

    @staticmethod
    def rank(
            query_vector: Sequence[float],
            candidates: Sequence[Sequence[float]],
            top_k: int,
    ) -> List[Tuple[int, float]]:
        """
        Score every candidate against query_vector and return (position, score)
        pairs, highest first; scores equal within
        floating-point tolerance keep input order.
        """
        scored = [(i, cosine_similarity(query_vector, c)) for i, c in enumerate(candidates)]
        scored.sort(key=lambda pair: ranking_key(pair[1]))
        return scored[:max(top_k, 0)]

    def find_similar(
            self,
            query: str,
            documents: Sequence[Mapping[str, Any]],
            top_k: int = 5,
    ) -> List[SimilarDocument]:
        """
        documents: [{"text": str, "embedding": vector}, ...] with precomputed embeddings.
        Embeds the query once, ranks all candidates.
        """
        if self.embedder is None:
            raise RuntimeError("find_similar requires an embedder")

        query_vector = self.embedder.embed(query)
        ranked = self.rank(query_vector, [d["embedding"] for d in documents], top_k)

        self.logger.debug(
            "find_similar: candidates=%d top_k=%d best=%s",
            len(documents),
            top_k,
            f"{ranked[0][1]:.4f}" if ranked else None,
        )

        return [
            SimilarDocument(text=documents[i].get("text", ""), score=score, index=i)
            for i, score in ranked
        ]
