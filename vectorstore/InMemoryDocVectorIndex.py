# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-05
# Description: InMemoryDocVectorIndex
# -----------------------------------------------------------------------------
import logging
from typing import Any, Dict, List, Sequence

import numpy as np

from embedding.IndexRecord import IndexRecord
from similarity.SimilarityScorer import SimilarityScorer
from utility.errors import DimensionMismatchError
from utility.logging_utils import get_class_logger
from vectorstore.DocVectorIndex import DocVectorIndex, IndexStats, VectorMatch


def _matches_where(metadata: Dict[str, Any], where: Dict[str, Any] | None) -> bool:
    """Supports the equality subset of Chroma's where syntax: {k: v} and {k: {"$eq": v}}."""
    if not where:
        return True
    for key, expected in where.items():
        if isinstance(expected, dict) and "$eq" in expected:
            expected = expected["$eq"]
        if metadata.get(key) != expected:
            return False
    return True


class InMemoryDocVectorIndex(DocVectorIndex):
    """
    Process-local vector index using brute-force cosine ranking.
    For local development and small corpora only; contents are lost on restart.
    Upserts are immediately visible.
    """

    def __init__(self, dimension: int, logger: logging.Logger | None = None) -> None:
        self.dimension = dimension
        self.logger = logger or get_class_logger(self.__class__)
        # insertion-ordered: re-upserting an id keeps its original position
        self._records: Dict[str, IndexRecord] = {}

    def test_connection(self) -> bool:
        return True

    def upsert(self, records: Sequence[IndexRecord]) -> None:
        for r in records:
            if r.dimension != self.dimension:
                raise DimensionMismatchError(self.dimension, r.dimension, f"upsert {r.id}")
            self._records[r.id] = IndexRecord(
                id=r.id,
                vector=np.asarray(r.vector, dtype=np.float32),
                metadata=dict(r.metadata),
            )
        self.logger.debug("Upserted %d records (total=%d)", len(records), len(self._records))

    def query(
            self,
            vector: np.ndarray,
            top_k: int,
            where: Dict[str, Any] | None = None,
    ) -> List[VectorMatch]:
        candidates = [r for r in self._records.values() if _matches_where(r.metadata, where)]
        ranked = SimilarityScorer.rank(vector, [r.vector for r in candidates], top_k)
        return [
            VectorMatch(id=candidates[i].id, score=score, metadata=dict(candidates[i].metadata))
            for i, score in ranked
        ]

    def fetch_ids(self, ids: Sequence[str]) -> List[str]:
        return [i for i in ids if i in self._records]

    def list_ids(self, where: Dict[str, Any]) -> List[str]:
        return [r.id for r in self._records.values() if _matches_where(r.metadata, where)]

    def delete(self, ids: Sequence[str]) -> None:
        for i in ids:
            self._records.pop(i, None)

    def delete_where(self, where: Dict[str, Any]) -> int:
        ids = self.list_ids(where)
        self.delete(ids)
        return len(ids)

    def stats(self) -> IndexStats:
        return IndexStats(record_count=len(self._records), dimension=self.dimension)
