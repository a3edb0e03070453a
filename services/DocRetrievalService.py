# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-07
# Description: DocRetrievalService
# -----------------------------------------------------------------------------
import logging
from typing import Any, Dict, List, Optional

import numpy as np

from settings import CANDIDATE_FLOOR
from similarity.SimilarityScorer import ranking_key
from utility.errors import DimensionMismatchError, EmptyQuestionError, RetrievalError
from utility.logging_utils import get_class_logger
from vectorstore.DocVectorIndex import DocVectorIndex, VectorMatch


class DocRetrievalService:
    """
    Question -> ranked chunks:
        - embed the question
        - over-fetch max(top_k, candidate_floor) candidates, optionally scoped to one document
        - drop candidates without text, keep descending score order, cut to top_k

    An empty list means "no relevant chunks", a normal outcome.
    Provider failures raise RetrievalError so callers can fall back.
    """

    def __init__(
        self,
        *,
        embedder: Any,
        index: DocVectorIndex,
        candidate_floor: int = CANDIDATE_FLOOR,
        logger: logging.Logger | None = None,
    ) -> None:
        self.embedder = embedder
        self.index = index
        self.candidate_floor = candidate_floor
        self.logger = logger or get_class_logger(self.__class__)

    def query(
        self,
        question: str,
        document_id: Optional[str] = None,
        top_k: int = 3,
    ) -> List[VectorMatch]:
        q = (question or "").strip()
        if not q:
            raise EmptyQuestionError("question must not be empty")
        if top_k < 1:
            raise ValueError(f"top_k must be >= 1, got {top_k}")

        n_candidates = max(top_k, self.candidate_floor)
        where: Optional[Dict[str, Any]] = {"document_id": document_id} if document_id else None

        self.logger.info(
            "query: question='%s' document_id=%s top_k=%d candidates=%d (start)",
            q[:120],
            document_id or "ALL",
            top_k,
            n_candidates,
        )

        try:
            vector = np.asarray(self.embedder.embed(q), dtype=np.float32)
        except Exception as e:
            self.logger.error("query: embedding failed: %s", e)
            raise RetrievalError(f"Query embedding failed: {e}") from e

        expected = getattr(self.embedder, "dimension", None)
        if expected is not None and vector.size != expected:
            err = DimensionMismatchError(expected, int(vector.size), "query embedding")
            self.logger.critical("%s", err)
            raise err

        try:
            matches = self.index.query(vector, n_candidates, where)
        except Exception as e:
            self.logger.error("query: vector index query failed: %s", e)
            raise RetrievalError(f"Vector query failed: {e}") from e

        if not matches:
            self.logger.warning("query: no matches for document_id=%s", document_id or "ALL")
            self._log_index_state()
            return []

        with_text = [m for m in matches if m.text is not None]
        dropped = len(matches) - len(with_text)
        if dropped:
            self.logger.warning("query: dropped %d matches without text", dropped)

        # stable: scores equal within tolerance keep the index's order
        with_text.sort(key=lambda m: ranking_key(m.score))
        results = with_text[:top_k]

        self.logger.info(
            "query: matches=%d usable=%d returned=%d top_scores=%s (done)",
            len(matches),
            len(with_text),
            len(results),
            ", ".join(f"{m.score:.4f}" for m in results[:3]),
        )
        return results

    def _log_index_state(self) -> None:
        """Diagnostics only: an empty index usually means indexing has not settled yet."""
        try:
            stats = self.index.stats()
        except Exception as e:
            self.logger.warning("Could not get index stats: %s", e)
            return

        self.logger.info("Index stats: records=%d dimension=%d", stats.record_count, stats.dimension)
        if stats.record_count == 0:
            self.logger.warning("Index is empty! Documents may not be indexed yet.")
