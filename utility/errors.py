# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-02
# Description: errors.py
# -----------------------------------------------------------------------------
from typing import List, Optional


class DocQAError(Exception):
    """Base class for every error raised by the RAG pipeline."""


class EmptyInputError(DocQAError):
    """Empty document text or empty question, rejected before any external call."""


class ChunkingConfigError(DocQAError, ValueError):
    """Chunk size / overlap combination that cannot make progress."""


class DimensionMismatchError(DocQAError):
    """Embedding length disagrees with the index (or the other vector)."""

    def __init__(self, expected: int, actual: int, context: str = "") -> None:
        self.expected = expected
        self.actual = actual
        self.context = context
        msg = f"Dimension mismatch: expected {expected}, got {actual}"
        if context:
            msg = f"{msg} ({context})"
        super().__init__(msg)


class IndexingError(DocQAError):
    """
    Chunk embedding or upsert failed.
    committed_ids lists the records already written before the failure
    (safe to overwrite on retry, upsert is idempotent by id).
    """

    def __init__(self, message: str, *, document_id: str = "", committed_ids: Optional[List[str]] = None) -> None:
        self.document_id = document_id
        self.committed_ids = list(committed_ids or [])
        super().__init__(message)


class QueryError(DocQAError):
    """Query-time failure."""


class EmptyQuestionError(EmptyInputError, QueryError):
    """Question was empty or whitespace-only."""


class RetrievalError(QueryError):
    """Vector query failed (provider error, network, timeout)."""


class GenerationError(DocQAError):
    """Answer generation failed or timed out."""


class CallTimeoutError(DocQAError, TimeoutError):
    """An external call did not complete within its time budget."""
