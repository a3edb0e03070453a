# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-06
# Description: DocIndexService.py
# -----------------------------------------------------------------------------
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Sequence

import numpy as np

from chunking.DocChunk import DocChunk
from chunking.DocChunker import DocChunker
from embedding.IndexRecord import IndexRecord
from settings import (
    FINAL_SETTLE_SECONDS,
    INDEX_CHUNK_OVERLAP,
    INDEX_CHUNK_SIZE,
    UPSERT_BATCH_SIZE,
    UPSERT_SETTLE_SECONDS,
    VERIFY_AFTER_UPSERT,
)
from utility.errors import DimensionMismatchError, EmptyInputError, IndexingError
from utility.logging_utils import get_class_logger
from vectorstore.DocVectorIndex import DocVectorIndex


@dataclass(frozen=True)
class ReindexResult:
    record_ids: List[str]
    deleted_ids: List[str]
    # stale records that are still in the index (delete failed)
    stale_ids: List[str] = field(default_factory=list)
    error: Optional[str] = None


class DocIndexService:
    """
    Owns the index pipeline for one document's extracted text:
      - chunk (index-time window, finer than generation chunk_size)
      - embed chunk by chunk, in chunk order
      - validate dimensionality against the index
      - upsert in sequential batches with settle delays
      - best-effort visibility check

    All-or-nothing up to the first upsert: an embedding or dimension failure
    commits nothing. A failed batch leaves earlier batches in place; retrying
    the whole document overwrites them (ids are deterministic).
    """

    def __init__(
        self,
        *,
        embedder: Any,
        index: DocVectorIndex,
        chunker: DocChunker | None = None,
        chunk_size: int = INDEX_CHUNK_SIZE,
        overlap: int = INDEX_CHUNK_OVERLAP,
        batch_size: int = UPSERT_BATCH_SIZE,
        settle_seconds: float = UPSERT_SETTLE_SECONDS,
        final_settle_seconds: float = FINAL_SETTLE_SECONDS,
        verify: bool = VERIFY_AFTER_UPSERT,
        expected_dimension: Optional[int] = None,
        sleep: Callable[[float], None] = time.sleep,
        logger: logging.Logger | None = None,
    ) -> None:
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")

        self.embedder = embedder
        self.index = index
        self.chunker = chunker or DocChunker(chunk_size=chunk_size, overlap=overlap)
        self.chunk_size = chunk_size
        self.overlap = overlap
        self.batch_size = batch_size
        self.settle_seconds = settle_seconds
        self.final_settle_seconds = final_settle_seconds
        self.verify = verify
        self.expected_dimension = expected_dimension or getattr(embedder, "dimension", None)
        self._sleep = sleep
        self.logger = logger or get_class_logger(self.__class__)

    # ------------------------------------------------------------------
    # indexing
    # ------------------------------------------------------------------
    def index_document(self, document_id: str, text: str) -> List[str]:
        """
        Chunk, embed and upsert `text`; returns the record ids written, in chunk order.
        Raises EmptyInputError, DimensionMismatchError or IndexingError.
        """
        document_id = (document_id or "").strip()
        if not document_id:
            raise EmptyInputError("document_id must not be empty")
        if not text or not text.strip():
            raise EmptyInputError(f"Empty document text for '{document_id}'")

        self.logger.info("index_document: doc_id='%s' chars=%d (start)", document_id, len(text))
        start_time = time.time()

        chunks = self.chunker.split(text, self.chunk_size, self.overlap, doc_id=document_id)
        if not chunks:
            raise IndexingError(f"No chunks produced for '{document_id}'", document_id=document_id)

        records = self._embed_chunks(document_id, chunks)
        self._validate_dimensions(document_id, records)

        written = self._batch_upsert(document_id, records)

        if self.final_settle_seconds > 0:
            self.logger.info("Waiting %.1fs for the index to settle...", self.final_settle_seconds)
            self._sleep(self.final_settle_seconds)

        if self.verify:
            self._verify_visible(written[0])

        elapsed = (time.time() - start_time) * 1000.0
        self.logger.info(
            "index_document: doc_id='%s' records=%d (done in %.1f ms)", document_id, len(written), elapsed
        )
        return written

    def _embed_chunks(self, document_id: str, chunks: Sequence[DocChunk]) -> List[IndexRecord]:
        records: List[IndexRecord] = []
        total = len(chunks)
        for chunk in chunks:
            try:
                vector = np.asarray(self.embedder.embed(chunk.text), dtype=np.float32)
            except Exception as e:
                self.logger.error(
                    "Embedding failed for chunk %d/%d of '%s': %s", chunk.index + 1, total, document_id, e
                )
                raise IndexingError(
                    f"Embedding failed for chunk {chunk.index} of '{document_id}': {e}",
                    document_id=document_id,
                ) from e

            if vector.ndim != 1 or vector.size == 0:
                raise IndexingError(
                    f"Invalid embedding for chunk {chunk.index} of '{document_id}'", document_id=document_id
                )

            self.logger.debug("Chunk %d/%d embedded: dim=%d %s", chunk.index + 1, total, vector.size, chunk.short_preview())
            records.append(IndexRecord(id=chunk.record_id, vector=vector, metadata=chunk.to_metadata()))

        self.logger.info("Embedded %d chunks for '%s'", len(records), document_id)
        return records

    def _index_dimension(self) -> Optional[int]:
        try:
            return self.index.stats().dimension
        except Exception as e:
            self.logger.warning(
                "Could not read index stats, validating against configured dimension %s: %s",
                self.expected_dimension,
                e,
            )
            return self.expected_dimension

    def _validate_dimensions(self, document_id: str, records: Sequence[IndexRecord]) -> None:
        expected = self._index_dimension()
        if expected is None:
            expected = records[0].dimension
            self.logger.warning("No configured dimension; using first vector's dimension %d", expected)

        for r in records:
            if r.dimension != expected:
                err = DimensionMismatchError(expected, r.dimension, f"record {r.id}")
                self.logger.critical(
                    "%s - check the embedding model / index configuration; nothing upserted for '%s'",
                    err,
                    document_id,
                )
                raise err

    def _batch_upsert(self, document_id: str, records: Sequence[IndexRecord]) -> List[str]:
        committed: List[str] = []
        n_batches = (len(records) + self.batch_size - 1) // self.batch_size

        for batch_no, i in enumerate(range(0, len(records), self.batch_size), start=1):
            batch = list(records[i:i + self.batch_size])
            self.logger.info("Upserting batch %d/%d (%d vectors)", batch_no, n_batches, len(batch))
            try:
                self.index.upsert(batch)
            except Exception as e:
                self.logger.error(
                    "Upsert batch %d/%d failed for '%s' (committed=%d): %s",
                    batch_no,
                    n_batches,
                    document_id,
                    len(committed),
                    e,
                )
                raise IndexingError(
                    f"Upsert failed at batch {batch_no}/{n_batches} for '{document_id}': {e}",
                    document_id=document_id,
                    committed_ids=committed,
                ) from e

            committed.extend(r.id for r in batch)
            if self.settle_seconds > 0:
                self._sleep(self.settle_seconds)

        return committed

    def _verify_visible(self, record_id: str) -> bool:
        try:
            visible = record_id in self.index.fetch_ids([record_id])
        except Exception as e:
            self.logger.warning("Could not verify upload of '%s': %s", record_id, e)
            return False

        if visible:
            self.logger.info("Verification: record '%s' found in index", record_id)
        else:
            self.logger.warning("Verification: record '%s' not yet visible (index still settling)", record_id)
        return visible

    # ------------------------------------------------------------------
    # re-indexing / deletion
    # ------------------------------------------------------------------
    def reindex_document(
        self,
        document_id: str,
        text: str,
        previous_ids: Optional[Sequence[str]] = None,
    ) -> ReindexResult:
        """
        Upsert the new chunk set, then delete records of the previous run that the
        new text no longer produces (stale trailing chunks).
        previous_ids defaults to the ids currently stored for the document.

        Once the new records are written a failed stale delete is not fatal: the
        result lists the ids left behind so a later re-index or delete can retry.
        """
        if previous_ids is None:
            try:
                previous_ids = self.index.list_ids({"document_id": document_id})
            except Exception as e:
                self.logger.warning("Could not list existing records for '%s': %s", document_id, e)
                previous_ids = []

        record_ids = self.index_document(document_id, text)

        current = set(record_ids)
        stale = [rid for rid in dict.fromkeys(previous_ids) if rid not in current]
        if not stale:
            return ReindexResult(record_ids=record_ids, deleted_ids=[])

        try:
            self.delete_document(stale)
        except Exception as e:
            self.logger.error(
                "reindex_document: new records written for '%s' but %d stale records remain: %s",
                document_id,
                len(stale),
                e,
            )
            return ReindexResult(
                record_ids=record_ids,
                deleted_ids=[],
                stale_ids=stale,
                error=f"Stale record delete failed: {e}",
            )

        self.logger.info("reindex_document: removed %d stale records for '%s'", len(stale), document_id)
        return ReindexResult(record_ids=record_ids, deleted_ids=stale)

    def delete_document(self, record_ids: Sequence[str]) -> int:
        """Idempotent bulk delete of known record ids."""
        ids = list(dict.fromkeys(record_ids or []))
        if not ids:
            self.logger.info("delete_document: no records to delete")
            return 0

        self.logger.info("delete_document: deleting %d records", len(ids))
        try:
            self.index.delete(ids)
        except Exception as e:
            self.logger.error("delete_document: failed to delete %d records: %s", len(ids), e, exc_info=True)
            raise
        return len(ids)

    def delete_document_by_id(self, document_id: str) -> int:
        """Delete every record whose metadata points at document_id."""
        self.logger.info("delete_document_by_id: doc_id='%s' (start)", document_id)
        deleted = self.index.delete_where({"document_id": document_id})
        self.logger.info("delete_document_by_id: doc_id='%s' deleted=%d (done)", document_id, deleted)
        return deleted
