# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-08
# Description: DocDocumentService.py
# -----------------------------------------------------------------------------
import logging
from typing import Any, Dict, List, Optional, Sequence

from document.DocTextStore import DocTextStore
from services.DocIndexService import DocIndexService
from utility.errors import DimensionMismatchError, EmptyInputError, IndexingError
from utility.logging_utils import get_class_logger

STATUS_INDEXED = "indexed"
STATUS_PENDING = "indexing_pending"


class DocDocumentService:
    """
    Document facade used by FastAPI
    - persist extracted text (fallback source for queries)
    - index / re-index via DocIndexService
    - delete vectors and text

    Indexing failures never masquerade as success: the result carries
    status=indexing_pending and the error, the text stays stored so
    queries can still fall back to it.
    """

    def __init__(self,
                 *,
                 text_store: DocTextStore,
                 index_service: DocIndexService,
                 logger: logging.Logger | None = None, ) -> None:
        self.text_store = text_store
        self.index_service = index_service
        self.logger = logger or get_class_logger(self.__class__)

        self.logger.info("DocDocumentService initialised (text_store=%s, index=%s)",
                         type(text_store).__name__, type(index_service).__name__)

    def _pending(self, document_id: str, e: Exception, committed: Sequence[str] = ()) -> Dict[str, Any]:
        return {
            "document_id": document_id,
            "status": STATUS_PENDING,
            "record_ids": list(committed),
            "deleted_ids": [],
            "stale_ids": [],
            "error": str(e),
        }

    def add_document(self, *, document_id: str, text: str, metadata: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        """Store text, then index it. EmptyInputError propagates (caller rejects the upload)."""
        document_id = (document_id or "").strip()
        if not document_id:
            raise EmptyInputError("document_id must not be empty")
        if not text or not text.strip():
            raise EmptyInputError(f"Empty document text for '{document_id}'")

        self.logger.info("add_document: doc_id='%s' chars=%d (start)", document_id, len(text))
        self.text_store.put_text(document_id, text, metadata)

        try:
            record_ids = self.index_service.index_document(document_id, text)
        except IndexingError as e:
            self.logger.error("add_document: doc_id='%s' -> indexing pending: %s", document_id, e)
            return self._pending(document_id, e, e.committed_ids)
        except DimensionMismatchError as e:
            self.logger.error("add_document: doc_id='%s' -> indexing pending (misconfiguration): %s", document_id, e)
            return self._pending(document_id, e)

        self.logger.info("add_document: doc_id='%s' records=%d (done)", document_id, len(record_ids))
        return {
            "document_id": document_id,
            "status": STATUS_INDEXED,
            "record_ids": record_ids,
            "deleted_ids": [],
            "stale_ids": [],
            "error": None,
        }

    def reindex_document(self,
                         *,
                         document_id: str,
                         text: Optional[str] = None,
                         previous_ids: Optional[List[str]] = None) -> Dict[str, Any]:
        """Re-index from new text, or from the stored text when none is given."""
        self.logger.info("reindex_document: doc_id='%s' new_text=%s (start)", document_id, text is not None)

        if text is None:
            text = self.text_store.get_text(document_id)
            if text is None:
                raise KeyError(f"No stored text for document_id={document_id}")
        else:
            if not text.strip():
                raise EmptyInputError(f"Empty document text for '{document_id}'")
            self.text_store.put_text(document_id, text)

        try:
            result = self.index_service.reindex_document(document_id, text, previous_ids=previous_ids)
        except IndexingError as e:
            self.logger.error("reindex_document: doc_id='%s' -> indexing pending: %s", document_id, e)
            return self._pending(document_id, e, e.committed_ids)
        except DimensionMismatchError as e:
            self.logger.error("reindex_document: doc_id='%s' -> indexing pending (misconfiguration): %s", document_id, e)
            return self._pending(document_id, e)

        self.logger.info("reindex_document: doc_id='%s' records=%d stale_deleted=%d stale_left=%d (done)",
                         document_id, len(result.record_ids), len(result.deleted_ids), len(result.stale_ids))
        return {
            "document_id": document_id,
            "status": STATUS_INDEXED,
            "record_ids": result.record_ids,
            "deleted_ids": result.deleted_ids,
            "stale_ids": result.stale_ids,
            "error": result.error,
        }

    def reindex_all(self) -> Dict[str, Dict[str, Any]]:
        """Re-index every stored document; one failure does not stop the rest."""
        results: Dict[str, Dict[str, Any]] = {}
        doc_ids = self.text_store.list_document_ids()
        self.logger.info("reindex_all: %d documents (start)", len(doc_ids))

        for doc_id in doc_ids:
            try:
                results[doc_id] = self.reindex_document(document_id=doc_id)
            except (KeyError, EmptyInputError) as e:
                self.logger.warning("reindex_all: skipping '%s': %s", doc_id, e)
                results[doc_id] = self._pending(doc_id, e)
            except Exception as e:
                # store or index outage for this document; carry on with the rest
                self.logger.error("reindex_all: doc_id='%s' failed: %s", doc_id, e, exc_info=True)
                results[doc_id] = self._pending(doc_id, e)

        indexed = sum(1 for r in results.values() if r["status"] == STATUS_INDEXED)
        self.logger.info("reindex_all: %d/%d documents indexed (done)", indexed, len(doc_ids))
        return results

    def delete_document_vectors(self,
                                *,
                                document_id: str,
                                record_ids: Optional[List[str]] = None) -> int:
        """Delete the given record ids, or every record of the document when none are given."""
        self.logger.info("delete_document_vectors: doc_id='%s' ids=%s (start)",
                         document_id, len(record_ids) if record_ids is not None else "by-filter")
        try:
            if record_ids is not None:
                deleted = self.index_service.delete_document(record_ids)
            else:
                deleted = self.index_service.delete_document_by_id(document_id)
            self.logger.info("delete_document_vectors: doc_id='%s' deleted=%d (done)", document_id, deleted)
            return deleted
        except Exception as e:
            self.logger.error("delete_document_vectors: doc_id='%s' -> failed: %s", document_id, e, exc_info=True)
            raise

    def delete_document(self, *, document_id: str, record_ids: Optional[List[str]] = None) -> Dict[str, Any]:
        deleted = self.delete_document_vectors(document_id=document_id, record_ids=record_ids)
        text_deleted = self.text_store.delete_text(document_id)
        return {"document_id": document_id, "deleted": deleted, "text_deleted": text_deleted}
