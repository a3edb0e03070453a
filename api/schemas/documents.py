# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-10
# Description: documents.py
# -----------------------------------------------------------------------------
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class IndexDocumentRequest(BaseModel):
    text: str
    metadata: Optional[Dict[str, str]] = None


class ReindexDocumentRequest(BaseModel):
    # None -> re-index the stored text
    text: Optional[str] = None
    # None -> stale records found by metadata filter
    previous_ids: Optional[List[str]] = None


class IndexDocumentResponse(BaseModel):
    document_id: str
    # "indexed" | "indexing_pending"
    status: str
    record_ids: List[str] = Field(default_factory=list)
    deleted_ids: List[str] = Field(default_factory=list)
    # stale records a re-index could not delete
    stale_ids: List[str] = Field(default_factory=list)
    error: Optional[str] = None


class DeleteVectorsRequest(BaseModel):
    # None -> delete every record of the document
    record_ids: Optional[List[str]] = None


class DeleteVectorsResponse(BaseModel):
    document_id: str
    deleted: int
