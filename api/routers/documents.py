# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-10
# Description: documents.py
# -----------------------------------------------------------------------------
import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException

from api.dependencies import get_document_service

from api.schemas.documents import (
    IndexDocumentRequest,
    IndexDocumentResponse,
    ReindexDocumentRequest,
    DeleteVectorsRequest,
    DeleteVectorsResponse,
)

from services.DocDocumentService import DocDocumentService
from utility.errors import EmptyInputError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])

@router.put("/{document_id}", response_model=IndexDocumentResponse)
def put_document(
    document_id: str,
    req: IndexDocumentRequest,
    svc: DocDocumentService = Depends(get_document_service),
) -> IndexDocumentResponse:
    document_id = (document_id or "").strip()
    logger.info("PUT /documents/{document_id} (start) document_id='%s' chars=%d", document_id, len(req.text))

    if not document_id:
        logger.warning("PUT /documents/{document_id} -> 400 (document_id empty)")
        raise HTTPException(status_code=400, detail="document_id must not be empty")

    try:
        raw = svc.add_document(document_id=document_id, text=req.text, metadata=req.metadata)
    except EmptyInputError as e:
        logger.warning("PUT /documents/{document_id} -> 400 document_id='%s': %s", document_id, e)
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("PUT /documents/{document_id} -> 500 document_id='%s': %s", document_id, e)
        raise HTTPException(status_code=500, detail="document upload failed")

    resp = IndexDocumentResponse(**raw)
    logger.info("PUT /documents/{document_id} (done) document_id='%s' status=%s records=%d",
                document_id, resp.status, len(resp.record_ids))
    return resp

@router.post("/{document_id}/reindex", response_model=IndexDocumentResponse)
def post_reindex_document(
    document_id: str,
    req: Optional[ReindexDocumentRequest] = Body(None),
    svc: DocDocumentService = Depends(get_document_service),
) -> IndexDocumentResponse:
    document_id = (document_id or "").strip()
    req = req or ReindexDocumentRequest()
    logger.info("POST /documents/{document_id}/reindex (start) document_id='%s' new_text=%s",
                document_id, req.text is not None)

    if not document_id:
        logger.warning("POST /documents/{document_id}/reindex -> 400 (document_id empty)")
        raise HTTPException(status_code=400, detail="document_id must not be empty")

    try:
        raw = svc.reindex_document(document_id=document_id, text=req.text, previous_ids=req.previous_ids)
    except KeyError as e:
        logger.warning("POST /documents/{document_id}/reindex -> 404 document_id='%s': %s", document_id, e)
        raise HTTPException(status_code=404, detail=f"no stored text for document_id={document_id}")
    except EmptyInputError as e:
        logger.warning("POST /documents/{document_id}/reindex -> 400 document_id='%s': %s", document_id, e)
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("POST /documents/{document_id}/reindex -> 500 document_id='%s': %s", document_id, e)
        raise HTTPException(status_code=500, detail="reindex failed")

    resp = IndexDocumentResponse(**raw)
    logger.info("POST /documents/{document_id}/reindex (done) document_id='%s' status=%s records=%d stale=%d",
                document_id, resp.status, len(resp.record_ids), len(resp.deleted_ids))
    return resp

@router.delete("/{document_id}/vectors", response_model=DeleteVectorsResponse)
def delete_document_vectors(
    document_id: str,
    req: Optional[DeleteVectorsRequest] = Body(None),
    svc: DocDocumentService = Depends(get_document_service),
) -> DeleteVectorsResponse:
    document_id = (document_id or "").strip()
    record_ids = req.record_ids if req is not None else None
    logger.info("DELETE /documents/{document_id}/vectors (start) document_id='%s'", document_id)

    if not document_id:
        logger.warning("DELETE /documents/{document_id}/vectors -> 400 (document_id empty)")
        raise HTTPException(status_code=400, detail="document_id must not be empty")

    try:
        deleted = svc.delete_document_vectors(document_id=document_id, record_ids=record_ids)
    except Exception as e:
        logger.exception("DELETE /documents/{document_id}/vectors -> 500 document_id='%s': %s", document_id, e)
        raise HTTPException(status_code=500, detail="delete vectors failed")

    logger.info("DELETE /documents/{document_id}/vectors (done) document_id='%s' deleted=%d", document_id, deleted)
    return DeleteVectorsResponse(document_id=document_id, deleted=deleted)
