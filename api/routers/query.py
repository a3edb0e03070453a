# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-10
# Description: query router
# -----------------------------------------------------------------------------
import logging

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_retrieval_service
from api.schemas.query import QueryRequest, QueryResponse, QueryHit
from services.DocRetrievalService import DocRetrievalService
from utility.errors import DimensionMismatchError, EmptyInputError, QueryError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/query", tags=["query"])


@router.post("", response_model=QueryResponse)
def post_query(
    req: QueryRequest,
    svc: DocRetrievalService = Depends(get_retrieval_service),
) -> QueryResponse:
    question = (req.question or "").strip()
    if not question:
        raise HTTPException(status_code=400, detail="question must not be empty")

    logger.info("POST /query (start) question_len=%d document_id=%s top_k=%d",
                len(question), req.document_id, req.top_k)

    try:
        matches = svc.query(question, document_id=req.document_id, top_k=req.top_k)
    except EmptyInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (QueryError, DimensionMismatchError) as e:
        logger.error("POST /query -> 503: %s", e)
        raise HTTPException(status_code=503, detail="vector retrieval unavailable")
    except Exception as e:
        logger.exception("Query failed: %s", e)
        raise HTTPException(status_code=500, detail="query failed")

    hits = [
        QueryHit(
            id=m.id,
            score=m.score,
            document_id=m.document_id,
            chunk_index=m.chunk_index,
            text=m.text or "",
            metadata=dict(m.metadata),
        )
        for m in matches
    ]

    logger.info("POST /query (done) hits=%d", len(hits))
    return QueryResponse(
        question=question,
        document_id=req.document_id,
        top_k=req.top_k,
        results=hits,
    )
