# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-10
# Description: chat.py
# -----------------------------------------------------------------------------
import logging

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_query_service
from api.schemas.chat import ChatRequest, ChatResponse, ChatSource
from services.DocQueryService import DocQueryService
from utility.errors import EmptyInputError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])

@router.post("", response_model=ChatResponse)
def post_chat(
        req: ChatRequest,
        svc: DocQueryService = Depends(get_query_service),
) -> ChatResponse:
    question = (req.question or "").strip()
    if not question:
        raise HTTPException(status_code=400, detail="question must not be empty")

    logger.info("POST /chat (start) question_len=%d document_id=%s top_k=%d",
                len(question), req.document_id, req.settings.top_k)

    try:
        out = svc.answer(question, document_id=req.document_id, settings=req.settings)
    except EmptyInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("post_chat failed: %s", e)
        raise HTTPException(status_code=500, detail="chat failed")

    sources = [
        ChatSource(
            id=s.get("id"),
            document_id=s.get("document_id"),
            chunk_index=s.get("chunk_index"),
            score=s.get("score"),
            preview=s.get("preview") or "",
        )
        for s in out.sources
    ]

    logger.info("POST /chat (done) method=%s answer_len=%d sources=%d degraded=%s",
                out.method, len(out.answer), len(sources), out.degraded)

    return ChatResponse(
        question=out.question,
        answer=out.answer,
        method=out.method,
        document_id=out.document_id,
        sources=sources,
        degraded=out.degraded,
        settings_used=out.settings_used,
    )
