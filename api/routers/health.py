# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-09
# Description: health.py
# -----------------------------------------------------------------------------
import logging
from fastapi import APIRouter, Depends, HTTPException, Query

from api.schemas.health import HealthResponse, DeepHealthResponse
from api.dependencies import get_health_service
from services.DocHealthService import DocHealthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
def health_check(
    svc: DocHealthService = Depends(get_health_service),
) -> HealthResponse:
    logger.info("GET /health called")
    if not svc.health_check():
        logger.warning("GET /health -> 503 (liveness checks failed)")
        raise HTTPException(status_code=503, detail="embedding or vector index unavailable")
    return HealthResponse(status="ok", message="DocQA RAG API running")


@router.get("/deep", response_model=DeepHealthResponse)
def deep_health_check(
    svc: DocHealthService = Depends(get_health_service),
    run_chat: bool = Query(False, description="Also run a chat completion round trip"),
) -> DeepHealthResponse:
    logger.info("GET /health/deep called (run_chat=%s)", run_chat)
    try:
        result = svc.deep_health(run_chat=run_chat)
        logger.info("GET /health/deep completed status=%s", result.status)
        return result
    except Exception as e:
        logger.exception("GET /health/deep failed: %s", e)
        raise HTTPException(status_code=500, detail="deep health check failed")
