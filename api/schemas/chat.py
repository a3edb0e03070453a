# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-10
# Description: api/schemas/chat.py
# -----------------------------------------------------------------------------
from __future__ import annotations

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from config.QuerySettings import QuerySettings


class ChatRequest(BaseModel):
    question: str
    document_id: Optional[str] = None

    # Retrieval + model controls, validated by QuerySettings ranges
    settings: QuerySettings = Field(default_factory=QuerySettings)


class ChatSource(BaseModel):
    id: Optional[str] = None
    document_id: Optional[str] = None
    chunk_index: Optional[int] = None
    score: Optional[float] = None
    preview: str = ""


class ChatResponse(BaseModel):
    question: str
    answer: str
    # "vector" | "direct" | "none"
    method: str
    document_id: Optional[str] = None
    sources: List[ChatSource] = Field(default_factory=list)
    degraded: bool = False
    settings_used: Dict[str, Any] = Field(default_factory=dict)
