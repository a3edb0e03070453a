# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-10
# Description: query.py
# -----------------------------------------------------------------------------
from typing import Optional, Any, Dict, List

from pydantic import Field, BaseModel

class QueryRequest(BaseModel):
    question: str
    document_id: Optional[str] = None
    top_k: int = Field(3, ge=1, le=10)

class QueryHit(BaseModel):
    id: str
    score: float
    document_id: Optional[str] = None
    chunk_index: Optional[int] = None
    text: str
    metadata: Dict[str, Any] = Field(default_factory=dict)

class QueryResponse(BaseModel):
    question: str
    document_id: Optional[str] = None
    top_k: int
    results: List[QueryHit]
