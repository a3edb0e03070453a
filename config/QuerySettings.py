# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-04
# Description: QuerySettings
# -----------------------------------------------------------------------------
from typing import Optional

from pydantic import BaseModel, Field

from settings import QUERY_DEFAULTS


class QuerySettings(BaseModel):
    """
    Per-request retrieval and generation settings.
    Out-of-range values are rejected (ValidationError), never clamped.
    """

    top_k: int = Field(QUERY_DEFAULTS["top_k"], ge=1, le=10)
    chunk_size: int = Field(QUERY_DEFAULTS["chunk_size"], ge=500, le=2000)

    # None -> Config.openai_chat_model
    model: Optional[str] = Field(None, min_length=1)
    temperature: float = Field(QUERY_DEFAULTS["temperature"], ge=0.0, le=1.0)
    max_tokens: int = Field(QUERY_DEFAULTS["max_tokens"], ge=500, le=4000)

    @property
    def context_budget(self) -> int:
        """Maximum number of context characters sent to the model."""
        return self.chunk_size * self.top_k
