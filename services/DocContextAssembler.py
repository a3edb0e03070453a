# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-07
# Description: DocContextAssembler
# -----------------------------------------------------------------------------
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from config.QuerySettings import QuerySettings
from settings import CONTEXT_DELIMITER, SOURCE_PREVIEW_CHARS
from utility.logging_utils import get_class_logger
from vectorstore.DocVectorIndex import VectorMatch


@dataclass
class AssembledContext:
    context: str
    budget: int
    sources: List[Dict[str, Any]] = field(default_factory=list)
    truncated: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.context.strip()


def _preview(text: str, n: int) -> str:
    return text[:n] + "..." if len(text) > n else text


class DocContextAssembler:
    """
    Builds the prompt context from ranked chunks.
    Budget = settings.chunk_size * settings.top_k characters, hard-truncated
    (not chunk aligned) so the prompt size is predictable.
    """

    def __init__(
        self,
        *,
        delimiter: str = CONTEXT_DELIMITER,
        preview_chars: int = SOURCE_PREVIEW_CHARS,
        logger: logging.Logger | None = None,
    ) -> None:
        self.delimiter = delimiter
        self.preview_chars = preview_chars
        self.logger = logger or get_class_logger(self.__class__)

    def assemble(self, results: Sequence[VectorMatch], settings: QuerySettings) -> AssembledContext:
        budget = settings.context_budget
        if not results:
            return AssembledContext(context="", budget=budget)

        texts = [r.text or "" for r in results]
        joined = self.delimiter.join(texts)

        truncated = len(joined) > budget
        if truncated:
            self.logger.info("Context too long (%d chars), truncating to %d", len(joined), budget)
        context = joined[:budget]

        # cite only chunks that start inside the budget
        sources: List[Dict[str, Any]] = []
        offset = 0
        for r, text in zip(results, texts):
            if offset >= len(context):
                break
            sources.append({
                "id": r.id,
                "document_id": r.document_id,
                "chunk_index": r.chunk_index,
                "score": r.score,
                "preview": _preview(text, self.preview_chars),
            })
            offset += len(text) + len(self.delimiter)

        self.logger.debug("assemble: results=%d sources=%d context_chars=%d", len(results), len(sources), len(context))
        return AssembledContext(context=context, budget=budget, sources=sources, truncated=truncated)

    def from_direct_text(
        self,
        text: Optional[str],
        settings: QuerySettings,
        *,
        document_id: Optional[str] = None,
    ) -> AssembledContext:
        """Fallback context: the leading characters of the stored document text."""
        budget = settings.context_budget
        raw = text or ""
        if not raw.strip():
            return AssembledContext(context="", budget=budget)

        context = raw[:budget]
        source = {
            "id": None,
            "document_id": document_id,
            "chunk_index": None,
            "score": None,
            "preview": _preview(context, self.preview_chars),
        }
        return AssembledContext(context=context, budget=budget, sources=[source], truncated=len(raw) > budget)
