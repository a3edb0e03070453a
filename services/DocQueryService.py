# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-08
# Description: DocQueryService.py
# -----------------------------------------------------------------------------
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from config.QuerySettings import QuerySettings
from document.DocTextStore import DocTextStore
from services.DocContextAssembler import AssembledContext, DocContextAssembler
from services.DocRetrievalService import DocRetrievalService
from settings import CONTEXT_DELIMITER, DEGRADED_ANSWER_CHARS, NO_INFORMATION_MESSAGE
from utility.errors import DimensionMismatchError, EmptyQuestionError, GenerationError, QueryError
from utility.logging_utils import get_class_logger

METHOD_VECTOR = "vector"
METHOD_DIRECT = "direct"
METHOD_NONE = "none"

SYSTEM_PROMPT = (
    "You are a helpful AI assistant. Answer questions based ONLY on the provided document content.\n"
    "If the answer is not in the document, clearly state that you cannot find that information.\n"
    "Be concise and accurate. Do not make up information."
)

DEGRADED_LEAD_IN = (
    "The answer service is unavailable right now. "
    "Here is the most relevant excerpt from your documents:\n\n"
)


@dataclass
class QueryAnswer:
    question: str
    answer: str
    method: str
    document_id: Optional[str] = None
    sources: List[Dict[str, Any]] = field(default_factory=list)
    degraded: bool = False
    settings_used: Dict[str, Any] = field(default_factory=dict)


def _safe_str(x: Any) -> str:
    return "" if x is None else str(x)


class DocQueryService:
    """
    Query Service:
        - retrieves relevant chunks using DocRetrievalService
        - falls back to stored document text when retrieval is empty or fails
          (the index may not have settled yet for a fresh upload)
        - builds an instruction + context prompt
        - calls the answer generator
        - returns answer + sources + retrieval method
    """

    def __init__(
        self,
        *,
        retrieval: DocRetrievalService,
        assembler: DocContextAssembler,
        text_store: DocTextStore,
        generator: Any,
        system_prompt: str = SYSTEM_PROMPT,
        logger: logging.Logger | None = None,
    ) -> None:
        self.retrieval = retrieval
        self.assembler = assembler
        self.text_store = text_store
        self.generator = generator
        self.system_prompt = system_prompt
        self.logger = logger or get_class_logger(self.__class__)

    def answer(
        self,
        question: str,
        document_id: Optional[str] = None,
        settings: Optional[QuerySettings] = None,
    ) -> QueryAnswer:
        q = (question or "").strip()
        if not q:
            raise EmptyQuestionError("question must not be empty")

        settings = settings or QuerySettings()
        document_id = (document_id or "").strip() or None
        settings_used = settings.model_dump()
        settings_used["model"] = settings.model or getattr(self.generator, "model", None)

        self.logger.info(
            "answer: question='%s' document_id=%s settings=%s (start)",
            q[:120],
            document_id or "ALL",
            settings_used,
        )

        ctx = self._vector_context(q, document_id, settings)
        method = METHOD_VECTOR
        if ctx.is_empty:
            ctx = self._direct_context(document_id, settings)
            method = METHOD_DIRECT

        if ctx.is_empty:
            self.logger.info("answer: no vector or direct context for document_id=%s", document_id or "ALL")
            return QueryAnswer(
                question=q,
                answer=NO_INFORMATION_MESSAGE,
                method=METHOD_NONE,
                document_id=document_id,
                settings_used=settings_used,
            )

        user_prompt = f"Document Content:\n\n{ctx.context}\n\n---\n\nQuestion: {q}\n\nAnswer:"

        degraded = False
        try:
            answer = self.generator.generate(
                self.system_prompt,
                user_prompt,
                model=settings.model,
                temperature=settings.temperature,
                max_tokens=settings.max_tokens,
            )
        except GenerationError as e:
            self.logger.error("answer: generation failed, returning excerpt: %s", e)
            answer = DEGRADED_LEAD_IN + ctx.context[:DEGRADED_ANSWER_CHARS].strip()
            degraded = True

        self.logger.info(
            "answer: method=%s sources=%d answer_chars=%d degraded=%s (done)",
            method,
            len(ctx.sources),
            len(answer),
            degraded,
        )
        return QueryAnswer(
            question=q,
            answer=answer,
            method=method,
            document_id=document_id,
            sources=ctx.sources,
            degraded=degraded,
            settings_used=settings_used,
        )

    def _vector_context(self, question: str, document_id: Optional[str], settings: QuerySettings) -> AssembledContext:
        try:
            results = self.retrieval.query(question, document_id=document_id, top_k=settings.top_k)
        except (QueryError, DimensionMismatchError) as e:
            self.logger.warning("Vector search failed, falling back to direct text: %s", e)
            results = []

        if results:
            self.logger.info("Found %d relevant chunks via vector search", len(results))
        return self.assembler.assemble(results, settings)

    def _direct_context(self, document_id: Optional[str], settings: QuerySettings) -> AssembledContext:
        try:
            if document_id:
                text = self.text_store.get_text(document_id)
                ctx = self.assembler.from_direct_text(text, settings, document_id=document_id)
            else:
                ctx = self._combined_direct_context(settings)
        except Exception as e:
            self.logger.error("Direct text fallback failed: %s", e, exc_info=True)
            return AssembledContext(context="", budget=settings.context_budget)

        if not ctx.is_empty:
            self.logger.info("Using direct text content (%d chars)", len(ctx.context))
        return ctx

    def _combined_direct_context(self, settings: QuerySettings) -> AssembledContext:
        parts: List[str] = []
        budget = settings.context_budget
        total = 0
        for doc_id in self.text_store.list_document_ids():
            text = _safe_str(self.text_store.get_text(doc_id))
            if not text.strip():
                continue
            parts.append(f"[{doc_id}]\n{text}")
            total += len(parts[-1]) + len(CONTEXT_DELIMITER)
            if total >= budget:
                break

        combined = CONTEXT_DELIMITER.join(parts)
        return self.assembler.from_direct_text(combined, settings)
