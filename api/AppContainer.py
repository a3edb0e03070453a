# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-10
# Description: AppContainer.py
# -----------------------------------------------------------------------------
from typing import Any, Optional

from chat.OpenAIChat import OpenAIChat
from config.Config import Config
from document.BlobDocTextStore import BlobDocTextStore
from document.DocTextStore import DocTextStore
from document.InMemoryDocTextStore import InMemoryDocTextStore
from embedding.DocEmbedder import DocEmbedder
from health.TestRunner import TestRunner
from services.DocContextAssembler import DocContextAssembler
from services.DocDocumentService import DocDocumentService
from services.DocHealthService import DocHealthService
from services.DocIndexService import DocIndexService
from services.DocQueryService import DocQueryService
from services.DocRetrievalService import DocRetrievalService
from utility.logging_utils import get_class_logger
from vectorstore.ChromaDocVectorIndex import ChromaDocVectorIndex
from vectorstore.DocVectorIndex import DocVectorIndex
from vectorstore.InMemoryDocVectorIndex import InMemoryDocVectorIndex


class AppContainer:
    """
    Owns heavy object instantiation and application wiring.

    Built once at process start (FastAPI lifespan); any missing configuration
    or unreachable client fails startup instead of the first request.
    External clients can be injected (tests, scripts); anything not injected
    is built from cfg.
    """

    def __init__(
        self,
        cfg: Config,
        *,
        embedder: Any = None,
        index: Optional[DocVectorIndex] = None,
        text_store: Optional[DocTextStore] = None,
        chat: Any = None,
        index_service: Optional[DocIndexService] = None,
    ) -> None:
        self.cfg = cfg
        self.logger = get_class_logger(self.__class__)
        self.logger.info("Building AppContainer: %s", cfg.summary())

        # Core infrastructure
        self.embedder = embedder if embedder is not None else DocEmbedder(cfg=cfg)
        self.index = index if index is not None else self._build_index(cfg)
        self.text_store = text_store if text_store is not None else self._build_text_store(cfg)
        self.chat = chat if chat is not None else OpenAIChat(cfg=cfg)

        # Pipeline services
        self.index_service = index_service or DocIndexService(
            embedder=self.embedder,
            index=self.index,
            expected_dimension=cfg.embed_dimension,
        )
        self.retrieval_service = DocRetrievalService(embedder=self.embedder, index=self.index)
        self.context_assembler = DocContextAssembler()

        self.query_service = DocQueryService(
            retrieval=self.retrieval_service,
            assembler=self.context_assembler,
            text_store=self.text_store,
            generator=self.chat,
        )

        self.document_service = DocDocumentService(
            text_store=self.text_store,
            index_service=self.index_service,
        )

        # Smoke tests / health
        self.test_runner = TestRunner(
            embedder=self.embedder,
            index=self.index,
            text_store=self.text_store,
            chat=self.chat,
        )
        self.health_service = DocHealthService(test_runner=self.test_runner)

    @staticmethod
    def _build_index(cfg: Config) -> DocVectorIndex:
        if cfg.vector_backend == "memory":
            return InMemoryDocVectorIndex(dimension=cfg.embed_dimension)
        return ChromaDocVectorIndex(cfg=cfg)

    @staticmethod
    def _build_text_store(cfg: Config) -> DocTextStore:
        if cfg.text_backend == "memory":
            return InMemoryDocTextStore()
        return BlobDocTextStore(cfg=cfg)
