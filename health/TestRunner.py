# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-09
# Description: TestRunner
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Optional

from settings import HEALTH_TIMEOUT_SECONDS
from utility.logging_utils import get_class_logger
from utility.timeouts import call_with_timeout
from vectorstore.DocVectorIndex import DocVectorIndex


class TestRunner:
    """
    Orchestrates smoke tests against the injected clients and reports a consolidated result.

    Tests included:
      - embedding    (embed a probe string, check dimension)
      - vector_index (stats + dimension agreement with the embedder)
      - text_store   (list documents)
      - chat         (tiny completion, only when run_chat=True)

    Every probe is bounded by timeout_s; a timeout counts as a failure.
    """

    # not a pytest test class
    __test__ = False

    def __init__(
        self,
        *,
        embedder: Any,
        index: DocVectorIndex,
        text_store: Any = None,
        chat: Any = None,
        timeout_s: float = HEALTH_TIMEOUT_SECONDS,
        logger: Optional[logging.Logger] = None,
    ):
        self.embedder = embedder
        self.index = index
        self.text_store = text_store
        self.chat = chat
        self.timeout_s = timeout_s
        self.logger = logger or get_class_logger(self.__class__)

    # -------------------------------------------------------------------------
    def check_embedding(self) -> bool:
        vector = call_with_timeout(self.embedder.embed, self.timeout_s, "health check probe")
        dim = len(vector)
        expected = getattr(self.embedder, "dimension", None)
        if expected is not None and dim != expected:
            self.logger.warning("Embedding dimension mismatch: expected %d, got %d.", expected, dim)
            return False
        self.logger.info("Embeddings working, dim=%d", dim)
        return True

    def check_vector_index(self) -> bool:
        stats = call_with_timeout(self.index.stats, self.timeout_s)
        self.logger.info("Vector index working: records=%d dimension=%d", stats.record_count, stats.dimension)
        expected = getattr(self.embedder, "dimension", None)
        if expected is not None and stats.dimension != expected:
            self.logger.critical(
                "Index dimension %d does not match embedding dimension %d", stats.dimension, expected
            )
            return False
        return True

    def check_text_store(self) -> bool:
        ids = call_with_timeout(self.text_store.list_document_ids, self.timeout_s)
        self.logger.info("Text store working: documents=%d", len(ids))
        return True

    def check_chat(self) -> bool:
        return bool(self.chat.healthcheck(timeout_s=self.timeout_s))

    # -------------------------------------------------------------------------
    def run_liveness(self) -> bool:
        """Embed + index stats only."""
        return self._run("embedding", self.check_embedding) and self._run("vector_index", self.check_vector_index)

    def run_all(self, run_chat: bool = False) -> Dict[str, bool]:
        """
        Run all configured smoke tests.

        :param run_chat: If True, also runs a (billable) chat completion probe.
        :return: Dict mapping test names to True/False.
        """
        self.logger.info("Starting smoke test suite (run_chat=%s)", run_chat)

        results: Dict[str, bool] = {
            "embedding_health": self._run("embedding", self.check_embedding),
            "vector_index_health": self._run("vector_index", self.check_vector_index),
        }
        if self.text_store is not None:
            results["text_store_health"] = self._run("text_store", self.check_text_store)
        if run_chat and self.chat is not None:
            results["chat_health"] = self._run("chat", self.check_chat)

        self._log_summary(results)
        return results

    # -------------------------------------------------------------------------
    def _run(self, name: str, check: Callable[[], bool]) -> bool:
        start = time.time()
        try:
            ok = check()
        except Exception as e:
            self.logger.error("%s health check raised: %s", name, e)
            ok = False
        elapsed_ms = (time.time() - start) * 1000.0
        if ok:
            self.logger.info("%s: PASS (%.1f ms)", name, elapsed_ms)
        else:
            self.logger.error("%s: FAIL (%.1f ms)", name, elapsed_ms)
        return ok

    def _log_summary(self, results: Dict[str, bool]) -> None:
        total = len(results)
        passed = sum(1 for v in results.values() if v)
        failed = total - passed

        self.logger.info("Smoke test summary: %d total, %d passed, %d failed", total, passed, failed)

        for name, ok in results.items():
            status = "PASS" if ok else "FAIL"
            self.logger.info("  %s: %s", name, status)
