# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-03
# Description: DocEmbedder
# -----------------------------------------------------------------------------
import time
from typing import List, Sequence

import numpy as np
from openai import AzureOpenAI, OpenAI

from config.Config import Config
from settings import EMBED_TIMEOUT_SECONDS
from utility.errors import DimensionMismatchError, EmptyInputError
from utility.logging_utils import get_class_logger


class DocEmbedder:
    """
    Text -> fixed-dimension vectors through an OpenAI-compatible embeddings API.

    Uses Azure OpenAI when cfg.openai_azure_endpoint is set (the model name is then
    the deployment name), OpenAI direct otherwise. The configured dimension is
    requested from text-embedding-3 models and checked on every response
    (a mismatch raises DimensionMismatchError and is not retried).
    """

    def __init__(
            self,
            cfg: Config,
            *,
            batch_size: int = 64,
            normalize: bool = True,
            max_retries: int = 3,
            timeout_s: float = EMBED_TIMEOUT_SECONDS,
            logger=None,
    ):
        self.cfg = cfg
        self.batch_size = batch_size
        self.normalize = normalize
        self.max_retries = max_retries
        self.timeout_s = timeout_s
        self.logger = logger or get_class_logger(self.__class__)

        self.model = cfg.embed_model
        self.dimension = cfg.embed_dimension

        if cfg.openai_azure_endpoint:
            self.client = AzureOpenAI(
                api_key=cfg.embed_api_key,
                azure_endpoint=cfg.openai_azure_endpoint,
                api_version=cfg.openai_azure_api_version,
                timeout=timeout_s,
                max_retries=0,
            )
            provider = "azure"
        else:
            self.client = OpenAI(
                api_key=cfg.embed_api_key,
                base_url=cfg.openai_base_url or None,
                timeout=timeout_s,
                max_retries=0,
            )
            provider = "openai"

        self.logger.info(
            "DocEmbedder initialised (provider=%s, model=%s, dimension=%d)",
            provider,
            self.model,
            self.dimension,
        )

    def _create(self, texts: List[str]):
        params = {"model": self.model, "input": texts}
        # Only text-embedding-3* supports shortening; older models have a fixed size
        if self.model.startswith("text-embedding-3"):
            params["dimensions"] = self.dimension
        return self.client.embeddings.create(**params)

    def _embed_batch(self, texts: List[str]) -> np.ndarray:
        delay = 0.8
        for attempt in range(1, self.max_retries + 1):
            try:
                resp = self._create(texts)
                # The API may return items out of order; index is authoritative
                data = sorted(resp.data, key=lambda d: d.index)
                arr = np.asarray([d.embedding for d in data], dtype=np.float32)

                if arr.shape[0] != len(texts):
                    raise RuntimeError(f"Embedding count mismatch: {arr.shape[0]} != {len(texts)}")
                if arr.shape[1] != self.dimension:
                    raise DimensionMismatchError(self.dimension, int(arr.shape[1]), f"model {self.model}")

                # Normalize vectors (cosine-friendly)
                if self.normalize:
                    norms = np.linalg.norm(arr, axis=1, keepdims=True) + 1e-12
                    arr = arr / norms
                return arr

            except DimensionMismatchError as e:
                # wrong model or deployment; retrying cannot fix it
                self.logger.critical("%s", e)
                raise
            except Exception as e:
                self.logger.warning(
                    "Embedding batch failed (attempt %d/%d): %s", attempt, self.max_retries, e
                )
                if attempt == self.max_retries:
                    raise
                time.sleep(delay)
                delay *= 1.7  # backoff

        # Unreachable and include for type checkers
        return np.empty((0, self.dimension), dtype=np.float32)

    def embed(self, text: str) -> np.ndarray:
        if not text or not text.strip():
            raise EmptyInputError("Cannot embed empty text")
        return self._embed_batch([text])[0]

    def embed_batch(self, texts: Sequence[str]) -> np.ndarray:
        """Order-preserving; output row i is the embedding of texts[i]."""
        items = list(texts)
        if not items:
            return np.empty((0, self.dimension), dtype=np.float32)
        if any(not t or not t.strip() for t in items):
            raise EmptyInputError("Cannot embed empty text in batch")

        self.logger.info("Embedding %d texts (batch=%d)", len(items), self.batch_size)
        parts = [
            self._embed_batch(items[i:i + self.batch_size])
            for i in range(0, len(items), self.batch_size)
        ]
        return np.vstack(parts)
