# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-12
# Description: test_embedder_integration.py
# -----------------------------------------------------------------------------
import os

import numpy as np
import pytest

from config.Config import Config
from embedding.DocEmbedder import DocEmbedder
from similarity.SimilarityScorer import cosine_similarity


def _embed_cfg_or_skip() -> Config:
    api_key = os.getenv("EMBED_API_KEY") or os.getenv("OPENAI_API_KEY")
    if not api_key:
        pytest.skip("Missing env vars for embeddings: EMBED_API_KEY / OPENAI_API_KEY")

    return Config(
        openai_api_key=api_key,
        embed_api_key=api_key,
        embed_model=os.getenv("EMBED_MODEL") or "text-embedding-3-small",
        embed_dimension=int(os.getenv("EMBED_DIMENSION") or 384),
        openai_azure_endpoint=os.getenv("AZURE_OPENAI_ENDPOINT", ""),
        vector_backend="memory",
        text_backend="memory",
    )


@pytest.mark.integration
def test_embed_returns_configured_dimension():
    cfg = _embed_cfg_or_skip()
    embedder = DocEmbedder(cfg=cfg)

    v = embedder.embed("Steam sterilize the instrument at 134C.")

    assert v.shape == (cfg.embed_dimension,)
    assert np.linalg.norm(v) == pytest.approx(1.0, abs=1e-3)


@pytest.mark.integration
def test_embed_batch_preserves_order():
    embedder = DocEmbedder(cfg=_embed_cfg_or_skip(), batch_size=2)
    texts = [
        "Steam sterilize the instrument at 134C.",
        "Charge the battery pack before first use.",
        "Store the instrument dry at room temperature.",
    ]

    batch = embedder.embed_batch(texts)

    assert batch.shape[0] == 3
    for i, text in enumerate(texts):
        assert cosine_similarity(batch[i], embedder.embed(text)) > 0.99
