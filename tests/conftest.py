# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-11
# Description: conftest.py
# -----------------------------------------------------------------------------

import hashlib
import re
import sys
from pathlib import Path
from typing import Dict, List, Optional

import numpy as np
import pytest

# add project root to sys.path
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from config.Config import Config  # noqa: E402
from document.InMemoryDocTextStore import InMemoryDocTextStore  # noqa: E402
from services.DocIndexService import DocIndexService  # noqa: E402
from utility.errors import EmptyInputError, GenerationError  # noqa: E402
from vectorstore.InMemoryDocVectorIndex import InMemoryDocVectorIndex  # noqa: E402

TEST_DIMENSION = 256

_TOKEN = re.compile(r"\w+")


class FakeEmbedder:
    """
    Deterministic bag-of-words embedder: each token hashes to one bucket.
    Texts sharing words score high against each other, unrelated texts near 0.
    """

    def __init__(self, dimension: int = TEST_DIMENSION, model: str = "fake-embed"):
        self.dimension = dimension
        self.model = model
        self.calls: List[str] = []

    def embed(self, text: str) -> np.ndarray:
        if not text or not text.strip():
            raise EmptyInputError("Cannot embed empty text")
        self.calls.append(text)
        v = np.zeros(self.dimension, dtype=np.float32)
        for token in _TOKEN.findall(text.lower()):
            bucket = int(hashlib.md5(token.encode("utf-8")).hexdigest(), 16) % self.dimension
            v[bucket] += 1.0
        norm = np.linalg.norm(v)
        return v / norm if norm > 0 else v

    def embed_batch(self, texts):
        return np.vstack([self.embed(t) for t in texts])


class FailingEmbedder(FakeEmbedder):
    def embed(self, text: str) -> np.ndarray:
        raise RuntimeError("embedding provider unavailable")


class FakeGenerator:
    """Stands in for OpenAIChat.generate; records every prompt."""

    def __init__(self, answer: str = "Steam sterilize at 134C for 3 minutes.", fail: bool = False):
        self.answer = answer
        self.fail = fail
        self.model = "fake-chat"
        self.calls: List[Dict[str, object]] = []

    def generate(self, system_instruction, user_prompt, *, model=None, temperature=0.7, max_tokens=2000):
        self.calls.append({
            "system": system_instruction,
            "prompt": user_prompt,
            "model": model,
            "temperature": temperature,
            "max_tokens": max_tokens,
        })
        if self.fail:
            raise GenerationError("model endpoint timed out")
        return self.answer

    def healthcheck(self, timeout_s: Optional[float] = None) -> bool:
        return not self.fail


class BrokenQueryIndex(InMemoryDocVectorIndex):
    """Accepts writes, fails every query (provider outage at read time)."""

    def query(self, vector, top_k, where=None):
        raise ConnectionError("vector index unreachable")


class FlakyDeleteIndex(InMemoryDocVectorIndex):
    """Accepts writes and queries, fails every delete."""

    def delete(self, ids):
        raise ConnectionError("index delete outage")


def no_sleep(_seconds: float) -> None:
    return None


@pytest.fixture
def embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture
def index() -> InMemoryDocVectorIndex:
    return InMemoryDocVectorIndex(dimension=TEST_DIMENSION)


@pytest.fixture
def text_store() -> InMemoryDocTextStore:
    return InMemoryDocTextStore()


@pytest.fixture
def generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture
def index_service(embedder, index) -> DocIndexService:
    return DocIndexService(
        embedder=embedder,
        index=index,
        settle_seconds=0.0,
        final_settle_seconds=0.0,
        sleep=no_sleep,
    )


@pytest.fixture
def memory_config() -> Config:
    return Config(
        openai_api_key="test-key",
        embed_api_key="test-key",
        embed_dimension=TEST_DIMENSION,
        vector_backend="memory",
        text_backend="memory",
    )


STERILIZATION_TEXT = (
    "Cleaning instructions. Rinse the instrument under running water after every use.\n\n"
    "Sterilization instructions. Steam sterilize the instrument at 134C for 3 minutes "
    "in a validated autoclave. Do not exceed 137C.\n\n"
    "Storage instructions. Store the instrument dry at room temperature in its tray."
)

BATTERY_TEXT = (
    "Battery care. Charge the battery pack fully before first use. "
    "Replace the battery pack when the charge indicator blinks red."
)
