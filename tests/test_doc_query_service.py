# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-11
# Description: test_doc_query_service.py
# -----------------------------------------------------------------------------
import threading
from types import SimpleNamespace

import pytest

from chat.OpenAIChat import OpenAIChat
from conftest import BATTERY_TEXT, STERILIZATION_TEXT, BrokenQueryIndex, FakeGenerator, TEST_DIMENSION
from config.QuerySettings import QuerySettings
from services.DocContextAssembler import DocContextAssembler
from services.DocQueryService import (
    DEGRADED_LEAD_IN,
    METHOD_DIRECT,
    METHOD_NONE,
    METHOD_VECTOR,
    DocQueryService,
)
from services.DocRetrievalService import DocRetrievalService
from settings import NO_INFORMATION_MESSAGE
from utility.errors import EmptyQuestionError
from utility.timeouts import TimeoutRunner
from vectorstore.InMemoryDocVectorIndex import InMemoryDocVectorIndex


def _query_service(embedder, index, text_store, generator) -> DocQueryService:
    return DocQueryService(
        retrieval=DocRetrievalService(embedder=embedder, index=index),
        assembler=DocContextAssembler(),
        text_store=text_store,
        generator=generator,
    )


def test_vector_path_answers_with_sources(embedder, index, index_service, text_store, generator):
    index_service.index_document("ifu-steri", STERILIZATION_TEXT)
    svc = _query_service(embedder, index, text_store, generator)

    out = svc.answer("How do I steam sterilize the instrument?", settings=QuerySettings(top_k=1))

    assert out.method == METHOD_VECTOR
    assert out.answer == generator.answer
    assert not out.degraded
    assert out.sources[0]["id"] == "ifu-steri_chunk_0"

    call = generator.calls[0]
    assert "134C" in call["prompt"]
    assert call["prompt"].endswith("Question: How do I steam sterilize the instrument?\n\nAnswer:")
    assert "ONLY on the provided document content" in call["system"]


def test_settings_are_forwarded_to_generator(embedder, index, index_service, text_store, generator):
    index_service.index_document("ifu-battery", BATTERY_TEXT)
    svc = _query_service(embedder, index, text_store, generator)

    settings = QuerySettings(top_k=2, temperature=0.1, max_tokens=800, model="llama-3.1-8b-instant")
    out = svc.answer("battery charge", settings=settings)

    call = generator.calls[0]
    assert call["temperature"] == 0.1
    assert call["max_tokens"] == 800
    assert call["model"] == "llama-3.1-8b-instant"
    assert out.settings_used["model"] == "llama-3.1-8b-instant"


def test_settings_used_reports_default_model(embedder, index, index_service, text_store, generator):
    index_service.index_document("ifu-battery", BATTERY_TEXT)
    out = _query_service(embedder, index, text_store, generator).answer("battery")

    assert out.settings_used["model"] == "fake-chat"
    assert out.settings_used["top_k"] == 3


def test_empty_index_falls_back_to_stored_text(embedder, index, text_store, generator):
    # freshly uploaded: text stored, vectors not visible yet
    text_store.put_text("ifu-steri", STERILIZATION_TEXT)
    svc = _query_service(embedder, index, text_store, generator)

    out = svc.answer("sterilization temperature?", document_id="ifu-steri")

    assert out.method == METHOD_DIRECT
    assert out.document_id == "ifu-steri"
    assert "134C" in generator.calls[0]["prompt"]
    assert out.sources[0]["document_id"] == "ifu-steri"


def test_index_outage_falls_back_to_stored_text(embedder, text_store, generator):
    text_store.put_text("ifu-battery", BATTERY_TEXT)
    svc = _query_service(embedder, BrokenQueryIndex(TEST_DIMENSION), text_store, generator)

    out = svc.answer("battery?", document_id="ifu-battery")

    assert out.method == METHOD_DIRECT
    assert out.answer == generator.answer


def test_fallback_without_document_combines_all_documents(embedder, index, text_store, generator):
    text_store.put_text("ifu-steri", STERILIZATION_TEXT)
    text_store.put_text("ifu-battery", BATTERY_TEXT)
    svc = _query_service(embedder, index, text_store, generator)

    out = svc.answer("what does the manual say?")

    prompt = generator.calls[0]["prompt"]
    assert out.method == METHOD_DIRECT
    assert "[ifu-steri]" in prompt
    assert "[ifu-battery]" in prompt


def test_no_content_anywhere_skips_generation(embedder, index, text_store, generator):
    out = _query_service(embedder, index, text_store, generator).answer("anything?", document_id="missing")

    assert out.method == METHOD_NONE
    assert out.answer == NO_INFORMATION_MESSAGE
    assert out.sources == []
    assert generator.calls == []


def test_generation_failure_returns_degraded_excerpt(embedder, index, index_service, text_store):
    index_service.index_document("ifu-steri", STERILIZATION_TEXT)
    failing = FakeGenerator(fail=True)

    out = _query_service(embedder, index, text_store, failing).answer("steam sterilize")

    assert out.degraded
    assert out.method == METHOD_VECTOR
    assert out.answer.startswith(DEGRADED_LEAD_IN)
    assert "Cleaning instructions." in out.answer
    assert len(out.answer) <= len(DEGRADED_LEAD_IN) + 500


@pytest.mark.parametrize("question", ["", "  \n"])
def test_empty_question_rejected(embedder, index, text_store, generator, question):
    with pytest.raises(EmptyQuestionError):
        _query_service(embedder, index, text_store, generator).answer(question)
    assert generator.calls == []


class SlowQueryIndex(InMemoryDocVectorIndex):
    """Vector queries hang past the client timeout."""

    def __init__(self, dimension: int, release: threading.Event):
        super().__init__(dimension)
        self.release = release
        self.runner = TimeoutRunner(name="test-vector", max_workers=1)

    def query(self, vector, top_k, where=None):
        return self.runner.call(self.release.wait, 0.05)


class _HangingCompletions:
    def __init__(self, release: threading.Event):
        self.release = release

    def create(self, **params):
        self.release.wait(5)
        raise ConnectionError("endpoint never answered")


@pytest.fixture
def release():
    event = threading.Event()
    yield event
    event.set()


def test_vector_query_timeout_falls_back_to_stored_text(embedder, text_store, generator, release):
    text_store.put_text("ifu-battery", BATTERY_TEXT)
    svc = _query_service(embedder, SlowQueryIndex(TEST_DIMENSION, release), text_store, generator)

    out = svc.answer("battery?", document_id="ifu-battery")

    assert out.method == METHOD_DIRECT
    assert out.answer == generator.answer
    assert not out.degraded


def test_generation_timeout_returns_degraded_answer(embedder, index, index_service, text_store, memory_config, release):
    index_service.index_document("ifu-steri", STERILIZATION_TEXT)
    chat = OpenAIChat(cfg=memory_config, timeout_s=0.05)
    chat.client = SimpleNamespace(chat=SimpleNamespace(completions=_HangingCompletions(release)))

    out = _query_service(embedder, index, text_store, chat).answer("steam sterilize")

    assert out.degraded
    assert out.method == METHOD_VECTOR
    assert out.answer.startswith(DEGRADED_LEAD_IN)
