# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-11
# Description: test_health.py
# -----------------------------------------------------------------------------
import time

from conftest import FailingEmbedder, FakeEmbedder, FakeGenerator
from health.TestRunner import TestRunner
from services.DocHealthService import DocHealthService


def test_deep_health_all_components_ok(embedder, index, text_store, generator):
    runner = TestRunner(embedder=embedder, index=index, text_store=text_store, chat=generator)
    result = DocHealthService(test_runner=runner).deep_health(run_chat=True)

    assert result.status == "ok"
    assert result.results == {
        "embedding_health": True,
        "vector_index_health": True,
        "text_store_health": True,
        "chat_health": True,
    }
    assert result.summary.failed == 0


def test_chat_probe_is_opt_in(embedder, index, text_store, generator):
    results = TestRunner(embedder=embedder, index=index, text_store=text_store, chat=generator).run_all()
    assert "chat_health" not in results


def test_failing_embedder_reported(index, text_store):
    runner = TestRunner(embedder=FailingEmbedder(), index=index, text_store=text_store)
    svc = DocHealthService(test_runner=runner)

    result = svc.deep_health()

    assert result.status == "error"
    assert result.results["embedding_health"] is False
    assert result.results["vector_index_health"] is True
    assert svc.health_check() is False


def test_dimension_disagreement_fails_index_check(index):
    runner = TestRunner(embedder=FakeEmbedder(dimension=64), index=index)
    assert runner.check_vector_index() is False


def test_slow_probe_times_out(index):
    class SlowEmbedder(FakeEmbedder):
        def embed(self, text):
            time.sleep(0.5)
            return super().embed(text)

    runner = TestRunner(embedder=SlowEmbedder(), index=index, timeout_s=0.05)
    assert runner.run_liveness() is False


def test_failing_chat_probe(embedder, index):
    runner = TestRunner(embedder=embedder, index=index, chat=FakeGenerator(fail=True))
    assert runner.run_all(run_chat=True)["chat_health"] is False
