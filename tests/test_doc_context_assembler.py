# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-11
# Description: test_doc_context_assembler.py
# -----------------------------------------------------------------------------
from config.QuerySettings import QuerySettings
from services.DocContextAssembler import DocContextAssembler
from settings import CONTEXT_DELIMITER
from vectorstore.DocVectorIndex import VectorMatch


def _match(doc_id: str, index: int, text: str, score: float) -> VectorMatch:
    return VectorMatch(
        id=f"{doc_id}_chunk_{index}",
        score=score,
        metadata={"document_id": doc_id, "chunk_index": index, "text": text},
    )


def test_joins_results_in_order_with_delimiter():
    results = [_match("a", 0, "first chunk", 0.9), _match("a", 1, "second chunk", 0.8)]
    ctx = DocContextAssembler().assemble(results, QuerySettings(top_k=2, chunk_size=500))

    assert ctx.context == f"first chunk{CONTEXT_DELIMITER}second chunk"
    assert not ctx.truncated
    assert [s["id"] for s in ctx.sources] == ["a_chunk_0", "a_chunk_1"]
    assert ctx.sources[0]["score"] == 0.9


def test_hard_truncates_to_budget_and_cites_only_included_chunks():
    results = [_match("a", i, chr(ord("a") + i) * 400, 1.0 - i / 10) for i in range(3)]
    settings = QuerySettings(top_k=1, chunk_size=500)

    ctx = DocContextAssembler().assemble(results, settings)

    assert ctx.budget == 500
    assert len(ctx.context) == 500
    assert ctx.truncated
    # second chunk starts at 400 + len(delimiter), third one past the budget
    assert [s["chunk_index"] for s in ctx.sources] == [0, 1]


def test_budget_is_chunk_size_times_top_k():
    assert QuerySettings(top_k=4, chunk_size=750).context_budget == 3000


def test_source_preview_is_shortened():
    ctx = DocContextAssembler(preview_chars=300).assemble(
        [_match("a", 0, "z" * 1000, 0.5)], QuerySettings(top_k=1, chunk_size=1000)
    )
    preview = ctx.sources[0]["preview"]
    assert preview == "z" * 300 + "..."


def test_empty_results_give_empty_context():
    ctx = DocContextAssembler().assemble([], QuerySettings())
    assert ctx.is_empty
    assert ctx.sources == []


def test_direct_text_truncated_to_budget():
    settings = QuerySettings(top_k=1, chunk_size=500)
    ctx = DocContextAssembler().from_direct_text("q" * 1200, settings, document_id="doc-9")

    assert ctx.context == "q" * 500
    assert ctx.truncated
    assert ctx.sources[0]["document_id"] == "doc-9"
    assert ctx.sources[0]["id"] is None


def test_direct_text_blank_is_empty():
    assert DocContextAssembler().from_direct_text("   ", QuerySettings()).is_empty
    assert DocContextAssembler().from_direct_text(None, QuerySettings()).is_empty
