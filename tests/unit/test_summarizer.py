"""Tests for knowledge snippet summarization."""

from __future__ import annotations

from support_router.models.domain import KnowledgeChunk
from support_router.retrieval.summarizer import SnippetSummarizer


def _chunks(n):
    return [
        KnowledgeChunk(
            id=f"kc-{i}",
            title=f"Rule {i}",
            content=f"Policy text {i}.",
            similarity=i / 10,
        )
        for i in range(n)
    ]


async def test_empty_input_makes_no_call(scripted_llm):
    llm = scripted_llm()
    context = await SnippetSummarizer(llm).summarize([], "where is my refund")

    assert context.summary == ""
    assert context.used_chunks == []
    assert llm.calls == []


async def test_uses_at_most_five_highest_ranked_chunks(scripted_llm):
    llm = scripted_llm(summarize="- bullet")
    context = await SnippetSummarizer(llm).summarize(_chunks(7), "refund")

    assert [c.id for c in context.used_chunks] == ["kc-6", "kc-5", "kc-4", "kc-3", "kc-2"]
    prompt = llm.calls_of("summarize")[0]["messages"][1]["content"]
    assert "Rule 6" in prompt
    assert "Rule 1" not in prompt
    assert llm.calls_of("summarize")[0]["temperature"] == 0.2


async def test_failed_summary_falls_back_to_verbatim_rules(scripted_llm):
    llm = scripted_llm(summarize=RuntimeError("timeout"))
    chunks = [
        KnowledgeChunk(id="a", title="Returns", content="Return within 30 days.", similarity=0.9),
        KnowledgeChunk(id="b", title="", content="Keep the receipt.", similarity=0.5),
    ]
    context = await SnippetSummarizer(llm).summarize(chunks, "can I return this")

    assert context.summary == "- Returns: Return within 30 days.\n- rule: Keep the receipt."
    assert [c.id for c in context.used_chunks] == ["a", "b"]


async def test_blank_summary_falls_back_to_verbatim_rules(scripted_llm):
    llm = scripted_llm(summarize="   ")
    context = await SnippetSummarizer(llm).summarize(_chunks(1), "refund")
    assert context.summary == "- Rule 0: Policy text 0."


async def test_eight_retrieved_chunks_keep_top_five_by_similarity(scripted_llm):
    similarities = [0.42, 0.91, 0.13, 0.77, 0.88, 0.35, 0.64, 0.59]
    chunks = [
        KnowledgeChunk(id=f"kc-{i}", title=f"Rule {i}", content="text", similarity=s)
        for i, s in enumerate(similarities)
    ]
    context = await SnippetSummarizer(scripted_llm()).summarize(chunks, "where is my parcel")

    assert len(context.used_chunks) == 5
    assert [c.similarity for c in context.used_chunks] == [0.91, 0.88, 0.77, 0.64, 0.59]
