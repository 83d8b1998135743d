"""Condenses ranked knowledge chunks into a short list of policy rules."""

from __future__ import annotations

from support_router.generation.prompt_templates import (
    SUMMARIZE_PROMPT,
    SUMMARIZE_SYSTEM,
    format_snippets,
    format_verbatim_rules,
)
from support_router.models.domain import KnowledgeChunk, KnowledgeContext
from support_router.observability.logger import get_logger
from support_router.protocols.llm import GenerationService
from support_router.retrieval.scope_filter import rank_by_similarity

logger = get_logger("summarizer")


class SnippetSummarizer:
    def __init__(
        self,
        llm: GenerationService,
        max_chunks: int = 5,
        temperature: float = 0.2,
    ) -> None:
        self._llm = llm
        self._max_chunks = max_chunks
        self._temperature = temperature

    async def summarize(self, chunks: list[KnowledgeChunk], query: str) -> KnowledgeContext:
        if not chunks:
            return KnowledgeContext(summary="", used_chunks=[])

        used = rank_by_similarity(chunks)[: self._max_chunks]
        messages = [
            {"role": "system", "content": SUMMARIZE_SYSTEM},
            {
                "role": "user",
                "content": SUMMARIZE_PROMPT.format(query=query, snippets=format_snippets(used)),
            },
        ]
        try:
            summary = await self._llm.complete(messages, temperature=self._temperature)
        except Exception as e:
            logger.warning("summarize_failed", error=str(e), chunks=len(used))
            summary = ""

        if not summary.strip():
            summary = format_verbatim_rules(used)
            logger.info("summarize_verbatim_fallback", chunks=len(used))

        return KnowledgeContext(summary=summary.strip(), used_chunks=used)
