"""In-process scope filter for retrieved knowledge chunks.

This filter is the source of truth for scope eligibility, whatever the index
did at query time. It preserves input order and is idempotent.
"""

from __future__ import annotations

from support_router.models.domain import KnowledgeChunk


def chunk_in_scope(
    chunk: KnowledgeChunk,
    specialist_id: str | None = None,
    intent_id: str | None = None,
) -> bool:
    if chunk.scope_specialist_id and chunk.scope_specialist_id != specialist_id:
        return False
    if chunk.scope_intent_id and intent_id and chunk.scope_intent_id != intent_id:
        return False
    return True


def filter_by_scope(
    chunks: list[KnowledgeChunk],
    specialist_id: str | None = None,
    intent_id: str | None = None,
) -> list[KnowledgeChunk]:
    return [c for c in chunks if chunk_in_scope(c, specialist_id, intent_id)]


def rank_by_similarity(chunks: list[KnowledgeChunk]) -> list[KnowledgeChunk]:
    """Stable sort, highest similarity first; chunks without a score go last."""
    return sorted(
        chunks,
        key=lambda c: (c.similarity is None, -(c.similarity or 0.0)),
    )
