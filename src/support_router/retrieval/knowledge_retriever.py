"""Knowledge retrieval: embed the query, search the index, enforce scope in-process."""

from __future__ import annotations

from support_router.exceptions import RetrievalUnavailable
from support_router.models.domain import KnowledgeChunk
from support_router.observability.logger import get_logger
from support_router.protocols.embedder import Embedder
from support_router.protocols.knowledge import KnowledgeIndex
from support_router.retrieval.scope_filter import filter_by_scope

logger = get_logger("knowledge_retriever")


class KnowledgeRetriever:
    """One logical retrieval step over any `KnowledgeIndex`.

    When the index advertises `supports_scope_filter`, specialist/intent scope
    is pushed down to it; otherwise it is over-fetched by `overfetch_factor`.
    Either way `filter_by_scope` runs on the result before truncation.
    """

    def __init__(
        self,
        embedder: Embedder,
        index: KnowledgeIndex,
        match_count: int = 5,
        overfetch_factor: int = 4,
    ) -> None:
        self._embedder = embedder
        self._index = index
        self._match_count = match_count
        self._overfetch = max(1, overfetch_factor)

    async def retrieve(
        self,
        query: str,
        specialist_id: str | None = None,
        intent_id: str | None = None,
        org_id: str | None = None,
    ) -> list[KnowledgeChunk]:
        try:
            embedding = await self._embedder.embed_query(query)
        except RetrievalUnavailable:
            raise
        except Exception as e:
            raise RetrievalUnavailable(f"Query embedding failed: {e}") from e

        pushdown = self._index.supports_scope_filter
        top_k = self._match_count if pushdown else self._match_count * self._overfetch
        try:
            candidates = await self._index.search(
                embedding,
                top_k,
                specialist_id=specialist_id if pushdown else None,
                intent_id=intent_id if pushdown else None,
                org_id=org_id,
            )
        except RetrievalUnavailable:
            raise
        except Exception as e:
            raise RetrievalUnavailable(f"Knowledge index search failed: {e}") from e

        eligible = filter_by_scope(candidates, specialist_id, intent_id)
        results = eligible[: self._match_count]
        logger.info(
            "knowledge_retrieved",
            candidates=len(candidates),
            eligible=len(eligible),
            returned=len(results),
            pushdown=pushdown,
        )
        return results
