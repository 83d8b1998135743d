"""Knowledge ingestion: embed a policy snippet, persist it, and index it."""

from __future__ import annotations

from uuid import uuid4

from support_router.models.domain import KnowledgeChunk
from support_router.observability.logger import get_logger
from support_router.protocols.embedder import Embedder
from support_router.storage.sqlite_knowledge_store import SQLiteKnowledgeStore
from support_router.vectorstore.faiss_store import FAISSKnowledgeIndex

logger = get_logger("knowledge_ingest")


class KnowledgeIngestor:
    def __init__(
        self,
        embedder: Embedder,
        store: SQLiteKnowledgeStore,
        index: FAISSKnowledgeIndex,
    ) -> None:
        self._embedder = embedder
        self._store = store
        self._index = index

    async def add(
        self,
        title: str,
        content: str,
        specialist_id: str | None = None,
        intent_id: str | None = None,
        org_id: str | None = None,
    ) -> KnowledgeChunk:
        title = title.strip()
        content = content.strip()
        if not title or not content:
            raise ValueError("title and content are required")

        chunk = KnowledgeChunk(
            id=str(uuid4()),
            title=title,
            content=content,
            scope_specialist_id=specialist_id or None,
            scope_intent_id=intent_id or None,
            org_id=org_id or None,
        )
        # Same embedding contract as query-time retrieval.
        embedding = await self._embedder.embed_query(content)
        await self._store.save_chunk(chunk, embedding)
        await self._index.add(chunk.id, embedding)

        logger.info(
            "knowledge_added",
            chunk_id=chunk.id,
            specialist_id=chunk.scope_specialist_id,
            intent_id=chunk.scope_intent_id,
        )
        return chunk
