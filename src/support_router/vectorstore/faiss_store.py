"""FAISS-backed knowledge index with id mapping, persistence, and scoped lookups."""

from __future__ import annotations

import asyncio
import json
import os
from dataclasses import replace
from pathlib import Path

import faiss
import numpy as np

from support_router.models.domain import KnowledgeChunk
from support_router.observability.logger import get_logger
from support_router.storage.sqlite_knowledge_store import SQLiteKnowledgeStore

logger = get_logger("faiss_store")


class FAISSKnowledgeIndex:
    """Inner-product search over L2-normalised embeddings (cosine similarity).

    FAISS itself has no metadata filter, so scope filtering happens when chunk
    rows are loaded from the SQLite store; `scope_filter=False` disables that
    and leaves all scope enforcement to the caller.
    """

    def __init__(
        self,
        dimensions: int,
        store: SQLiteKnowledgeStore,
        index_path: str | None = None,
        scope_filter: bool = True,
        overfetch_factor: int = 4,
    ) -> None:
        self._dimensions = dimensions
        self._store = store
        self._index_path = index_path
        self._scope_filter = scope_filter
        self._overfetch = max(1, overfetch_factor)
        self._index = faiss.IndexIDMap(faiss.IndexFlatIP(dimensions))
        self._int_to_chunk: dict[int, str] = {}
        self._chunk_to_int: dict[str, int] = {}
        self._next_id = 0
        self._write_lock = asyncio.Lock()

        if index_path:
            self._try_load(index_path)

    @property
    def supports_scope_filter(self) -> bool:
        return self._scope_filter

    @property
    def size(self) -> int:
        return self._index.ntotal

    async def add(self, chunk_id: str, embedding: list[float]) -> None:
        async with self._write_lock:
            await asyncio.to_thread(self._add_sync, [chunk_id], [embedding])

    async def rebuild_from_store(self) -> int:
        """Re-index every stored chunk; used when no persisted index was found."""
        rows = await self._store.get_all_embeddings()
        if not rows:
            return 0
        async with self._write_lock:
            await asyncio.to_thread(
                self._add_sync, [cid for cid, _ in rows], [emb for _, emb in rows]
            )
        logger.info("faiss_rebuilt", size=self.size)
        return len(rows)

    async def search(
        self,
        embedding: list[float],
        top_k: int,
        specialist_id: str | None = None,
        intent_id: str | None = None,
        org_id: str | None = None,
    ) -> list[KnowledgeChunk]:
        # Over-fetch so post-filtering by org/scope still leaves top_k candidates.
        k = top_k * self._overfetch if (self._scope_filter or org_id) else top_k
        hits = await asyncio.to_thread(self._search_sync, embedding, k)
        if not hits:
            return []

        chunks = await self._store.get_chunks_by_ids(
            [cid for cid, _ in hits],
            specialist_id=specialist_id,
            intent_id=intent_id,
            org_id=org_id,
            scoped=self._scope_filter,
        )
        results: list[KnowledgeChunk] = []
        for chunk_id, score in hits:
            chunk = chunks.get(chunk_id)
            if chunk is not None:
                results.append(replace(chunk, similarity=score))
            if len(results) >= top_k:
                break
        return results

    def save(self, path: str | None = None) -> None:
        path = path or self._index_path
        if not path:
            return
        Path(path).mkdir(parents=True, exist_ok=True)
        faiss.write_index(self._index, os.path.join(path, "index.faiss"))
        with open(os.path.join(path, "id_mapping.json"), "w") as f:
            json.dump({"int_to_chunk": self._int_to_chunk, "next_id": self._next_id}, f)
        logger.info("faiss_saved", path=path, size=self.size)

    def _try_load(self, path: str) -> None:
        index_file = os.path.join(path, "index.faiss")
        mapping_file = os.path.join(path, "id_mapping.json")
        if not (os.path.exists(index_file) and os.path.exists(mapping_file)):
            return
        self._index = faiss.read_index(index_file)
        with open(mapping_file) as f:
            data = json.load(f)
        self._int_to_chunk = {int(k): v for k, v in data["int_to_chunk"].items()}
        self._chunk_to_int = {v: k for k, v in self._int_to_chunk.items()}
        self._next_id = data["next_id"]
        logger.info("faiss_loaded", size=self.size, path=path)

    def _add_sync(self, chunk_ids: list[str], embeddings: list[list[float]]) -> None:
        vectors = np.array(embeddings, dtype=np.float32).reshape(len(chunk_ids), -1)
        faiss.normalize_L2(vectors)
        existing = [self._chunk_to_int[c] for c in chunk_ids if c in self._chunk_to_int]
        if existing:
            self._index.remove_ids(np.array(existing, dtype=np.int64))
        int_ids = []
        for cid in chunk_ids:
            if cid not in self._chunk_to_int:
                self._chunk_to_int[cid] = self._next_id
                self._int_to_chunk[self._next_id] = cid
                self._next_id += 1
            int_ids.append(self._chunk_to_int[cid])
        self._index.add_with_ids(vectors, np.array(int_ids, dtype=np.int64))

    def _search_sync(self, embedding: list[float], k: int) -> list[tuple[str, float]]:
        if self._index.ntotal == 0:
            return []
        query = np.array(embedding, dtype=np.float32).reshape(1, -1)
        faiss.normalize_L2(query)
        scores, indices = self._index.search(query, min(k, self._index.ntotal))
        hits = []
        for idx, score in zip(indices[0], scores[0]):
            chunk_id = self._int_to_chunk.get(int(idx))
            if chunk_id:
                hits.append((chunk_id, float(score)))
        return hits
