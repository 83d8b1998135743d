"""SQLite-backed knowledge chunk store."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import aiosqlite

from support_router.models.domain import KnowledgeChunk
from support_router.storage.migrations import initialize_knowledge_db


class SQLiteKnowledgeStore:
    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    async def initialize(self) -> None:
        await initialize_knowledge_db(self._db_path)

    async def save_chunk(self, chunk: KnowledgeChunk, embedding: list[float]) -> str:
        async with aiosqlite.connect(self._db_path) as db:
            await db.execute(
                "INSERT OR REPLACE INTO knowledge_chunks "
                "(chunk_id, title, content, specialist_id, intent_id, org_id, embedding, created_at) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    chunk.id,
                    chunk.title,
                    chunk.content,
                    chunk.scope_specialist_id,
                    chunk.scope_intent_id,
                    chunk.org_id,
                    json.dumps(embedding),
                    datetime.now(timezone.utc).isoformat(),
                ),
            )
            await db.commit()
        return chunk.id

    async def get_chunks_by_ids(
        self,
        chunk_ids: list[str],
        specialist_id: str | None = None,
        intent_id: str | None = None,
        org_id: str | None = None,
        scoped: bool = False,
    ) -> dict[str, KnowledgeChunk]:
        """Load chunks by id, restricted to `org_id` when given.

        With `scoped=True` the query also keeps only chunks whose specialist and
        intent scopes are empty or equal to the requested ones.
        """
        if not chunk_ids:
            return {}
        placeholders = ",".join("?" for _ in chunk_ids)
        sql = f"SELECT * FROM knowledge_chunks WHERE chunk_id IN ({placeholders})"
        params: list = list(chunk_ids)
        if org_id is not None:
            sql += " AND (org_id IS NULL OR org_id = ?)"
            params.append(org_id)
        if scoped:
            sql += " AND (specialist_id IS NULL OR specialist_id = ?)"
            params.append(specialist_id)
            if intent_id is not None:
                sql += " AND (intent_id IS NULL OR intent_id = ?)"
                params.append(intent_id)

        async with aiosqlite.connect(self._db_path) as db:
            db.row_factory = aiosqlite.Row
            async with db.execute(sql, params) as cursor:
                rows = await cursor.fetchall()
                return {row["chunk_id"]: self._row_to_chunk(row) for row in rows}

    async def get_all_embeddings(self) -> list[tuple[str, list[float]]]:
        async with aiosqlite.connect(self._db_path) as db:
            async with db.execute(
                "SELECT chunk_id, embedding FROM knowledge_chunks ORDER BY created_at"
            ) as cursor:
                rows = await cursor.fetchall()
                return [(row[0], json.loads(row[1])) for row in rows]

    async def count_chunks(self) -> int:
        async with aiosqlite.connect(self._db_path) as db:
            async with db.execute("SELECT COUNT(*) FROM knowledge_chunks") as cursor:
                row = await cursor.fetchone()
                return row[0] if row else 0

    @staticmethod
    def _row_to_chunk(row: aiosqlite.Row) -> KnowledgeChunk:
        return KnowledgeChunk(
            id=row["chunk_id"],
            title=row["title"],
            content=row["content"],
            scope_specialist_id=row["specialist_id"],
            scope_intent_id=row["intent_id"],
            org_id=row["org_id"],
        )
