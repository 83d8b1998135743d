"""Rebuild the FAISS knowledge index from embeddings stored in SQLite."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from support_router.config.settings import Settings
from support_router.storage.sqlite_knowledge_store import SQLiteKnowledgeStore
from support_router.vectorstore.faiss_store import FAISSKnowledgeIndex


async def main():
    settings = Settings()

    store = SQLiteKnowledgeStore(settings.knowledge_db_path)
    await store.initialize()
    print(f"Found {await store.count_chunks()} chunks in knowledge store")

    # Start from an empty index; the persisted one is overwritten.
    index = FAISSKnowledgeIndex(dimensions=settings.embedding_dimensions, store=store)
    added = await index.rebuild_from_store()
    if not added:
        print("No chunks to index.")
        return

    index.save(settings.faiss_index_path)
    print(f"FAISS index built: {index.size} vectors")


if __name__ == "__main__":
    asyncio.run(main())
