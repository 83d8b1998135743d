"""Seed the knowledge store with sample delivery-policy snippets for development."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from support_router.config.settings import Settings
from support_router.embeddings.openai_embedder import OpenAIEmbedder
from support_router.ingestion.knowledge_ingest import KnowledgeIngestor
from support_router.storage.sqlite_knowledge_store import SQLiteKnowledgeStore
from support_router.vectorstore.faiss_store import FAISSKnowledgeIndex

SEEDS = [
    {
        "title": "Collection point uncollected >3 days",
        "content": (
            "If a parcel sits at a collection point for more than 3 days without pickup, "
            "it is returned to sender. Inform the customer it is in return transit; advise "
            "to wait for processing before reship/refund."
        ),
    },
    {
        "title": "Disputed delivery - signature present",
        "content": (
            "If courier shows delivered with signature: confirm address, provide proof of "
            "delivery, and suggest checking with household/neighbours. Escalate only if "
            "customer confirms no receipt after these checks."
        ),
    },
    {
        "title": "Delayed in transit - still moving",
        "content": (
            "If tracking shows in-transit scans within last 72 hours: reassure, provide "
            "latest scan, and set expectation for next update within 24-48 hours. Do not "
            "promise exact ETA unless carrier provides one."
        ),
    },
    {
        "title": "Lost in transit - no scans >7 days",
        "content": (
            "If no tracking updates for 7+ days and courier confirms stalled: treat as lost. "
            "Apologize, offer replacement or refund per policy, and file a loss claim with "
            "carrier."
        ),
    },
    {
        "title": "Return to sender initiated",
        "content": (
            "If tracking shows RTS/return to sender: advise customer it is heading back to "
            "warehouse. Offer to reship on arrival or refund per policy once checked in."
        ),
    },
]


async def main():
    settings = Settings()
    if not settings.openai_api_key:
        print("SUPPORT_OPENAI_API_KEY is required to embed seed snippets.")
        sys.exit(1)

    Path(settings.knowledge_db_path).parent.mkdir(parents=True, exist_ok=True)

    store = SQLiteKnowledgeStore(settings.knowledge_db_path)
    await store.initialize()

    embedder = OpenAIEmbedder(
        api_key=settings.openai_api_key,
        model=settings.embedding_model,
        dimensions=settings.embedding_dimensions,
    )
    index = FAISSKnowledgeIndex(
        dimensions=settings.embedding_dimensions,
        store=store,
        index_path=settings.faiss_index_path,
    )
    ingestor = KnowledgeIngestor(embedder=embedder, store=store, index=index)

    for seed in SEEDS:
        chunk = await ingestor.add(seed["title"], seed["content"])
        print(f"Embedded: {chunk.title}")

    index.save()
    print(f"\nTotal chunks: {await store.count_chunks()}")
    print(f"Vector index size: {index.size}")


if __name__ == "__main__":
    asyncio.run(main())
