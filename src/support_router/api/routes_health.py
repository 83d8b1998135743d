"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from support_router.api.dependencies import get_catalog, get_knowledge_index, get_knowledge_store
from support_router.models.schemas import HealthResponse
from support_router.protocols.catalog import CatalogProvider
from support_router.storage.sqlite_knowledge_store import SQLiteKnowledgeStore
from support_router.vectorstore.faiss_store import FAISSKnowledgeIndex

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(
    store: SQLiteKnowledgeStore = Depends(get_knowledge_store),
    index: FAISSKnowledgeIndex = Depends(get_knowledge_index),
    catalog: CatalogProvider = Depends(get_catalog),
) -> HealthResponse:
    return HealthResponse(
        status="ok",
        knowledge_chunks=await store.count_chunks(),
        index_size=index.size,
        intents=len(await catalog.intents()),
        specialists=len(await catalog.specialists()),
    )
