"""Knowledge ingestion and run history endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from support_router.api.dependencies import get_ingestor, get_run_store
from support_router.exceptions import RetrievalUnavailable
from support_router.ingestion.knowledge_ingest import KnowledgeIngestor
from support_router.models.schemas import KnowledgeAddRequest, KnowledgeAddResponse, RunSummary
from support_router.storage.sqlite_run_store import SQLiteRunStore

router = APIRouter()


@router.post("/knowledge", response_model=KnowledgeAddResponse)
async def add_knowledge(
    request: KnowledgeAddRequest,
    ingestor: KnowledgeIngestor = Depends(get_ingestor),
) -> KnowledgeAddResponse:
    try:
        chunk = await ingestor.add(
            title=request.title,
            content=request.content,
            specialist_id=request.specialist_id,
            intent_id=request.intent_id,
            org_id=request.org_id,
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except RetrievalUnavailable as e:
        raise HTTPException(status_code=502, detail=str(e))
    return KnowledgeAddResponse(chunk_id=chunk.id, status="indexed")


@router.get("/runs", response_model=list[RunSummary])
async def recent_runs(
    limit: int = Query(50, ge=1, le=500),
    store: SQLiteRunStore = Depends(get_run_store),
) -> list[RunSummary]:
    runs = await store.get_recent_runs(limit)
    return [
        RunSummary(
            run_id=r.run_id,
            ticket_id=r.ticket_id,
            intent_id=r.intent_id,
            specialist_id=r.specialist_id,
            status=r.status,
            input_summary=r.input_summary,
            output_summary=r.output_summary,
            knowledge_sources=r.knowledge_sources,
            created_at=r.created_at.isoformat(),
        )
        for r in runs
    ]
