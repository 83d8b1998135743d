"""Reply and intent-classification endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from support_router.api.dependencies import get_catalog, get_classifier, get_reply_pipeline
from support_router.classification.intent_classifier import IntentClassifier
from support_router.exceptions import (
    ClassificationUnavailable,
    ConfigurationError,
    SupportRouterError,
)
from support_router.models.schemas import (
    ClassifyRequest,
    ClassifyResponse,
    ReplyRequest,
    ReplyResponse,
)
from support_router.pipeline.reply_pipeline import ReplyPipeline
from support_router.protocols.catalog import CatalogProvider

router = APIRouter()


@router.post("/reply", response_model=ReplyResponse)
async def reply(
    request: ReplyRequest,
    pipeline: ReplyPipeline = Depends(get_reply_pipeline),
) -> ReplyResponse:
    try:
        return await pipeline.execute(request)
    except ConfigurationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SupportRouterError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.post("/intents/classify", response_model=ClassifyResponse)
async def classify(
    request: ClassifyRequest,
    classifier: IntentClassifier = Depends(get_classifier),
    catalog: CatalogProvider = Depends(get_catalog),
) -> ClassifyResponse:
    """Classify a single message without routing, composing or logging a run."""
    intents = await catalog.intents(request.org_id)
    try:
        result = await classifier.classify(f"user: {request.message}", intents)
    except ConfigurationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ClassificationUnavailable as e:
        raise HTTPException(status_code=502, detail=str(e))

    names = {i.id: i.name for i in intents}
    return ClassifyResponse(
        intent_id=result.intent_id,
        intent_name=names.get(result.intent_id),
        confidence=result.confidence,
        raw=result.raw,
    )
