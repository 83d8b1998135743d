"""FastAPI application factory with lifespan management."""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI

from support_router.api.middleware import RequestTimingMiddleware
from support_router.api.routes_health import router as health_router
from support_router.api.routes_knowledge import router as knowledge_router
from support_router.api.routes_reply import router as reply_router
from support_router.catalog.yaml_catalog import YAMLCatalogProvider
from support_router.classification.intent_classifier import IntentClassifier
from support_router.composition.reply_composer import ReplyComposer
from support_router.config.settings import Settings
from support_router.embeddings.openai_embedder import OpenAIEmbedder
from support_router.escalation.checker import EscalationChecker
from support_router.exceptions import ConfigurationError
from support_router.generation.factory import create_generation_service
from support_router.ingestion.knowledge_ingest import KnowledgeIngestor
from support_router.observability.logger import get_logger, setup_logging
from support_router.observability.run_logger import RunLogger
from support_router.pipeline.reply_pipeline import ReplyPipeline
from support_router.retrieval.knowledge_retriever import KnowledgeRetriever
from support_router.retrieval.summarizer import SnippetSummarizer
from support_router.routing.decision_engine import RoutingDecisionEngine
from support_router.storage.sqlite_knowledge_store import SQLiteKnowledgeStore
from support_router.storage.sqlite_run_store import SQLiteRunStore
from support_router.tracking.adapter import TrackingAdapter
from support_router.tracking.parcels_client import ParcelsAppClient
from support_router.vectorstore.faiss_store import FAISSKnowledgeIndex

logger = get_logger("app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = Settings()
    setup_logging(level=settings.log_level, json_output=settings.log_json)

    # Ensure data directories exist
    for path in [settings.knowledge_db_path, settings.run_db_path, settings.faiss_index_path]:
        Path(path).parent.mkdir(parents=True, exist_ok=True)

    # Storage
    knowledge_store = SQLiteKnowledgeStore(settings.knowledge_db_path)
    await knowledge_store.initialize()
    run_store = SQLiteRunStore(settings.run_db_path)
    await run_store.initialize()

    # Catalog
    catalog = YAMLCatalogProvider(settings.catalog_path)

    # Embedding
    if not settings.openai_api_key:
        raise ConfigurationError("SUPPORT_OPENAI_API_KEY is required for knowledge embeddings")
    embedder = OpenAIEmbedder(
        api_key=settings.openai_api_key,
        model=settings.embedding_model,
        batch_size=settings.embedding_batch_size,
        dimensions=settings.embedding_dimensions,
    )

    # Vector index
    knowledge_index = FAISSKnowledgeIndex(
        dimensions=settings.embedding_dimensions,
        store=knowledge_store,
        index_path=settings.faiss_index_path,
        overfetch_factor=settings.knowledge_overfetch_factor,
    )
    if knowledge_index.size == 0:
        # Rebuild from the knowledge store if not loaded from disk
        await knowledge_index.rebuild_from_store()

    # LLM
    llm = create_generation_service(settings)

    # Tracking (missing key surfaces per lookup as TrackingUnavailable)
    parcels_client = ParcelsAppClient(
        api_key=settings.parcelsapp_api_key,
        base_url=settings.tracking_base_url,
        timeout_s=settings.tracking_timeout_s,
    )
    tracker = TrackingAdapter(
        provider=parcels_client,
        poll_interval_ms=settings.tracking_poll_interval_ms,
        max_poll_ms=settings.tracking_max_poll_ms,
        default_destination=settings.default_destination_country,
        language=settings.tracking_language,
    )

    # Reply pipeline
    classifier = IntentClassifier(llm=llm, temperature=settings.classify_temperature)
    reply_pipeline = ReplyPipeline(
        catalog=catalog,
        classifier=classifier,
        router=RoutingDecisionEngine(confidence_threshold=settings.confidence_threshold),
        retriever=KnowledgeRetriever(
            embedder=embedder,
            index=knowledge_index,
            match_count=settings.knowledge_match_count,
            overfetch_factor=settings.knowledge_overfetch_factor,
        ),
        summarizer=SnippetSummarizer(
            llm=llm,
            max_chunks=settings.summary_max_chunks,
            temperature=settings.summary_temperature,
        ),
        composer=ReplyComposer(llm=llm, temperature=settings.reply_temperature),
        run_logger=RunLogger(run_store),
        settings=settings,
        tracker=tracker,
        escalation_checker=EscalationChecker(llm=llm, temperature=settings.escalation_temperature),
    )

    # Attach to app state
    app.state.reply_pipeline = reply_pipeline
    app.state.classifier = classifier
    app.state.catalog = catalog
    app.state.ingestor = KnowledgeIngestor(
        embedder=embedder, store=knowledge_store, index=knowledge_index
    )
    app.state.knowledge_store = knowledge_store
    app.state.knowledge_index = knowledge_index
    app.state.run_store = run_store
    app.state.settings = settings

    logger.info(
        "startup_complete",
        llm_provider=settings.llm_provider,
        chunks=await knowledge_store.count_chunks(),
        index_size=knowledge_index.size,
        intents=len(await catalog.intents()),
        tracking_configured=bool(settings.parcelsapp_api_key),
    )

    yield

    # Shutdown: persist index, release HTTP client
    knowledge_index.save()
    await parcels_client.aclose()
    logger.info("shutdown_complete")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Support Router",
        version="1.0.0",
        description="Conversation routing and knowledge-augmented reply engine",
        lifespan=lifespan,
    )
    app.add_middleware(RequestTimingMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(reply_router, tags=["reply"])
    app.include_router(knowledge_router, tags=["knowledge"])
    return app
