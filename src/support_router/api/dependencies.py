"""FastAPI dependency injection helpers."""

from __future__ import annotations

from fastapi import Request

from support_router.classification.intent_classifier import IntentClassifier
from support_router.ingestion.knowledge_ingest import KnowledgeIngestor
from support_router.pipeline.reply_pipeline import ReplyPipeline
from support_router.protocols.catalog import CatalogProvider
from support_router.storage.sqlite_knowledge_store import SQLiteKnowledgeStore
from support_router.storage.sqlite_run_store import SQLiteRunStore
from support_router.vectorstore.faiss_store import FAISSKnowledgeIndex


def get_reply_pipeline(request: Request) -> ReplyPipeline:
    return request.app.state.reply_pipeline


def get_classifier(request: Request) -> IntentClassifier:
    return request.app.state.classifier


def get_catalog(request: Request) -> CatalogProvider:
    return request.app.state.catalog


def get_ingestor(request: Request) -> KnowledgeIngestor:
    return request.app.state.ingestor


def get_knowledge_store(request: Request) -> SQLiteKnowledgeStore:
    return request.app.state.knowledge_store


def get_run_store(request: Request) -> SQLiteRunStore:
    return request.app.state.run_store


def get_knowledge_index(request: Request) -> FAISSKnowledgeIndex:
    return request.app.state.knowledge_index
