"""Central configuration via Pydantic Settings. All values driven by env vars."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # API Keys
    openai_api_key: str = ""
    google_api_key: str = ""
    parcelsapp_api_key: str = ""

    # Generation
    llm_provider: Literal["openai", "gemini"] = "openai"
    openai_chat_model: str = "gpt-4.1-mini"
    gemini_model: str = "gemini-2.0-flash"
    generation_max_tokens: int = 1024
    classify_temperature: float = 0.0
    summary_temperature: float = 0.2
    reply_temperature: float = 0.3
    escalation_temperature: float = 0.0

    # Embedding
    embedding_model: str = "text-embedding-3-small"
    embedding_dimensions: int = 1536
    embedding_batch_size: int = 100

    # Routing
    confidence_threshold: float = 0.6
    classification_retries: int = 1
    classification_retry_backoff_ms: int = 250

    # Knowledge
    knowledge_match_count: int = 5
    knowledge_overfetch_factor: int = 4
    summary_max_chunks: int = 5

    # Tracking (Parcelsapp)
    tracking_base_url: str = "https://parcelsapp.com/api/v3"
    tracking_language: str = "en"
    tracking_poll_interval_ms: int = 500
    tracking_max_poll_ms: int = 4000
    tracking_timeout_s: float = 10.0
    default_destination_country: str = "United Kingdom"

    # Escalation
    escalation_checks_enabled: bool = True

    # Storage paths
    knowledge_db_path: str = "data/knowledge.db"
    run_db_path: str = "data/runs.db"
    faiss_index_path: str = "data/faiss_index"
    catalog_path: str = "config/catalog.yaml"

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    model_config = {"env_file": ".env", "env_prefix": "SUPPORT_"}
