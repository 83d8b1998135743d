"""Idempotent database schema creation."""

from __future__ import annotations

import aiosqlite

KNOWLEDGE_CHUNKS_TABLE = """
CREATE TABLE IF NOT EXISTS knowledge_chunks (
    chunk_id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    content TEXT NOT NULL,
    specialist_id TEXT,
    intent_id TEXT,
    org_id TEXT,
    embedding TEXT NOT NULL,
    created_at TEXT NOT NULL
)
"""

KNOWLEDGE_ORG_INDEX = """
CREATE INDEX IF NOT EXISTS idx_knowledge_org_id ON knowledge_chunks(org_id)
"""

RUNS_TABLE = """
CREATE TABLE IF NOT EXISTS runs (
    run_id TEXT PRIMARY KEY,
    ticket_id TEXT NOT NULL,
    intent_id TEXT,
    specialist_id TEXT,
    input_summary TEXT NOT NULL,
    output_summary TEXT NOT NULL,
    knowledge_sources TEXT NOT NULL DEFAULT '[]',
    status TEXT NOT NULL,
    rationale TEXT NOT NULL DEFAULT '[]',
    latency_ms REAL NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL
)
"""

RUNS_CREATED_INDEX = """
CREATE INDEX IF NOT EXISTS idx_runs_created_at ON runs(created_at)
"""

TICKET_EVENTS_TABLE = """
CREATE TABLE IF NOT EXISTS ticket_events (
    event_id INTEGER PRIMARY KEY AUTOINCREMENT,
    ticket_id TEXT NOT NULL,
    event_type TEXT NOT NULL,
    summary TEXT NOT NULL,
    detail TEXT NOT NULL DEFAULT '',
    created_at TEXT NOT NULL
)
"""

TICKET_EVENTS_TICKET_INDEX = """
CREATE INDEX IF NOT EXISTS idx_ticket_events_ticket_id ON ticket_events(ticket_id)
"""


async def initialize_knowledge_db(db_path: str) -> None:
    async with aiosqlite.connect(db_path) as db:
        await db.execute(KNOWLEDGE_CHUNKS_TABLE)
        await db.execute(KNOWLEDGE_ORG_INDEX)
        await db.commit()


async def initialize_run_db(db_path: str) -> None:
    async with aiosqlite.connect(db_path) as db:
        await db.execute(RUNS_TABLE)
        await db.execute(RUNS_CREATED_INDEX)
        await db.execute(TICKET_EVENTS_TABLE)
        await db.execute(TICKET_EVENTS_TICKET_INDEX)
        await db.commit()
