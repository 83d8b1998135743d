"""Integration tests for SQLite knowledge and run stores."""

import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from support_router.models.domain import KnowledgeChunk, RunRecord, TicketEvent
from support_router.storage.sqlite_knowledge_store import SQLiteKnowledgeStore
from support_router.storage.sqlite_run_store import SQLiteRunStore


@pytest.fixture
async def knowledge_store():
    tmp = tempfile.mkdtemp()
    store = SQLiteKnowledgeStore(str(Path(tmp) / "knowledge.db"))
    await store.initialize()
    return store


@pytest.fixture
async def run_store():
    tmp = tempfile.mkdtemp()
    store = SQLiteRunStore(str(Path(tmp) / "runs.db"))
    await store.initialize()
    return store


async def _seed(store):
    chunks = [
        KnowledgeChunk(id="general", title="Hours", content="We reply within a day."),
        KnowledgeChunk(
            id="refund",
            title="Refund window",
            content="Refunds within 14 days.",
            scope_specialist_id="refund-specialist",
        ),
        KnowledgeChunk(
            id="tracking",
            title="Lost parcels",
            content="Lost after 7 days.",
            scope_intent_id="track-order",
        ),
        KnowledgeChunk(id="acme", title="Acme", content="Acme only.", org_id="acme"),
    ]
    for i, chunk in enumerate(chunks):
        await store.save_chunk(chunk, [float(i), 1.0])
    return [c.id for c in chunks]


@pytest.mark.asyncio
async def test_save_and_load_chunks(knowledge_store):
    ids = await _seed(knowledge_store)
    loaded = await knowledge_store.get_chunks_by_ids(ids)

    assert set(loaded) == set(ids)
    assert loaded["refund"].scope_specialist_id == "refund-specialist"
    assert loaded["tracking"].scope_intent_id == "track-order"
    assert await knowledge_store.count_chunks() == 4


@pytest.mark.asyncio
async def test_scoped_load_filters_by_specialist_and_intent(knowledge_store):
    ids = await _seed(knowledge_store)

    as_tracker = await knowledge_store.get_chunks_by_ids(
        ids, specialist_id="order-tracker", intent_id="track-order", scoped=True
    )
    assert set(as_tracker) == {"general", "tracking", "acme"}

    as_refund = await knowledge_store.get_chunks_by_ids(
        ids, specialist_id="refund-specialist", intent_id="refund", scoped=True
    )
    assert set(as_refund) == {"general", "refund", "acme"}


@pytest.mark.asyncio
async def test_org_filter_keeps_shared_chunks(knowledge_store):
    ids = await _seed(knowledge_store)
    other_org = await knowledge_store.get_chunks_by_ids(ids, org_id="globex")
    assert "acme" not in other_org
    assert "general" in other_org


@pytest.mark.asyncio
async def test_embeddings_round_trip(knowledge_store):
    await _seed(knowledge_store)
    rows = await knowledge_store.get_all_embeddings()
    assert dict(rows)["refund"] == [1.0, 1.0]


@pytest.mark.asyncio
async def test_save_and_get_run(run_store):
    record = RunRecord(
        ticket_id="T-1",
        intent_id="refund",
        specialist_id="refund-specialist",
        input_summary="refund please",
        output_summary="Sure thing",
        knowledge_sources=["Refund window"],
        status="success",
        rationale=["classified as 'Refund request'"],
        latency_ms=123.4,
    )
    await run_store.save_run(record)

    loaded = await run_store.get_run(record.run_id)
    assert loaded is not None
    assert loaded.knowledge_sources == ["Refund window"]
    assert loaded.rationale == ["classified as 'Refund request'"]
    assert loaded.created_at == record.created_at
    assert await run_store.get_run("missing") is None


@pytest.mark.asyncio
async def test_recent_runs_newest_first(run_store):
    base = datetime(2024, 5, 1, tzinfo=timezone.utc)
    for i in range(3):
        await run_store.save_run(
            RunRecord(
                ticket_id=f"T-{i}",
                intent_id=None,
                specialist_id=None,
                input_summary="hi",
                output_summary="hello",
                knowledge_sources=[],
                status="escalated",
                created_at=base + timedelta(minutes=i),
            )
        )
    runs = await run_store.get_recent_runs(limit=2)
    assert [r.ticket_id for r in runs] == ["T-2", "T-1"]


@pytest.mark.asyncio
async def test_events_are_append_only_in_order(run_store):
    for event_type in ("message_received", "intent_detected", "reply_sent"):
        await run_store.save_event(TicketEvent("T-9", event_type, summary=event_type))
    await run_store.save_event(TicketEvent("T-other", "error", summary="boom"))

    events = await run_store.get_events("T-9")
    assert [e.event_type for e in events] == ["message_received", "intent_detected", "reply_sent"]
