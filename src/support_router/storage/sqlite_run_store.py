"""SQLite-backed append-only sink for run records and ticket events."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import aiosqlite

from support_router.models.domain import RunRecord, TicketEvent
from support_router.storage.migrations import initialize_run_db


class SQLiteRunStore:
    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    async def initialize(self) -> None:
        await initialize_run_db(self._db_path)

    async def save_run(self, record: RunRecord) -> None:
        async with aiosqlite.connect(self._db_path) as db:
            await db.execute(
                "INSERT INTO runs "
                "(run_id, ticket_id, intent_id, specialist_id, input_summary, output_summary, "
                "knowledge_sources, status, rationale, latency_ms, created_at) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    record.run_id,
                    record.ticket_id,
                    record.intent_id,
                    record.specialist_id,
                    record.input_summary,
                    record.output_summary,
                    json.dumps(record.knowledge_sources),
                    record.status,
                    json.dumps(record.rationale),
                    record.latency_ms,
                    record.created_at.isoformat(),
                ),
            )
            await db.commit()

    async def save_event(self, event: TicketEvent) -> None:
        async with aiosqlite.connect(self._db_path) as db:
            await db.execute(
                "INSERT INTO ticket_events (ticket_id, event_type, summary, detail, created_at) "
                "VALUES (?, ?, ?, ?, ?)",
                (
                    event.ticket_id,
                    event.event_type,
                    event.summary,
                    event.detail,
                    event.created_at.isoformat(),
                ),
            )
            await db.commit()

    async def get_run(self, run_id: str) -> RunRecord | None:
        async with aiosqlite.connect(self._db_path) as db:
            db.row_factory = aiosqlite.Row
            async with db.execute("SELECT * FROM runs WHERE run_id = ?", (run_id,)) as cursor:
                row = await cursor.fetchone()
                if row is None:
                    return None
                return self._row_to_run(row)

    async def get_recent_runs(self, limit: int = 100) -> list[RunRecord]:
        async with aiosqlite.connect(self._db_path) as db:
            db.row_factory = aiosqlite.Row
            async with db.execute(
                "SELECT * FROM runs ORDER BY created_at DESC LIMIT ?", (limit,)
            ) as cursor:
                rows = await cursor.fetchall()
                return [self._row_to_run(row) for row in rows]

    async def get_events(self, ticket_id: str) -> list[TicketEvent]:
        async with aiosqlite.connect(self._db_path) as db:
            db.row_factory = aiosqlite.Row
            async with db.execute(
                "SELECT * FROM ticket_events WHERE ticket_id = ? ORDER BY event_id",
                (ticket_id,),
            ) as cursor:
                rows = await cursor.fetchall()
                return [
                    TicketEvent(
                        ticket_id=row["ticket_id"],
                        event_type=row["event_type"],
                        summary=row["summary"],
                        detail=row["detail"],
                        created_at=_parse_ts(row["created_at"]),
                    )
                    for row in rows
                ]

    @staticmethod
    def _row_to_run(row: aiosqlite.Row) -> RunRecord:
        return RunRecord(
            run_id=row["run_id"],
            ticket_id=row["ticket_id"],
            intent_id=row["intent_id"],
            specialist_id=row["specialist_id"],
            input_summary=row["input_summary"],
            output_summary=row["output_summary"],
            knowledge_sources=json.loads(row["knowledge_sources"]),
            status=row["status"],
            rationale=json.loads(row["rationale"]),
            latency_ms=row["latency_ms"],
            created_at=_parse_ts(row["created_at"]),
        )


def _parse_ts(value: str) -> datetime:
    ts = datetime.fromisoformat(value)
    return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)
