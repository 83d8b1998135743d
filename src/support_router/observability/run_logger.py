"""Run logger: records run outcomes and ticket events without ever failing the caller."""

from __future__ import annotations

from support_router.models.domain import RunRecord, TicketEvent, TicketEventType
from support_router.observability.logger import get_logger
from support_router.protocols.run_sink import RunSink

logger = get_logger("run_logger")


class RunLogger:
    def __init__(self, sink: RunSink) -> None:
        self._sink = sink

    async def record(self, record: RunRecord) -> None:
        try:
            await self._sink.save_run(record)
        except Exception as e:
            logger.warning(
                "run_record_failed",
                ticket_id=record.ticket_id,
                run_id=record.run_id,
                error=str(e),
            )
            return
        logger.info(
            "run_recorded",
            ticket_id=record.ticket_id,
            run_id=record.run_id,
            status=record.status,
        )

    async def record_event(
        self,
        ticket_id: str,
        event_type: TicketEventType,
        summary: str,
        detail: str | None = None,
    ) -> None:
        event = TicketEvent(
            ticket_id=ticket_id,
            event_type=event_type,
            summary=summary,
            detail=detail or "",
        )
        try:
            await self._sink.save_event(event)
        except Exception as e:
            logger.warning(
                "ticket_event_failed",
                ticket_id=ticket_id,
                event_type=event_type,
                error=str(e),
            )
