"""Protocol for append-only run/event sinks."""

from __future__ import annotations

from typing import Protocol

from support_router.models.domain import RunRecord, TicketEvent


class RunSink(Protocol):
    async def save_run(self, record: RunRecord) -> None: ...

    async def save_event(self, event: TicketEvent) -> None: ...
