"""Protocol for the intent/specialist configuration catalog."""

from __future__ import annotations

from typing import Protocol

from support_router.models.domain import Intent, Specialist


class CatalogProvider(Protocol):
    async def intents(self, org_id: str | None = None) -> list[Intent]: ...

    async def specialists(self, org_id: str | None = None) -> list[Specialist]: ...
