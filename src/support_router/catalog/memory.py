"""In-memory catalog, handy for tests and embedding the engine in other services."""

from __future__ import annotations

from support_router.models.domain import Intent, Specialist


class InMemoryCatalog:
    def __init__(self, intents: list[Intent], specialists: list[Specialist]) -> None:
        self._intents = list(intents)
        self._specialists = list(specialists)

    async def intents(self, org_id: str | None = None) -> list[Intent]:
        return list(self._intents)

    async def specialists(self, org_id: str | None = None) -> list[Specialist]:
        return list(self._specialists)
