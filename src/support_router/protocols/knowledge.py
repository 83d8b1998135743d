"""Protocol for knowledge indexes."""

from __future__ import annotations

from typing import Protocol

from support_router.models.domain import KnowledgeChunk


class KnowledgeIndex(Protocol):
    @property
    def supports_scope_filter(self) -> bool:
        """True when `search` honours specialist/intent/org filters itself."""
        ...

    async def search(
        self,
        embedding: list[float],
        top_k: int,
        specialist_id: str | None = None,
        intent_id: str | None = None,
        org_id: str | None = None,
    ) -> list[KnowledgeChunk]: ...
