"""Protocol for generation services."""

from __future__ import annotations

from typing import Protocol


class GenerationService(Protocol):
    async def complete(
        self,
        messages: list[dict],
        temperature: float = 0.3,
        force_json: bool = False,
    ) -> str: ...
