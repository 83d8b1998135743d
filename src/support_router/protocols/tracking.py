"""Protocol for parcel tracking providers."""

from __future__ import annotations

from typing import Protocol


class TrackingProvider(Protocol):
    async def initiate(
        self,
        tracking_id: str,
        destination_country: str | None = None,
        language: str = "en",
    ) -> dict:
        """Start a tracking request. Returns the raw provider payload."""
        ...

    async def fetch(self, uuid: str) -> dict: ...
