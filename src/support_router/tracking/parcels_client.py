"""Parcelsapp tracking API client (request / poll primitives)."""

from __future__ import annotations

import httpx

from support_router.exceptions import TrackingUnavailable
from support_router.observability.logger import get_logger

logger = get_logger("parcels_client")


class ParcelsAppClient:
    def __init__(
        self,
        api_key: str,
        base_url: str = "https://parcelsapp.com/api/v3",
        timeout_s: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key
        self._client = client or httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout_s),
            headers={"Accept": "application/json", "Content-Type": "application/json"},
        )

    async def initiate(
        self,
        tracking_id: str,
        destination_country: str | None = None,
        language: str = "en",
    ) -> dict:
        shipment: dict = {"trackingId": tracking_id}
        if destination_country:
            shipment["destinationCountry"] = destination_country
        payload = {
            "apiKey": self._require_key(),
            "language": language,
            "shipments": [shipment],
        }
        return await self._request("POST", "/shipments/tracking", json=payload)

    async def fetch(self, uuid: str) -> dict:
        return await self._request(
            "GET",
            "/shipments/tracking",
            params={"uuid": uuid, "apiKey": self._require_key()},
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    def _require_key(self) -> str:
        if not self._api_key:
            raise TrackingUnavailable("Parcelsapp API key not configured")
        return self._api_key

    async def _request(self, method: str, path: str, **kwargs) -> dict:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise TrackingUnavailable(f"Parcelsapp request failed: {e}") from e

        try:
            data = response.json() if response.content else {}
        except ValueError as e:
            raise TrackingUnavailable(
                f"Parcelsapp returned non-JSON response: {response.text[:200]}"
            ) from e

        if response.is_error:
            message = data.get("message") if isinstance(data, dict) else None
            raise TrackingUnavailable(
                f"Parcelsapp error {response.status_code}: {message or response.reason_phrase}"
            )
        if not isinstance(data, dict):
            raise TrackingUnavailable("Parcelsapp returned an unexpected payload")

        logger.debug("parcels_response", method=method, status=response.status_code)
        return data
