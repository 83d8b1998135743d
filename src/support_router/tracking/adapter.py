"""Tracking adapter: one bounded lookup normalized into a TrackingSnapshot."""

from __future__ import annotations

import asyncio
import time
from datetime import datetime

from support_router.exceptions import TrackingUnavailable
from support_router.models.domain import TrackingScan, TrackingSnapshot
from support_router.observability.logger import get_logger
from support_router.protocols.tracking import TrackingProvider

logger = get_logger("tracking")


class TrackingAdapter:
    """Initiates a lookup and polls until done or the ceiling elapses.

    After the ceiling one final fetch is made regardless of completion and
    whatever shipment data it holds is returned. Snapshots are never cached here.
    """

    def __init__(
        self,
        provider: TrackingProvider,
        poll_interval_ms: int = 500,
        max_poll_ms: int = 4000,
        default_destination: str | None = None,
        language: str = "en",
    ) -> None:
        self._provider = provider
        self._interval = poll_interval_ms / 1000
        self._max_poll = max_poll_ms / 1000
        self._default_destination = default_destination
        self._language = language

    async def track_once(
        self, tracking_id: str, destination_hint: str | None = None
    ) -> TrackingSnapshot:
        destination = (destination_hint or "").strip() or self._default_destination
        initial = await self._provider.initiate(tracking_id, destination, self._language)

        if initial.get("shipments"):
            logger.info("tracking_cached", tracking_id=tracking_id)
            return _normalize(initial, tracking_id)

        uuid = initial.get("uuid")
        if not uuid:
            error = initial.get("error")
            detail = f"{error} {initial.get('description') or ''}".strip() if error else ""
            raise TrackingUnavailable(
                f"Tracking init error: {detail}" if detail else "Tracking request returned no uuid"
            )

        started = time.monotonic()
        deadline = started + self._max_poll
        polls = 0
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                break
            try:
                result = await asyncio.wait_for(self._provider.fetch(uuid), timeout=remaining)
            except asyncio.TimeoutError:
                break
            polls += 1
            if result.get("done"):
                logger.info("tracking_done", tracking_id=tracking_id, polls=polls)
                return _normalize(result, tracking_id)
            await asyncio.sleep(max(0.0, min(self._interval, deadline - time.monotonic())))

        final = await self._provider.fetch(uuid)
        logger.info(
            "tracking_ceiling_reached",
            tracking_id=tracking_id,
            polls=polls,
            done=bool(final.get("done")),
            elapsed_ms=round((time.monotonic() - started) * 1000, 2),
        )
        if not final.get("shipments"):
            raise TrackingUnavailable("Tracking unresolved after poll ceiling")
        return _normalize(final, tracking_id)


def _normalize(raw: dict, tracking_id: str) -> TrackingSnapshot:
    try:
        return summarize_shipment(raw, tracking_id)
    except (AttributeError, TypeError, ValueError, KeyError) as e:
        logger.warning("tracking_payload_unusable", tracking_id=tracking_id, error=str(e))
        raise TrackingUnavailable(f"Unusable tracking payload: {e}") from e


def summarize_shipment(raw: dict, tracking_id: str) -> TrackingSnapshot:
    shipments = raw.get("shipments")
    if isinstance(shipments, list):
        usable = [s for s in shipments if isinstance(s, dict)]
        if shipments and not usable:
            raise ValueError("no shipment object in payload")
        shipment = usable[0] if usable else {}
    elif isinstance(shipments, dict):
        shipment = shipments
    else:
        shipment = raw

    checkpoints = next(
        (
            shipment[key]
            for key in ("checkpoints", "events", "states")
            if isinstance(shipment.get(key), list)
        ),
        [],
    )
    dated = []
    for cp in checkpoints:
        if not isinstance(cp, dict):
            continue
        when = _first(cp.get("time"), cp.get("datetime"), cp.get("date"))
        scan = TrackingScan(
            time=when,
            location=_first(cp.get("location"), cp.get("place")),
            message=_first(cp.get("message"), cp.get("status"), cp.get("description")),
            status=_first(cp.get("status"), cp.get("substatus")),
        )
        dated.append((_timestamp(when or _first(cp.get("timestamp"))), scan))
    dated.sort(key=lambda pair: pair[0], reverse=True)
    scans = [scan for _, scan in dated]
    latest = scans[0] if scans else None

    detected = shipment.get("detectedCarrier")
    detected_name = detected.get("name") if isinstance(detected, dict) else None

    return TrackingSnapshot(
        tracking_id=tracking_id,
        carrier=_first(
            shipment.get("carrier"), shipment.get("courier"), shipment.get("provider"), detected_name
        ),
        status=_first(
            shipment.get("status"), shipment.get("statusText"), shipment.get("trackingStatus")
        ),
        substatus=_first(shipment.get("substatus"), shipment.get("subStatus")),
        eta=_first(
            shipment.get("eta"), shipment.get("estimatedDeliveryDate"), shipment.get("expected")
        ),
        last_event=_first(
            shipment.get("lastEvent"),
            shipment.get("latestEvent"),
            latest.message if latest else None,
            latest.status if latest else None,
        ),
        last_location=_first(
            shipment.get("lastLocation"),
            shipment.get("latestLocation"),
            latest.location if latest else None,
        ),
        updated_at=_first(
            shipment.get("lastUpdate"),
            shipment.get("updatedAt"),
            shipment.get("timestamp"),
            latest.time if latest else None,
        ),
        scans=scans,
    )


def _first(*values) -> str | None:
    for v in values:
        if v is None or v == "" or isinstance(v, (dict, list)):
            continue
        return str(v)
    return None


def _timestamp(value: str | None) -> float:
    if not value:
        return 0.0
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).timestamp()
    except ValueError:
        return 0.0
