"""Heuristics deciding whether a message warrants a tracking lookup.

The keyword list is English-only and fixed; messages in other languages only
trigger enrichment through an intent whose name contains "track".
"""

from __future__ import annotations

import re

TRACKING_KEYWORDS = ("track", "parcel", "package", "shipment", "delivery status")

# 10-22 alphanumerics with at least one digit, so long plain words never qualify.
_TRACKING_ID_RE = re.compile(r"\b(?=[A-Za-z0-9]*\d)[A-Za-z0-9]{10,22}\b")


def find_tracking_id(text: str) -> str | None:
    m = _TRACKING_ID_RE.search(text or "")
    return m.group(0) if m else None


def is_plausible_tracking_id(value: str) -> bool:
    return bool(_TRACKING_ID_RE.fullmatch((value or "").strip()))


def mentions_tracking(text: str, intent_name: str | None = None) -> bool:
    lower = (text or "").lower()
    if any(k in lower for k in TRACKING_KEYWORDS):
        return True
    return bool(intent_name) and "track" in intent_name.lower()


def tracking_request(
    text: str,
    intent_name: str | None = None,
    explicit_id: str | None = None,
) -> str | None:
    """Return the tracking id to look up, or None when enrichment should not run."""
    if not mentions_tracking(text, intent_name):
        return None
    if explicit_id and is_plausible_tracking_id(explicit_id):
        return explicit_id.strip()
    return find_tracking_id(text)
