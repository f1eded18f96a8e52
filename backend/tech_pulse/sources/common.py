"""
Common helpers and errors shared by the upstream fetchers.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from tech_pulse.config import Settings, get_settings
from tech_pulse.utils import isoformat_z


class UpstreamUnavailable(RuntimeError):
    """A listing or item request failed with a bad status or a transport error."""

    def __init__(self, url: str, status_code: Optional[int] = None, reason: str = ""):
        self.url = url
        self.status_code = status_code
        if status_code is not None:
            message = f"API error: {status_code} for {url}"
        else:
            message = f"API unreachable: {url} ({reason or 'transport error'})"
        super().__init__(message)


class UnknownCategory(KeyError):
    """Raised for a category key with no listing endpoint."""


def discussion_url(item_id: Optional[int], settings: Optional[Settings] = None) -> str:
    """
    Build the public discussion page URL for an item.

    Args:
        item_id: Upstream item id
        settings: Settings to read HN_ITEM_URL from (defaults to the process settings)

    Returns:
        URL of the item's comment thread
    """
    settings = settings or get_settings()
    return f"{settings.HN_ITEM_URL}{item_id}"


def epoch_to_iso(epoch_seconds: Optional[float]) -> str:
    """
    Convert upstream epoch seconds to an ISO-8601 UTC string.

    Args:
        epoch_seconds: Seconds since the epoch, or None

    Returns:
        Millisecond-precision timestamp; the epoch itself when input is None
        or outside the representable range
    """
    millis = int((epoch_seconds or 0) * 1000)
    try:
        moment = datetime.fromtimestamp(millis / 1000, tz=timezone.utc)
    except (OverflowError, ValueError, OSError):
        moment = datetime.fromtimestamp(0, tz=timezone.utc)
    return isoformat_z(moment)
