"""
Shared utility functions for the tech pulse aggregator.
"""
from __future__ import annotations

import asyncio
import math
from datetime import datetime, timezone
from typing import Any, Awaitable, List, Optional

from dateutil import parser as dateparser


def now_utc() -> datetime:
    """
    Get current UTC datetime with timezone information.

    Returns:
        Current UTC datetime
    """
    return datetime.now(timezone.utc)


def isoformat_z(moment: datetime) -> str:
    """
    Format a datetime as an ISO-8601 UTC string with millisecond precision.

    Args:
        moment: Timezone-aware (or naive UTC) datetime

    Returns:
        String such as ``2024-01-01T00:00:00.000Z``
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def time_ago(timestamp: str, now: Optional[datetime] = None) -> str:
    """
    Render an ISO timestamp as a short relative label.

    Args:
        timestamp: ISO-8601 instant
        now: Reference time (defaults to the current UTC time)

    Returns:
        Label such as "45s ago", "2m ago", "2h ago" or "2d ago"
    """
    moment = dateparser.isoparse(timestamp)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    reference = now or now_utc()

    seconds = math.floor((reference - moment).total_seconds())
    if seconds < 60:
        return f"{seconds}s ago"
    if seconds < 3600:
        return f"{seconds // 60}m ago"
    if seconds < 86400:
        return f"{seconds // 3600}h ago"
    return f"{seconds // 86400}d ago"


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (2.5 -> 3)."""
    return math.floor(value + 0.5)


def clamp(value: int, lower: int, upper: int) -> int:
    return max(lower, min(upper, value))


async def gather_or_cancel(*aws: Awaitable[Any]) -> List[Any]:
    """
    Run awaitables concurrently; on the first failure cancel the rest.

    Args:
        *aws: Coroutines or futures to run together

    Returns:
        Results in argument order

    Raises:
        The first exception raised by any awaitable, after every sibling
        task has been cancelled and awaited
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
