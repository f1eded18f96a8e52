"""
Hacker News fetcher: category listings and item details from the Firebase API.
"""
from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Any, AsyncIterator, Iterable, List, Optional

import httpx

from tech_pulse.config import Settings, get_settings
from tech_pulse.models import RawItem, Story
from tech_pulse.sources.common import (
    UnknownCategory,
    UpstreamUnavailable,
    discussion_url,
    epoch_to_iso,
)
from tech_pulse.utils import gather_or_cancel

logger = logging.getLogger(__name__)

# Category key -> listing endpoint name
LISTINGS = {
    "top": "topstories",
    "best": "beststories",
    "new": "newstories",
    "ask": "askstories",
    "show": "showstories",
    "job": "jobstories",
}


def normalize_story(raw: Optional[RawItem], settings: Settings | None = None) -> Optional[Story]:
    """
    Map an upstream item onto the canonical Story shape.

    Args:
        raw: Parsed upstream item, or None for a deleted/unavailable item
        settings: Settings for the discussion URL fallback

    Returns:
        Story with every optional field resolved, or None when the item is
        absent or carries no id
    """
    if raw is None or raw.id is None:
        return None

    return Story(
        id=raw.id,
        title=raw.title,
        url=raw.url or discussion_url(raw.id, settings),
        author=raw.by,
        score=raw.score or 0,
        comments=raw.descendants or 0,
        time=epoch_to_iso(raw.time),
        type=raw.type,
    )


def create_client(settings: Settings | None = None) -> httpx.AsyncClient:
    """Open an HTTP client configured for the upstream API."""
    settings = settings or get_settings()
    return httpx.AsyncClient(headers=settings.http_headers, timeout=settings.REQUEST_TIMEOUT)


@contextlib.asynccontextmanager
async def open_fetcher(client: httpx.AsyncClient | None = None) -> AsyncIterator["HackerNewsFetcher"]:
    """
    Yield a fetcher bound to ``client``, or to a fresh client closed on exit.

    A caller-supplied client is left open.
    """
    if client is not None:
        yield HackerNewsFetcher(client)
        return
    async with create_client() as own_client:
        yield HackerNewsFetcher(own_client)


class HackerNewsFetcher:
    """Fetches story listings and story details from the Hacker News API."""

    def __init__(self, client: httpx.AsyncClient, settings: Settings | None = None):
        self.client = client
        self.settings = settings or get_settings()

    @property
    def base_url(self) -> str:
        return self.settings.HN_API_BASE.rstrip("/")

    async def fetch_json(self, path: str) -> Any:
        """
        GET ``{base}/{path}.json`` and decode the body.

        Raises:
            UpstreamUnavailable: On a non-success status or a transport error
        """
        url = f"{self.base_url}/{path}.json"
        try:
            response = await self.client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning("Upstream returned %s for %s", e.response.status_code, url)
            raise UpstreamUnavailable(url, status_code=e.response.status_code) from e
        except httpx.TransportError as e:
            logger.warning("Upstream request failed for %s: %s", url, e)
            raise UpstreamUnavailable(url, reason=str(e)) from e
        return response.json()

    async def fetch_ids(self, category: str) -> List[int]:
        """
        Fetch the ordered id listing for a category.

        Args:
            category: One of the LISTINGS keys (e.g. 'top', 'ask')

        Returns:
            Story ids in upstream ranking order
        """
        listing = LISTINGS.get(category)
        if listing is None:
            raise UnknownCategory(category)
        ids = await self.fetch_json(listing)
        return list(ids or [])

    async def fetch_story(self, story_id: int) -> Optional[Story]:
        """Resolve one id into a Story, or None when the item no longer exists."""
        data = await self.fetch_json(f"item/{story_id}")
        logger.debug("Fetched item %s (%s)", story_id, "present" if data else "absent")
        return normalize_story(RawItem.from_json(data), self.settings)

    async def fetch_stories(self, ids: Iterable[int], limit: int) -> List[Story]:
        """
        Resolve the first ``limit`` ids concurrently.

        Args:
            ids: Story ids in ranking order
            limit: Number of leading ids to resolve

        Returns:
            Stories in the same order as ``ids``, absent items dropped
        """
        story_ids = list(ids)[:limit]
        results: List[Optional[Story]] = [None] * len(story_ids)

        max_concurrency = self.settings.MAX_CONCURRENCY
        limiter = asyncio.Semaphore(max_concurrency) if max_concurrency else contextlib.nullcontext()

        async def resolve(index: int, story_id: int) -> None:
            async with limiter:
                results[index] = await self._fetch_batch_item(story_id)

        await gather_or_cancel(*(resolve(i, sid) for i, sid in enumerate(story_ids)))
        return [story for story in results if story is not None]

    async def _fetch_batch_item(self, story_id: int) -> Optional[Story]:
        if not self.settings.SKIP_FAILED_ITEMS:
            return await self.fetch_story(story_id)
        try:
            return await self.fetch_story(story_id)
        except UpstreamUnavailable as e:
            logger.warning("Skipping item %s: %s", story_id, e)
            return None
