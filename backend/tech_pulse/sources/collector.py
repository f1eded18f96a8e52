"""
Category pipeline: listing fetch, batch resolution and per-story enrichment.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

import httpx

from tech_pulse.config import Settings
from tech_pulse.models import Story
from tech_pulse.schemas import CategoryResult, EnrichedStory
from tech_pulse.sources.common import discussion_url
from tech_pulse.sources.hackernews import HackerNewsFetcher, open_fetcher
from tech_pulse.utils import clamp, isoformat_z, now_utc, time_ago

logger = logging.getLogger(__name__)

CATEGORY_TITLES = {
    "top": "Top Stories",
    "best": "Best Stories",
    "new": "New Stories",
    "ask": "Ask HN",
    "show": "Show HN",
    "job": "Jobs",
}

CATEGORY_DESCRIPTIONS = {
    "ask": "Ask HN - Community questions and discussions",
    "show": "Show HN - Projects and products from the community",
}

# Categories whose stories also carry a link to their comment thread
DISCUSSION_CATEGORIES = frozenset({"ask", "show"})


def enrich_story(
    story: Story,
    category: str,
    now: datetime,
    settings: Optional[Settings] = None,
) -> EnrichedStory:
    """
    Attach presentation-time fields to a story.

    Args:
        story: Normalized story
        category: Category the story was listed under
        now: Reference time for the relative label
        settings: Settings for the discussion link

    Returns:
        EnrichedStory with timeAgo, plus hnLink for ask/show
    """
    extra = {}
    if category in DISCUSSION_CATEGORIES:
        extra["hn_link"] = discussion_url(story.id, settings)

    return EnrichedStory(
        id=story.id,
        title=story.title,
        url=story.url,
        author=story.author,
        score=story.score,
        comments=story.comments,
        time=story.time,
        type=story.type,
        time_ago=time_ago(story.time, now),
        **extra,
    )


async def collect_category(
    fetcher: HackerNewsFetcher,
    category: str,
    limit: int,
    now: Optional[datetime] = None,
) -> CategoryResult:
    """
    Fetch, resolve and enrich the leading stories of one category.

    Args:
        fetcher: Upstream fetcher for this invocation
        category: Category key (top, best, new, ask, show, job)
        limit: Number of leading ids to resolve
        now: Reference time for labels (defaults to assembly time)

    Returns:
        CategoryResult whose count may be below ``limit`` when items are absent
    """
    ids = await fetcher.fetch_ids(category)
    limit = clamp(limit, 0, fetcher.settings.MAX_STORIES_PER_CATEGORY)
    stories = await fetcher.fetch_stories(ids, limit)

    assembled_at = now or now_utc()
    enriched: List[EnrichedStory] = [
        enrich_story(s, category, assembled_at, fetcher.settings) for s in stories
    ]
    logger.info("Collected %d/%d %s stories", len(enriched), min(limit, len(ids)), category)

    extra = {}
    if category in CATEGORY_DESCRIPTIONS:
        extra["description"] = CATEGORY_DESCRIPTIONS[category]

    return CategoryResult(
        category=category,
        title=CATEGORY_TITLES[category],
        count=len(enriched),
        stories=enriched,
        fetched_at=isoformat_z(assembled_at),
        **extra,
    )


async def run_category(
    category: str,
    limit: int,
    client: httpx.AsyncClient | None = None,
) -> CategoryResult:
    """Run the category pipeline with its own upstream client unless one is given."""
    async with open_fetcher(client) as fetcher:
        return await collect_category(fetcher, category, limit)
