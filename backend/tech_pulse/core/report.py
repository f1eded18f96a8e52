"""
Cross-category report and overview assembly.

The report runs the category pipeline for five feeds at once and derives a
small set of insights from the results:

* average score and average comments over the top and best stories,
* the most discussed top story.

Any category failure fails the whole report; a partially populated report is
never returned.
"""
from __future__ import annotations

import logging
from typing import Dict, Optional, Sequence

import httpx

from tech_pulse.schemas import (
    CategoryResult,
    EnrichedStory,
    Insights,
    MostDiscussed,
    Overview,
    OverviewSummary,
    Report,
    ReportMeta,
    TopStoryPreview,
)
from tech_pulse.sources.collector import collect_category
from tech_pulse.sources.hackernews import HackerNewsFetcher, open_fetcher
from tech_pulse.utils import gather_or_cancel, isoformat_z, now_utc, round_half_up, time_ago

logger = logging.getLogger(__name__)

DATA_SOURCE = "Hacker News API (live)"

# Report key -> category key
REPORT_CATEGORIES = {
    "top": "top",
    "best": "best",
    "ask": "ask",
    "show": "show",
    "jobs": "job",
}

OVERVIEW_CATEGORIES = ("top", "best", "new", "ask", "show")


def calculate_average(values: Sequence[int]) -> int:
    """
    Arithmetic mean rounded half-up.

    Args:
        values: Integer samples

    Returns:
        Rounded mean, or 0 for an empty sequence
    """
    if not values:
        return 0
    return round_half_up(sum(values) / len(values))


def find_most_discussed(stories: Sequence[EnrichedStory]) -> Optional[EnrichedStory]:
    """Story with the most comments; the earliest one wins a tie."""
    if not stories:
        return None
    return sorted(stories, key=lambda s: s.comments or 0, reverse=True)[0]


def build_insights(top: CategoryResult, best: CategoryResult) -> Insights:
    """
    Compute report insights.

    Args:
        top: Top stories category
        best: Best stories category

    Returns:
        Insights with averages over top+best and the most discussed top story
    """
    pooled = [*top.stories, *best.stories]
    most_discussed = find_most_discussed(top.stories)

    return Insights(
        average_score=calculate_average([s.score or 0 for s in pooled]),
        average_comments=calculate_average([s.comments or 0 for s in pooled]),
        most_discussed=MostDiscussed(
            title=most_discussed.title,
            comments=most_discussed.comments,
            score=most_discussed.score,
        ) if most_discussed else None,
    )


async def collect_report(fetcher: HackerNewsFetcher, limit: int) -> Report:
    """
    Build the full report with an existing fetcher.

    Args:
        fetcher: Upstream fetcher for this invocation
        limit: Stories per category

    Returns:
        Report covering top, best, ask, show and jobs
    """
    results = await gather_or_cancel(
        *(collect_category(fetcher, category, limit) for category in REPORT_CATEGORIES.values())
    )
    categories: Dict[str, CategoryResult] = dict(zip(REPORT_CATEGORIES.keys(), results))

    insights = build_insights(categories["top"], categories["best"])
    logger.info(
        "Report built: %d stories across %d categories",
        sum(c.count for c in categories.values()),
        len(categories),
    )

    return Report(
        report=ReportMeta(generated_at=isoformat_z(now_utc()), stories_per_category=limit),
        insights=insights,
        categories=categories,
        data_source=DATA_SOURCE,
    )


async def build_report(limit_per_category: int, client: httpx.AsyncClient | None = None) -> Report:
    async with open_fetcher(client) as fetcher:
        return await collect_report(fetcher, limit_per_category)


async def collect_overview(fetcher: HackerNewsFetcher) -> Overview:
    """
    Listing sizes for the main feeds plus a preview of the current top story.

    Args:
        fetcher: Upstream fetcher for this invocation

    Returns:
        Overview; the preview is None when there is no top story to show
    """
    top_ids, best_ids, new_ids, ask_ids, show_ids = await gather_or_cancel(
        *(fetcher.fetch_ids(category) for category in OVERVIEW_CATEGORIES)
    )

    top_story = await fetcher.fetch_story(top_ids[0]) if top_ids else None
    now = now_utc()

    preview = None
    if top_story is not None:
        preview = TopStoryPreview(
            title=top_story.title,
            score=top_story.score,
            comments=top_story.comments,
            time_ago=time_ago(top_story.time, now),
        )

    return Overview(
        summary=OverviewSummary(
            top_stories_count=len(top_ids),
            best_stories_count=len(best_ids),
            new_stories_count=len(new_ids),
            ask_hn_count=len(ask_ids),
            show_hn_count=len(show_ids),
        ),
        top_story_preview=preview,
        data_source=DATA_SOURCE,
        fetched_at=isoformat_z(now),
    )


async def build_overview(client: httpx.AsyncClient | None = None) -> Overview:
    async with open_fetcher(client) as fetcher:
        return await collect_overview(fetcher)
