# tech_pulse/schemas.py
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Payload(BaseModel):
    """Response model base: camelCase on the wire, immutable once built."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_payload(self) -> Dict[str, Any]:
        # Optional keys such as hnLink are omitted unless explicitly set
        return self.model_dump(by_alias=True, exclude_unset=True)


class EnrichedStory(Payload):
    id: int
    title: Optional[str] = None
    url: str
    author: Optional[str] = None
    score: int = 0
    comments: int = 0
    time: str
    type: Optional[str] = None
    time_ago: str
    hn_link: Optional[str] = None            # ask/show only


class CategoryResult(Payload):
    category: str
    title: str
    description: Optional[str] = None
    count: int
    stories: List[EnrichedStory]
    fetched_at: str


class MostDiscussed(Payload):
    title: Optional[str] = None
    comments: int
    score: int


class Insights(Payload):
    average_score: int
    average_comments: int
    most_discussed: Optional[MostDiscussed] = None


class ReportMeta(Payload):
    generated_at: str
    stories_per_category: int


class Report(Payload):
    report: ReportMeta
    insights: Insights
    categories: Dict[str, CategoryResult]
    data_source: str


class OverviewSummary(Payload):
    top_stories_count: int
    best_stories_count: int
    new_stories_count: int
    ask_hn_count: int = Field(alias="askHNCount")
    show_hn_count: int = Field(alias="showHNCount")


class TopStoryPreview(Payload):
    title: Optional[str] = None
    score: int
    comments: int
    time_ago: str


class Overview(Payload):
    summary: OverviewSummary
    top_story_preview: Optional[TopStoryPreview] = None
    data_source: str
    fetched_at: str
