"""Tests for the entrypoint registry."""

import pytest
from pydantic import ValidationError

from tech_pulse.main import ENTRYPOINTS, UnknownEntrypoint, build_agent, describe_agent, invoke


def test_registered_entrypoints_and_prices():
    prices = {key: ep.price for key, ep in ENTRYPOINTS.items()}
    assert prices == {
        "overview": 0,
        "top": 1000,
        "best": 1000,
        "new": 1000,
        "ask": 2000,
        "show": 2000,
        "report": 5000,
    }


def test_describe_agent_publishes_input_schemas():
    agent = describe_agent()
    assert agent["name"] == "tech-pulse-agent"
    report = next(ep for ep in agent["entrypoints"] if ep["key"] == "report")
    assert "storiesPerCategory" in report["input"]["properties"]


@pytest.mark.asyncio
async def test_unknown_entrypoint():
    with pytest.raises(UnknownEntrypoint):
        await invoke("polls", {})


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "key, payload",
    [
        ("top", {"limit": 0}),
        ("top", {"limit": 31}),
        ("ask", {"limit": 21}),
        ("show", {"limit": 25}),
        ("report", {"storiesPerCategory": 11}),
    ],
)
async def test_out_of_bounds_input_is_rejected(key, payload, fake_hn):
    hn = fake_hn()
    async with hn.client() as client:
        with pytest.raises(ValidationError):
            await invoke(key, payload, client=client)
    assert hn.requested == []


@pytest.mark.asyncio
async def test_listing_entrypoint_defaults_to_ten(fake_hn, make_item):
    ids = list(range(1, 16))
    hn = fake_hn(listings={"beststories": ids}, items={sid: make_item(sid) for sid in ids})
    async with hn.client() as client:
        output = await invoke("best", None, client=client)

    assert output["category"] == "best"
    assert output["count"] == 10
    assert "fetchedAt" in output
    assert set(output["stories"][0]) == {
        "id", "title", "url", "author", "score", "comments", "time", "type", "timeAgo",
    }


@pytest.mark.asyncio
async def test_show_entrypoint_adds_discussion_links(fake_hn, make_item):
    hn = fake_hn(listings={"showstories": [3, 4]}, items={3: make_item(3), 4: make_item(4)})
    async with hn.client() as client:
        output = await invoke("show", {"limit": 1}, client=client)

    assert output["count"] == 1
    assert output["description"] == "Show HN - Projects and products from the community"
    assert output["stories"][0]["hnLink"] == "https://news.ycombinator.com/item?id=3"


@pytest.mark.asyncio
async def test_report_entrypoint(fake_hn, make_item):
    hn = fake_hn(listings={"topstories": [1, 2]}, items={1: make_item(1), 2: make_item(2)})
    async with hn.client() as client:
        output = await invoke("report", {"storiesPerCategory": 1}, client=client)

    assert output["report"]["storiesPerCategory"] == 1
    assert output["categories"]["top"]["count"] == 1
    assert output["insights"]["averageScore"] == 100


@pytest.mark.asyncio
async def test_overview_entrypoint(fake_hn):
    hn = fake_hn(listings={"newstories": [1, 2, 3]})
    async with hn.client() as client:
        output = await invoke("overview", {}, client=client)
    assert output["summary"]["newStoriesCount"] == 3
    assert output["topStoryPreview"] is None


def test_build_agent_configures_logging(monkeypatch):
    configured = []
    monkeypatch.setattr("tech_pulse.main.configure_logging", lambda: configured.append(True))
    agent = build_agent()
    assert configured == [True]
    assert len(agent["entrypoints"]) == len(ENTRYPOINTS)
