"""Shared fixtures for the tech pulse test suite."""

import asyncio
import json

import httpx
import pytest

from tech_pulse.config import get_settings


@pytest.fixture(autouse=True)
def fresh_settings():
    """Settings are cached per process; rebuild them for every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class FakeHackerNews:
    """In-memory stand-in for the Firebase API, served through httpx.MockTransport."""

    def __init__(
        self,
        listings=None,
        items=None,
        delays=None,
        item_failures=None,
        listing_failures=None,
        unreachable=None,
    ):
        self.listings = listings or {}
        self.items = items or {}
        self.delays = delays or {}
        self.item_failures = item_failures or {}
        self.listing_failures = listing_failures or {}
        self.unreachable = set(unreachable or ())
        self.requested = []
        self.completed = []
        self.in_flight = 0
        self.max_in_flight = 0

    @staticmethod
    def _json(value):
        return httpx.Response(
            200,
            content=json.dumps(value).encode(),
            headers={"content-type": "application/json"},
        )

    async def handler(self, request):
        name = request.url.path.split("/v0/", 1)[1][: -len(".json")]
        self.requested.append(name)

        if name in self.unreachable:
            raise httpx.ConnectError("connection refused", request=request)

        if name.startswith("item/"):
            item_id = int(name.split("/")[1])
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
            try:
                await asyncio.sleep(self.delays.get(item_id, 0))
            finally:
                self.in_flight -= 1
            self.completed.append(item_id)
            if item_id in self.item_failures:
                return httpx.Response(self.item_failures[item_id])
            return self._json(self.items.get(item_id))

        if name in self.listing_failures:
            return httpx.Response(self.listing_failures[name])
        return self._json(self.listings.get(name, []))

    def client(self):
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def make_item():
    """Factory fixture for upstream item payloads with sensible defaults."""
    def _make(item_id, **overrides):
        item = {
            "id": item_id,
            "title": f"Story {item_id}",
            "url": f"https://example.com/{item_id}",
            "by": "pg",
            "score": 100,
            "descendants": 10,
            "time": 1700000000,
            "type": "story",
        }
        item.update(overrides)
        return {k: v for k, v in item.items() if v is not None}
    return _make


@pytest.fixture
def fake_hn():
    return FakeHackerNews
