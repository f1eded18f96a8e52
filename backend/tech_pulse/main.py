"""
Entrypoint registry: priced operations with validated inputs.

A host (HTTP server, payment gateway, agent runtime) calls ``invoke`` with an
entrypoint key and a raw payload and serializes the returned dict.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional, Type

import httpx
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from tech_pulse.config import configure_logging
from tech_pulse.core.report import build_overview, build_report
from tech_pulse.schemas import Payload
from tech_pulse.sources.collector import run_category

logger = logging.getLogger(__name__)

AGENT_NAME = "tech-pulse-agent"
AGENT_VERSION = "1.0.0"
AGENT_DESCRIPTION = (
    "Real-time tech news intelligence from Hacker News. Trending stories, "
    "top discussions, Ask HN, Show HN, and more."
)


class EntrypointInput(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class EmptyInput(EntrypointInput):
    pass


class ListingInput(EntrypointInput):
    limit: int = Field(10, ge=1, le=30)


class DiscussionInput(EntrypointInput):
    limit: int = Field(10, ge=1, le=20)


class ReportInput(EntrypointInput):
    stories_per_category: int = Field(5, ge=1, le=10)


Handler = Callable[[Any, Optional[httpx.AsyncClient]], Awaitable[Payload]]


@dataclass(frozen=True)
class Entrypoint:
    """A named operation; ``price`` is in base units (1_000_000 == $1)."""

    key: str
    description: str
    price: int
    input_model: Type[EntrypointInput]
    handler: Handler = field(repr=False)


class UnknownEntrypoint(KeyError):
    """Raised when invoking a key that is not registered."""


def _category_handler(category: str) -> Handler:
    async def handler(params: Any, client: Optional[httpx.AsyncClient]) -> Payload:
        return await run_category(category, params.limit, client=client)
    return handler


async def _overview_handler(params: EmptyInput, client: Optional[httpx.AsyncClient]) -> Payload:
    return await build_overview(client=client)


async def _report_handler(params: ReportInput, client: Optional[httpx.AsyncClient]) -> Payload:
    return await build_report(params.stories_per_category, client=client)


ENTRYPOINTS: Dict[str, Entrypoint] = {
    ep.key: ep
    for ep in (
        Entrypoint(
            key="overview",
            description="Free overview of current tech trends - try before you buy",
            price=0,
            input_model=EmptyInput,
            handler=_overview_handler,
        ),
        Entrypoint(
            key="top",
            description="Top trending stories on Hacker News right now",
            price=1000,
            input_model=ListingInput,
            handler=_category_handler("top"),
        ),
        Entrypoint(
            key="best",
            description="Best stories - highest voted stories over time",
            price=1000,
            input_model=ListingInput,
            handler=_category_handler("best"),
        ),
        Entrypoint(
            key="new",
            description="Latest stories just posted to Hacker News",
            price=1000,
            input_model=ListingInput,
            handler=_category_handler("new"),
        ),
        Entrypoint(
            key="ask",
            description="Ask HN threads - questions and discussions from the community",
            price=2000,
            input_model=DiscussionInput,
            handler=_category_handler("ask"),
        ),
        Entrypoint(
            key="show",
            description="Show HN threads - projects and products shared by the community",
            price=2000,
            input_model=DiscussionInput,
            handler=_category_handler("show"),
        ),
        Entrypoint(
            key="report",
            description="Comprehensive tech pulse report with top stories across all categories",
            price=5000,
            input_model=ReportInput,
            handler=_report_handler,
        ),
    )
}


def describe_agent() -> Dict[str, Any]:
    """Agent metadata and the entrypoint catalogue, ready to publish."""
    return {
        "name": AGENT_NAME,
        "version": AGENT_VERSION,
        "description": AGENT_DESCRIPTION,
        "entrypoints": [
            {
                "key": ep.key,
                "description": ep.description,
                "price": ep.price,
                "input": ep.input_model.model_json_schema(by_alias=True),
            }
            for ep in ENTRYPOINTS.values()
        ],
    }


async def invoke(
    key: str,
    payload: Optional[Dict[str, Any]] = None,
    client: httpx.AsyncClient | None = None,
) -> Dict[str, Any]:
    """
    Validate ``payload`` and run the entrypoint registered under ``key``.

    Args:
        key: Entrypoint key (overview, top, best, new, ask, show, report)
        payload: Raw input; missing fields take their defaults
        client: Optional upstream client, otherwise one is opened per call

    Returns:
        camelCase, JSON-ready output

    Raises:
        UnknownEntrypoint: If ``key`` is not registered
        pydantic.ValidationError: If the payload is out of bounds
        UpstreamUnavailable: If any upstream request fails
    """
    entrypoint = ENTRYPOINTS.get(key)
    if entrypoint is None:
        raise UnknownEntrypoint(key)

    params = entrypoint.input_model.model_validate(payload or {})
    logger.info("Invoking %s with %s", key, params.model_dump(by_alias=True))
    result = await entrypoint.handler(params, client)
    return result.to_payload()


def build_agent() -> Dict[str, Any]:
    """Configure logging and return the agent description for a host to mount."""
    configure_logging()
    agent = describe_agent()
    logger.info("%s %s ready with %d entrypoints", AGENT_NAME, AGENT_VERSION, len(ENTRYPOINTS))
    return agent
