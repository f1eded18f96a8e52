"""
File: tech_pulse/models.py
Internal data structures used during fetching and aggregation.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional


JsonDict = Dict[str, Any]


@dataclass(frozen=True)
class RawItem:
    """An item record as served by the upstream API.

    Every field is optional; the upstream omits keys freely depending on the
    item type (jobs have no descendants, Ask HN posts have no url, ...).
    """

    id: Optional[int] = None
    title: Optional[str] = None
    url: Optional[str] = None
    by: Optional[str] = None
    score: Optional[int] = None
    descendants: Optional[int] = None
    time: Optional[int] = None  # epoch seconds
    type: Optional[str] = None

    @classmethod
    def from_json(cls, data: Optional[JsonDict]) -> Optional["RawItem"]:
        """Build a RawItem from a decoded payload, ignoring unknown keys.

        A JSON ``null`` body (deleted or unavailable item) yields None.
        """
        if data is None:
            return None
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass(frozen=True)
class Story:
    """Canonical story record produced by the normalizer."""

    id: int
    title: Optional[str]
    url: str
    author: Optional[str]
    score: int
    comments: int
    time: str  # ISO-8601, millisecond precision, "Z" suffix
    type: Optional[str]


__all__ = ["RawItem", "Story", "JsonDict"]
