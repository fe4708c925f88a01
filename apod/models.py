"""Pydantic models and enums for the APOD resolver."""

from __future__ import annotations

import re
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from apod.errors import InvalidDateError

DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")

MediaType = Literal["image", "video"]


class StrategyName(str, Enum):
    """Lookup strategies, in the order the orchestrator tries them."""

    PRIMARY_API = "primary-api"
    PAGE_SCRAPE = "page-scrape"
    ARCHIVED_SNAPSHOT = "archived-snapshot"
    KEYWORD_SEARCH = "keyword-search"


# Strategies whose result is only topically related to the requested date
BEST_EFFORT_SOURCES = {StrategyName.KEYWORD_SEARCH}


class ResolutionRequest(BaseModel):
    """A single `resolve` call: one calendar date in YYYY-MM-DD form."""

    date: str

    @classmethod
    def parse(cls, date: object) -> "ResolutionRequest":
        """Build a request, raising InvalidDateError for anything malformed."""
        if not isinstance(date, str) or not DATE_PATTERN.fullmatch(date):
            raise InvalidDateError(date)
        return cls(date=date)

    @property
    def year(self) -> str:
        return self.date[:4]

    @property
    def page_slug(self) -> str:
        """Two-digit year + month + day, e.g. ``251001`` for 2025-10-01."""
        year, month, day = self.date.split("-")
        return f"{year[-2:]}{month}{day}"


class MediaResult(BaseModel):
    """Normalized output of every lookup strategy."""

    date: str
    title: Optional[str] = None
    explanation: Optional[str] = None
    media_type: MediaType = "image"
    url: str
    hdurl: Optional[str] = None
    source: StrategyName
    copyright: Optional[str] = None
    thumbnail_url: Optional[str] = None
    cached: bool = False

    @field_validator("url")
    @classmethod
    def url_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("url must be non-empty")
        return v

    @property
    def confidence(self) -> str:
        """``best-effort`` for results not guaranteed to match the date."""
        return "best-effort" if self.source in BEST_EFFORT_SOURCES else "exact"


class MediaLink(BaseModel):
    """One candidate link from the media index."""

    href: str
    render: Optional[str] = None


class AssetResult(BaseModel):
    """Best direct link for a media-index identifier plus every raw candidate."""

    best: Optional[str] = None
    items: List[MediaLink] = Field(default_factory=list)
    type: MediaType = "image"
    source: Literal["asset-resolver"] = "asset-resolver"
    rationale: str = ""
