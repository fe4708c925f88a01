"""apod.strategies: the ordered fallback chain."""

from __future__ import annotations

from typing import List

from apod.cache import TTLCache
from apod.config import Settings
from apod.http import SafeHTTPClient
from apod.strategies.base import BaseStrategy
from apod.strategies.keyword_search import KeywordSearchStrategy
from apod.strategies.page_scrape import PageScrapeStrategy, extract_page, page_url_for
from apod.strategies.primary_api import PrimaryApiStrategy
from apod.strategies.snapshot import ArchivedSnapshotStrategy

__all__ = [
    "default_strategies",
    "BaseStrategy",
    "PrimaryApiStrategy",
    "PageScrapeStrategy",
    "ArchivedSnapshotStrategy",
    "KeywordSearchStrategy",
    "extract_page",
    "page_url_for",
]


def default_strategies(
    config: Settings,
    client: SafeHTTPClient,
    cache: TTLCache | None = None,
) -> List[BaseStrategy]:
    """Strategies in priority order: api → page → snapshot → search."""
    return [
        PrimaryApiStrategy(config, client, cache),
        PageScrapeStrategy(config, client, cache),
        ArchivedSnapshotStrategy(config, client, cache),
        KeywordSearchStrategy(config, client, cache),
    ]
