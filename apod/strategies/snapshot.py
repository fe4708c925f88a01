"""Wayback Machine fallback: scrape the closest archived copy of the APOD page."""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Optional

from apod.cache import snapshot_key
from apod.models import MediaResult, ResolutionRequest, StrategyName
from apod.strategies.page_scrape import PageScrapeStrategy, page_url_for

logger = logging.getLogger(__name__)

_TIMESTAMP_RE = re.compile(r"/web/(\d+)/")


def raw_capture_url(snapshot_url: str) -> str:
    """Point a Wayback url at the undecorated capture (no toolbar markup).

    ``/web/20251002031500/https://...`` becomes ``/web/20251002031500id_/https://...``.
    Urls that already carry a modifier are returned unchanged.
    """
    return _TIMESTAMP_RE.sub(r"/web/\1id_/", snapshot_url, count=1)


class ArchivedSnapshotStrategy(PageScrapeStrategy):
    """Finds a snapshot via the availability API, then reuses the page extractor."""

    name = StrategyName.ARCHIVED_SNAPSHOT

    def fetch(self, request: ResolutionRequest) -> Optional[MediaResult]:
        page_url = page_url_for(request, self.config.apod_page_base)
        snapshot_url = self.find_snapshot(page_url)
        if not snapshot_url:
            logger.info("snapshot_unavailable", extra={"url": page_url})
            return None
        # Relative links in the capture resolve against the capture url
        raw_url = raw_capture_url(snapshot_url)
        return self.scrape(request, raw_url, base_url=raw_url)

    def find_snapshot(self, page_url: str) -> Optional[str]:
        """Return the closest available snapshot url for *page_url*, or None."""
        key = snapshot_key(page_url)
        if self.cache is not None:
            cached = self.cache.get(key)
            if cached:
                return cached

        response = self.client.get(
            self.config.wayback_available_url,
            params={"url": page_url},
            timeout=self.config.wayback_timeout,
        )
        data: Dict[str, Any] = response.json()
        snapshots = data.get("archived_snapshots") if isinstance(data, dict) else None
        closest = snapshots.get("closest") if isinstance(snapshots, dict) else None
        if not isinstance(closest, dict) or not closest.get("available"):
            return None
        snapshot_url = str(closest.get("url") or "").strip()
        if not snapshot_url:
            return None

        if self.cache is not None:
            self.cache.set(key, snapshot_url, self.config.cache_ttl_seconds)
        return snapshot_url
