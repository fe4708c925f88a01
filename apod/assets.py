"""Resolve a NASA Images API identifier to its best direct media link."""

from __future__ import annotations

import logging
import re
from typing import Any, List, NamedTuple, Optional
from urllib.parse import quote, urljoin

from apod.cache import TTLCache, asset_key
from apod.config import Settings
from apod.errors import InvalidAssetIdError
from apod.http import SafeHTTPClient
from apod.models import AssetResult, MediaLink, MediaType

logger = logging.getLogger(__name__)

_MOTION_RE = re.compile(r"\.(mp4|mov|webm)$", re.IGNORECASE)
_STILL_RE = re.compile(r"\.(jpg|jpeg|png|gif)$", re.IGNORECASE)


class RankedPick(NamedTuple):
    best: Optional[str]
    type: MediaType
    rationale: str


def rank_links(links: List[MediaLink]) -> RankedPick:
    """Pick the best link from an asset listing.

    Motion media always wins (first one listed). Otherwise the last still
    image is taken, since the index lists variants smallest to largest.
    """
    for link in links:
        if _MOTION_RE.search(link.href):
            return RankedPick(link.href, "video", "motion")

    stills = [link.href for link in links if _STILL_RE.search(link.href)]
    if stills:
        return RankedPick(stills[-1], "image", "largest-still")

    return RankedPick(None, "image", "no-direct-link")


class AssetResolver:
    """Looks up ``/asset/<id>`` and caches the ranked outcome.

    "Found but no direct link" outcomes are cached too: they reflect the
    asset's fixed structure. Fetch failures are not cached.
    """

    def __init__(
        self,
        config: Settings,
        cache: TTLCache,
        client: SafeHTTPClient | None = None,
    ) -> None:
        self.config = config
        self.cache = cache
        self.client = client or SafeHTTPClient.from_settings(config)

    def resolve_asset(self, asset_id: Any) -> Optional[AssetResult]:
        """Return the AssetResult for *asset_id*, or None if the lookup failed."""
        if not isinstance(asset_id, str) or not asset_id.strip():
            raise InvalidAssetIdError(asset_id)
        asset_id = asset_id.strip()

        key = asset_key(asset_id)
        cached = self.cache.get(key)
        if cached is not None:
            logger.info("asset_cache_hit", extra={"asset_id": asset_id})
            return cached.model_copy(deep=True)

        try:
            links = self._fetch_links(asset_id)
        except Exception as exc:
            logger.warning(
                "asset_lookup_failed",
                extra={"asset_id": asset_id, "error": str(exc)},
                exc_info=True,
            )
            return None

        pick = rank_links(links)
        result = AssetResult(
            best=pick.best,
            items=links,
            type=pick.type,
            rationale=pick.rationale,
        )
        self.cache.set(key, result, self.config.asset_cache_ttl_seconds)
        logger.info(
            "asset_resolved",
            extra={"asset_id": asset_id, "rationale": pick.rationale, "best": pick.best},
        )
        return result.model_copy(deep=True)

    def _fetch_links(self, asset_id: str) -> List[MediaLink]:
        url = urljoin(self.config.images_asset_url, quote(asset_id, safe=""))
        response = self.client.get(url, timeout=self.config.images_timeout)
        data = response.json()
        collection = data.get("collection") if isinstance(data, dict) else None
        if not isinstance(collection, dict):
            raise ValueError(f"asset listing for {asset_id!r} has no collection")
        # A collection without items is an asset with nothing to link to
        items = collection.get("items") or []
        if not isinstance(items, list):
            raise ValueError(f"asset listing for {asset_id!r} is not a list")
        return [
            MediaLink(href=str(item["href"]), render=item.get("render"))
            for item in items
            if isinstance(item, dict) and item.get("href")
        ]
