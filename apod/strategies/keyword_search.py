"""NASA Images API search: best-effort, same-year, keyword-tagged image."""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional

from apod.models import MediaResult, ResolutionRequest, StrategyName
from apod.strategies.base import BaseStrategy

logger = logging.getLogger(__name__)

_IMAGE_HREF_RE = re.compile(r"\.(jpg|jpeg|png|gif)$", re.IGNORECASE)


class KeywordSearchStrategy(BaseStrategy):
    """Last resort; the result is topically related, not the day's picture."""

    name = StrategyName.KEYWORD_SEARCH

    def fetch(self, request: ResolutionRequest) -> Optional[MediaResult]:
        params = {
            "q": self.config.search_keyword,
            "media_type": "image",
            "year_start": request.year,
            "year_end": request.year,
        }
        response = self.client.get(
            self.config.images_search_url,
            params=params,
            timeout=self.config.images_timeout,
        )
        data = response.json()
        items: List[Any] = (data.get("collection") or {}).get("items") or []

        for item in items:
            if not isinstance(item, dict):
                continue
            href = _first_image_href(item.get("links") or [])
            if not href:
                continue
            meta = _first_meta(item.get("data"))
            return self._build_result(
                request,
                {
                    "url": href,
                    "title": meta.get("title"),
                    "explanation": meta.get("description") or meta.get("description_508"),
                    "media_type": "image",
                },
            )

        logger.info(
            "search_no_direct_image",
            extra={"year": request.year, "items": len(items)},
        )
        return None


def _first_image_href(links: List[Dict[str, Any]]) -> Optional[str]:
    for link in links:
        href = link.get("href") if isinstance(link, dict) else None
        if href and _IMAGE_HREF_RE.search(href):
            return href
    return None


def _first_meta(data: Any) -> Dict[str, Any]:
    if isinstance(data, list) and data and isinstance(data[0], dict):
        return data[0]
    return {}
