"""Scrape the dated apod.nasa.gov HTML page."""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from apod.models import MediaResult, ResolutionRequest, StrategyName
from apod.strategies.base import BaseStrategy

logger = logging.getLogger(__name__)

# Hrefs that point at the day's media (or its own page) rather than navigation
_MEDIA_LINK_RE = re.compile(r"image|apod|jpg|jpeg|png|gif|mov|mp4", re.IGNORECASE)
_EMPHASIS_TAGS = ["b", "strong", "em"]
_INVISIBLE_TAGS = ["script", "style", "noscript"]


def _collapse(text: str) -> str:
    return " ".join(text.split())


def page_url_for(request: ResolutionRequest, base_url: str) -> str:
    """Return e.g. ``https://apod.nasa.gov/apod/ap251001.html`` for 2025-10-01."""
    return urljoin(base_url, f"ap{request.page_slug}.html")


def extract_page(html: str, base_url: str, limit: int = 2000) -> Optional[Dict[str, Any]]:
    """Pull title, media url and explanation out of an APOD page.

    Returns None when the document has no media link or image. The media url
    is made absolute against *base_url*.
    """
    soup = BeautifulSoup(html, "html.parser")

    title = ""
    if soup.title is not None:
        title = _collapse(soup.title.get_text())
    if not title:
        emphasis = soup.find(_EMPHASIS_TAGS)
        if emphasis is not None:
            title = _collapse(emphasis.get_text())

    src = None
    for anchor in soup.find_all("a", href=True):
        if _MEDIA_LINK_RE.search(anchor["href"]):
            src = anchor["href"]
            break
    if not src:
        img = soup.find("img", src=True)
        if img is not None:
            src = img["src"]
    if not src or not src.strip():
        return None

    for tag in soup.find_all(_INVISIBLE_TAGS):
        tag.decompose()
    body = soup.body or soup
    explanation = _collapse(body.get_text(" "))[:limit]

    return {
        "url": urljoin(base_url, src.strip()),
        "title": title or None,
        "explanation": explanation or None,
        "media_type": "image",
    }


class PageScrapeStrategy(BaseStrategy):
    """Fetches ``ap<YYMMDD>.html`` and extracts media + text from the DOM."""

    name = StrategyName.PAGE_SCRAPE

    def fetch(self, request: ResolutionRequest) -> Optional[MediaResult]:
        page_url = page_url_for(request, self.config.apod_page_base)
        return self.scrape(request, page_url, base_url=self.config.apod_page_base)

    def scrape(
        self,
        request: ResolutionRequest,
        url: str,
        base_url: str,
    ) -> Optional[MediaResult]:
        """Fetch *url* and run ``extract_page`` on it, tagged with this strategy's name."""
        response = self.client.get(url, timeout=self.config.page_timeout)
        raw = extract_page(response.text, base_url, limit=self.config.explanation_limit)
        if raw is None:
            logger.info("page_without_media", extra={"url": url})
            return None
        return self._build_result(request, raw)
