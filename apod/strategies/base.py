"""Abstract base class for all lookup strategies."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Optional

from apod.cache import TTLCache
from apod.config import Settings
from apod.http import SafeHTTPClient
from apod.models import MediaResult, ResolutionRequest, StrategyName

logger = logging.getLogger(__name__)


class BaseStrategy(ABC):
    """Contract that every lookup strategy must implement.

    Each subclass sets ``name`` as a class-level constant.
    ``attempt()`` wraps ``fetch()`` with logging and error isolation, so
    callers only ever see a MediaResult with a usable url, or None.
    """

    name: StrategyName

    def __init__(
        self,
        config: Settings,
        client: SafeHTTPClient | None = None,
        cache: TTLCache | None = None,
    ) -> None:
        self.config = config
        self.client = client or SafeHTTPClient.from_settings(config)
        self.cache = cache

    # ------------------------------------------------------------------
    # Public entry point
    # ------------------------------------------------------------------

    def attempt(self, request: ResolutionRequest) -> Optional[MediaResult]:
        """Run the strategy; return None on any failure so the chain continues."""
        try:
            result = self.fetch(request)
        except Exception as exc:
            logger.warning(
                "strategy_failed",
                extra={"strategy": self.name.value, "date": request.date, "error": str(exc)},
                exc_info=True,
            )
            return None

        if result is None or not result.url:
            logger.info(
                "strategy_empty",
                extra={"strategy": self.name.value, "date": request.date},
            )
            return None

        logger.info(
            "strategy_succeeded",
            extra={"strategy": self.name.value, "date": request.date, "url": result.url},
        )
        return result

    # ------------------------------------------------------------------
    # Abstract method
    # ------------------------------------------------------------------

    @abstractmethod
    def fetch(self, request: ResolutionRequest) -> Optional[MediaResult]:
        """Look the date up upstream; may raise, may return None."""

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _build_result(self, request: ResolutionRequest, raw: dict) -> Optional[MediaResult]:
        """Normalize a strategy-specific dict; None if it has no usable url."""
        url = str(raw.get("url") or "").strip()
        if not url:
            return None
        media_type = "video" if raw.get("media_type") == "video" else "image"
        return MediaResult(
            date=request.date,
            title=_text_or_none(raw.get("title")),
            explanation=_text_or_none(raw.get("explanation")),
            media_type=media_type,
            url=url,
            hdurl=_text_or_none(raw.get("hdurl")),
            source=self.name,
            copyright=_text_or_none(raw.get("copyright")),
            thumbnail_url=_text_or_none(raw.get("thumbnail_url")),
        )


def _text_or_none(value: object) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
