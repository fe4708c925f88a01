"""Official APOD API lookup for an exact date."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from apod.models import MediaResult, ResolutionRequest, StrategyName
from apod.strategies.base import BaseStrategy

logger = logging.getLogger(__name__)


class PrimaryApiStrategy(BaseStrategy):
    """Queries api.nasa.gov/planetary/apod; the authoritative source."""

    name = StrategyName.PRIMARY_API

    def fetch(self, request: ResolutionRequest) -> Optional[MediaResult]:
        params = {
            "date": request.date,
            "api_key": self.config.nasa_api_key,
            "thumbs": "true",
        }
        response = self.client.get(
            self.config.apod_api_url,
            params=params,
            timeout=self.config.api_timeout,
        )
        data: Dict[str, Any] = response.json()
        if not isinstance(data, dict):
            logger.warning("apod_api_malformed", extra={"date": request.date})
            return None

        return self._build_result(
            request,
            {
                "title": data.get("title"),
                "explanation": data.get("explanation"),
                "media_type": data.get("media_type"),
                # hd variant stands in when the api omits the plain url
                "url": data.get("url") or data.get("hdurl"),
                "hdurl": data.get("hdurl"),
                "copyright": data.get("copyright"),
                "thumbnail_url": data.get("thumbnail_url"),
            },
        )
