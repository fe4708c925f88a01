"""Resolution orchestrator: validate → cache → api → page → snapshot → search → cache."""

from __future__ import annotations

import logging
from typing import List, Optional

from apod.cache import TTLCache, resolution_key
from apod.config import Settings
from apod.http import SafeHTTPClient
from apod.models import MediaResult, ResolutionRequest
from apod.strategies import BaseStrategy, default_strategies

logger = logging.getLogger(__name__)


class ResolutionOrchestrator:
    """Runs the strategy chain for one date and caches the first success.

    Strategies are tried strictly in order and never in parallel: each is a
    fallback whose cost is only paid when its predecessor failed. Failures
    are never cached, so a later call retries every strategy.
    """

    def __init__(
        self,
        config: Settings,
        cache: Optional[TTLCache] = None,
        strategies: Optional[List[BaseStrategy]] = None,
        client: Optional[SafeHTTPClient] = None,
    ) -> None:
        self.config = config
        self.cache = cache if cache is not None else TTLCache(config.cache_ttl_seconds)
        if strategies is None:
            client = client or SafeHTTPClient.from_settings(config)
            strategies = default_strategies(config, client, self.cache)
        self.strategies: List[BaseStrategy] = strategies

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def resolve(self, date: object) -> Optional[MediaResult]:
        """Return the best MediaResult for *date*, or None if nothing was found.

        Raises InvalidDateError for malformed input before touching the
        cache or the network.
        """
        request = ResolutionRequest.parse(date)
        key = resolution_key(request.date)

        cached: Optional[MediaResult] = self.cache.get(key)
        if cached is not None:
            logger.info("resolution_cache_hit", extra={"date": request.date})
            return cached.model_copy(update={"cached": True}, deep=True)

        for strategy in self.strategies:
            result = strategy.attempt(request)
            if result is not None and result.url:
                self.cache.set(key, result, self.config.cache_ttl_seconds)
                logger.info(
                    "resolution_done",
                    extra={"date": request.date, "source": result.source.value},
                )
                return result.model_copy(deep=True)

        logger.info(
            "resolution_not_found",
            extra={"date": request.date, "tried": [s.name.value for s in self.strategies]},
        )
        return None
