"""Tests for apod.models: request validation and result invariants."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from apod.errors import InvalidDateError, RequestValidationError
from apod.models import MediaResult, ResolutionRequest, StrategyName


class TestResolutionRequest:
    def test_valid_date(self):
        req = ResolutionRequest.parse("2025-10-01")
        assert req.date == "2025-10-01"
        assert req.year == "2025"

    def test_page_slug_uses_two_digit_year(self):
        assert ResolutionRequest.parse("1999-01-07").page_slug == "990107"
        assert ResolutionRequest.parse("2025-10-01").page_slug == "251001"

    @pytest.mark.parametrize(
        "bad",
        ["", "2025-1-01", "20251001", "2025/10/01", "2025-10-01\n", " 2025-10-01", "yesterday", None, 20251001],
    )
    def test_malformed_dates_rejected(self, bad):
        with pytest.raises(InvalidDateError):
            ResolutionRequest.parse(bad)

    def test_invalid_date_is_a_value_error(self):
        with pytest.raises(ValueError):
            ResolutionRequest.parse("nope")
        assert issubclass(InvalidDateError, RequestValidationError)


class TestMediaResult:
    def test_blank_url_cannot_be_built(self):
        with pytest.raises(ValidationError):
            MediaResult(date="2025-10-01", url="  ", source=StrategyName.PRIMARY_API)

    def test_source_compares_to_tag_string(self):
        r = MediaResult(date="2025-10-01", url="https://x/img.jpg", source=StrategyName.PAGE_SCRAPE)
        assert r.source == "page-scrape"
        assert r.cached is False

    def test_confidence_tags(self):
        exact = MediaResult(date="2025-10-01", url="https://x/a.jpg", source=StrategyName.ARCHIVED_SNAPSHOT)
        degraded = MediaResult(date="2025-10-01", url="https://x/a.jpg", source=StrategyName.KEYWORD_SEARCH)
        assert exact.confidence == "exact"
        assert degraded.confidence == "best-effort"
