"""Shared pytest fixtures for the APOD resolver test suite."""

from __future__ import annotations

import os
from typing import Any, Optional
from unittest.mock import MagicMock

import pytest

# Ensure no real credentials bleed in during tests
os.environ.setdefault("APOD_NASA_API_KEY", "TEST_KEY")

SAMPLE_PAGE = """
<html>
<head><title> APOD: 2025 October 1 - NGC 6960: The Witch's Broom Nebula
</title>
<script>var tracker = "should not appear";</script>
</head>
<body>
<center>
<h1> Astronomy Picture of the Day </h1>
<p>
<a href="archivepix.html">Discover the cosmos!</a>
<p>
2025 October 1
<br>
<a href="image/2510/WitchBroom_Meyers_6043.jpg">
<IMG SRC="image/2510/WitchBroom_Meyers_1080.jpg" alt="Witch's Broom"></a>
</center>
<center>
<b> NGC 6960: The Witch's Broom Nebula </b> <br>
</center>
<p>
<b> Explanation: </b>
Ten thousand years ago, before the dawn of recorded human history,
a new light would suddenly have appeared in the night sky.
</body>
</html>
"""


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_response(json_data: Any = None, text: Optional[str] = None) -> MagicMock:
    """Return a mock httpx.Response carrying *json_data* and/or *text*."""
    response = MagicMock()
    response.status_code = 200
    response.json.return_value = json_data
    response.text = text if text is not None else ""
    return response


@pytest.fixture()
def settings():
    """Return a Settings instance with safe test defaults."""
    from apod.config import Settings

    return Settings(
        nasa_api_key="TEST_KEY",
        block_private_hosts=False,
        log_level="DEBUG",
    )


@pytest.fixture()
def mock_client():
    """Return a mock SafeHTTPClient."""
    return MagicMock()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def cache(clock):
    from apod.cache import TTLCache

    return TTLCache(clock=clock)
