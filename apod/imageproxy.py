"""Download resolved media through an allowlist of known image hosts."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from apod.errors import HostNotAllowedError
from apod.http import SafeHTTPClient

logger = logging.getLogger(__name__)

ALLOWED_HOSTS = (
    "apod.nasa.gov",
    "images-api.nasa.gov",
    "images.nasa.gov",
    "img.youtube.com",
    "i.ytimg.com",
    "www.youtube.com",
    "images.spaceref.com",
    "i.imgur.com",
    "pbs.twimg.com",
)


def is_allowed_host(url: str) -> bool:
    """True if *url*'s host is an allowlisted host or one of its subdomains."""
    try:
        host = (urlparse(url).hostname or "").lower()
    except ValueError:
        return False
    if not host:
        return False
    return any(host == allowed or host.endswith("." + allowed) for allowed in ALLOWED_HOSTS)


def fetch_image(
    client: SafeHTTPClient,
    url: str,
    dest: Path,
    timeout: Optional[float] = None,
) -> str:
    """Stream *url* into *dest*; return the upstream content type."""
    if not is_allowed_host(url):
        raise HostNotAllowedError(f"Host not allowed to be proxied: {url!r}")

    kwargs = {"timeout": timeout} if timeout is not None else {}
    dest.parent.mkdir(parents=True, exist_ok=True)
    # Partial downloads never land at dest
    part = dest.with_suffix(dest.suffix + ".part")
    try:
        with client.stream(url, **kwargs) as response:
            response.raise_for_status()
            content_type = response.headers.get("content-type", "application/octet-stream")
            with part.open("wb") as fh:
                for chunk in response.iter_bytes():
                    fh.write(chunk)
        part.replace(dest)
    finally:
        part.unlink(missing_ok=True)

    logger.info(
        "image_fetched",
        extra={"url": url, "dest": str(dest), "content_type": content_type},
    )
    return content_type
