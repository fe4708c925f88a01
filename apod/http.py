"""SSRF-safe HTTP client with per-call timeouts and tenacity retries."""

from __future__ import annotations

import ipaddress
import socket
from typing import Any, Optional
from urllib.parse import urlparse

import httpx
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

# RFC-1918 + loopback + link-local private ranges
_PRIVATE_NETWORKS = [
    ipaddress.ip_network("127.0.0.0/8"),
    ipaddress.ip_network("0.0.0.0/8"),
    ipaddress.ip_network("10.0.0.0/8"),
    ipaddress.ip_network("172.16.0.0/12"),
    ipaddress.ip_network("192.168.0.0/16"),
    ipaddress.ip_network("169.254.0.0/16"),
    ipaddress.ip_network("::1/128"),
    ipaddress.ip_network("fc00::/7"),
    ipaddress.ip_network("fe80::/10"),
]

_TRANSIENT_ERRORS = (httpx.TimeoutException, httpx.NetworkError)


def _is_private_ip(ip_str: str) -> bool:
    """Return True if *ip_str* falls within any private/loopback range."""
    try:
        addr = ipaddress.ip_address(ip_str)
        return any(addr in net for net in _PRIVATE_NETWORKS)
    except ValueError:
        return False


class SSRFError(ValueError):
    """Raised when a request targets a disallowed host or private IP."""


class SafeHTTPClient:
    """httpx client wrapper with SSRF protection and tenacity retries.

    Parameters
    ----------
    timeout:
        Default per-request timeout in seconds; ``get(..., timeout=)``
        overrides it for a single call.
    max_attempts:
        Total attempts for transport errors. 1 means no retry.
    min_wait / max_wait:
        Exponential backoff boundaries in seconds.
    block_private:
        Refuse hosts that resolve to private or loopback addresses.
    transport:
        Optional httpx transport (tests pass ``httpx.MockTransport``).
    """

    def __init__(
        self,
        timeout: float = 15.0,
        max_attempts: int = 1,
        min_wait: float = 1.0,
        max_wait: float = 10.0,
        block_private: bool = True,
        user_agent: str = "apod-resolver/1.0",
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.min_wait = min_wait
        self.max_wait = max_wait
        self.block_private = block_private
        self._client = httpx.Client(
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
            headers={"User-Agent": user_agent},
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Any) -> "SafeHTTPClient":
        return cls(
            timeout=settings.api_timeout,
            max_attempts=settings.max_attempts,
            min_wait=settings.retry_min_wait,
            max_wait=settings.retry_max_wait,
            block_private=settings.block_private_hosts,
            user_agent=settings.user_agent,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """SSRF-protected GET; raises httpx.HTTPStatusError on non-2xx."""
        self._assert_safe(url)
        return self._get_with_retry(url, **kwargs)

    def stream(self, url: str, **kwargs: Any):
        """SSRF-protected streaming GET (context manager, no retry)."""
        self._assert_safe(url)
        return self._client.stream("GET", url, **kwargs)

    def close(self) -> None:
        """Close the underlying httpx client."""
        self._client.close()

    def __enter__(self) -> "SafeHTTPClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _assert_safe(self, url: str) -> None:
        """Block private/loopback IPs via DNS pre-check."""
        parsed = urlparse(url)
        host = parsed.hostname or ""
        if not host:
            raise SSRFError(f"Cannot determine host from URL: {url!r}")
        if not self.block_private:
            return

        try:
            addr_infos = socket.getaddrinfo(host, None)
        except socket.gaierror:
            raise SSRFError(f"DNS resolution failed for host: {host!r}")

        for ai in addr_infos:
            ip_str = ai[4][0]
            if _is_private_ip(ip_str):
                raise SSRFError(
                    f"SSRF protection: {host!r} resolves to private IP {ip_str!r}"
                )

    def _get_with_retry(self, url: str, **kwargs: Any) -> httpx.Response:
        retrying = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=1, min=self.min_wait, max=self.max_wait),
            retry=retry_if_exception_type(_TRANSIENT_ERRORS),
            reraise=True,
        )
        for attempt in retrying:
            with attempt:
                response = self._client.get(url, **kwargs)
                response.raise_for_status()
        return response
