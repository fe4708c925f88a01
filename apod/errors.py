"""Caller-visible exceptions for the APOD resolver."""

from __future__ import annotations


class ApodError(Exception):
    """Base class for all resolver errors."""


class RequestValidationError(ApodError, ValueError):
    """Raised when a request is malformed; no cache or network access happens."""


class InvalidDateError(RequestValidationError):
    """Raised when a date is not in YYYY-MM-DD form."""

    def __init__(self, date: object) -> None:
        super().__init__(f"Date must be in YYYY-MM-DD format, got {date!r}")
        self.date = date


class InvalidAssetIdError(RequestValidationError):
    """Raised when an asset identifier is empty or missing."""

    def __init__(self, asset_id: object) -> None:
        super().__init__(f"Asset id must be a non-empty string, got {asset_id!r}")
        self.asset_id = asset_id


class HostNotAllowedError(ApodError, ValueError):
    """Raised when an image URL points at a host outside the allowlist."""
