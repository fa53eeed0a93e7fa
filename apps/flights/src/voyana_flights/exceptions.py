"""Errors raised by flight providers and the normalization layer."""

from __future__ import annotations

from typing import Any


class ProviderError(Exception):
    """A provider call failed."""

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        status_code: int = 502,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.source = source
        self.status_code = status_code
        self.details = details or {}


class ProviderUnavailableError(ProviderError):
    """The provider is misconfigured, unreachable or refused the request."""


class ProviderResponseError(ProviderError):
    """The provider answered with a body of the wrong shape.

    Unlike an unavailable provider this is not absorbed into an empty
    result: it is surfaced to the caller once every provider has settled.
    """


class MalformedOfferError(ValueError):
    """A single raw offer lacks the itinerary, segment or price data it needs."""

    def __init__(self, message: str, *, offer_id: str | None = None) -> None:
        super().__init__(message)
        self.offer_id = offer_id
