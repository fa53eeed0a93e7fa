"""Amadeus Self-Service API client wrapper.

Uses the official ``amadeus`` Python SDK which handles the OAuth2 token
lifecycle.  The SDK is synchronous, so every call runs in a worker thread
via ``asyncio.to_thread``.  An SDK ``Client`` may be injected; otherwise
one is created lazily from settings on first use.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from amadeus import Client, ResponseError

from voyana_flights.config import settings
from voyana_flights.exceptions import ProviderResponseError, ProviderUnavailableError

logger = logging.getLogger(__name__)


class AmadeusClient:
    """Async-friendly wrapper around the Amadeus Python SDK."""

    def __init__(
        self,
        sdk: Client | None = None,
        *,
        client_id: str | None = None,
        client_secret: str | None = None,
        hostname: str | None = None,
    ) -> None:
        self._sdk = sdk
        if client_id is None:
            client_id = settings.amadeus_client_id
        if client_secret is None:
            client_secret = settings.amadeus_client_secret
        self._client_id = client_id
        self._client_secret = client_secret
        self._hostname = hostname or settings.amadeus_hostname

    @property
    def configured(self) -> bool:
        return self._sdk is not None or bool(self._client_id and self._client_secret)

    def _ensure_sdk(self) -> Client:
        if self._sdk is None:
            if not self._client_id or not self._client_secret:
                raise ProviderUnavailableError(
                    "FLIGHTS_AMADEUS_CLIENT_ID and FLIGHTS_AMADEUS_CLIENT_SECRET "
                    "must be set in environment or .env",
                    source="amadeus",
                    status_code=503,
                )
            self._sdk = Client(
                client_id=self._client_id,
                client_secret=self._client_secret,
                hostname=self._hostname,
            )
            logger.info("Amadeus SDK initialised (hostname=%s)", self._hostname)
        return self._sdk

    async def search_flight_offers(
        self,
        origin: str,
        destination: str,
        departure_date: str,
        *,
        return_date: str | None = None,
        adults: int = 1,
        children: int = 0,
        infants: int = 0,
        travel_class: str | None = None,
        currency_code: str = "USD",
        max_results: int = 50,
    ) -> dict[str, Any]:
        """Search for flight offers using GET /v2/shopping/flight-offers.

        Returns the whole response body: ``data`` (the offers) and
        ``dictionaries`` (carrier names, locations, aircraft).

        Parameters
        ----------
        origin:
            IATA origin code (e.g. ``JFK``).
        destination:
            IATA destination code (e.g. ``LHR``).
        departure_date:
            ISO-8601 date string (``YYYY-MM-DD``).
        return_date:
            Optional return date for round-trip searches.
        adults, children, infants:
            Passenger counts; Amadeus allows at most 9 seated travellers.
        travel_class:
            ECONOMY, PREMIUM_ECONOMY, BUSINESS, or FIRST.
        currency_code:
            ISO currency code for prices.
        max_results:
            Maximum number of offers to return (up to 250).
        """
        sdk = self._ensure_sdk()
        params: dict[str, Any] = {
            "originLocationCode": origin,
            "destinationLocationCode": destination,
            "departureDate": departure_date,
            "adults": adults,
            "currencyCode": currency_code,
            "max": max_results,
        }
        if return_date:
            params["returnDate"] = return_date
        if children:
            params["children"] = children
        if infants:
            params["infants"] = infants
        if travel_class:
            params["travelClass"] = travel_class

        def _call() -> Any:
            try:
                resp = sdk.shopping.flight_offers_search.get(**params)
            except ResponseError as exc:
                logger.error("Amadeus flight search failed: %s", exc)
                raise ProviderUnavailableError(
                    f"Amadeus flight search failed: {exc}",
                    source="amadeus",
                    status_code=getattr(exc.response, "status_code", None) or 502,
                ) from exc
            return resp.result

        body = await asyncio.to_thread(_call)
        if not isinstance(body, dict) or not isinstance(body.get("data"), list):
            raise ProviderResponseError(
                "Amadeus flight-offers response has no offer list", source="amadeus"
            )
        return body

    async def health_check(self) -> bool:
        """Verify Amadeus API credentials are valid."""
        try:
            sdk = self._ensure_sdk()
        except ProviderUnavailableError:
            return False

        def _call() -> bool:
            try:
                resp = sdk.reference_data.airlines.get(airlineCodes="BA")
                return bool(resp.data)
            except ResponseError:
                return False

        return await asyncio.to_thread(_call)

    async def close(self) -> None:
        """Drop the SDK handle; it manages its own HTTP lifecycle."""
        self._sdk = None
