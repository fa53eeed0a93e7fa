"""HTTP client for the Duffel flights API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from voyana_flights.config import settings
from voyana_flights.exceptions import ProviderResponseError, ProviderUnavailableError
from voyana_flights.retry import retry_transient

logger = logging.getLogger(__name__)


class DuffelClient:
    """Thin async wrapper around Duffel offer requests and offers.

    The underlying ``httpx.AsyncClient`` can be injected (or given a custom
    transport) so tests never touch the network.
    """

    def __init__(
        self,
        *,
        access_token: str | None = None,
        base_url: str | None = None,
        api_version: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._access_token = (
            access_token if access_token is not None else settings.duffel_access_token
        )
        self._client = http_client or httpx.AsyncClient(
            base_url=base_url or settings.duffel_base_url,
            headers={
                "Authorization": f"Bearer {self._access_token}",
                "Duffel-Version": api_version or settings.duffel_api_version,
                "Accept": "application/json",
                "Content-Type": "application/json",
            },
            timeout=httpx.Timeout(timeout or settings.http_timeout),
            transport=transport,
        )
        retries = settings.max_retries if max_retries is None else max_retries
        self._request = retry_transient(
            max_retries=retries,
            base_delay=settings.retry_base_delay,
            max_delay=settings.retry_max_delay,
        )(self._request_once)

    @property
    def configured(self) -> bool:
        return bool(self._access_token)

    async def _request_once(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        resp = await self._client.request(method, path, params=params, json=json)
        resp.raise_for_status()
        body = resp.json()
        if not isinstance(body, dict) or "data" not in body:
            raise ProviderResponseError(
                f"Duffel {method} {path} returned no data envelope",
                source="duffel",
            )
        return body

    async def create_offer_request(
        self,
        slices: list[dict[str, str]],
        passengers: list[dict[str, str]],
        cabin_class: str,
    ) -> str:
        """``POST /air/offer_requests`` and return the new offer request id."""
        if not self.configured:
            raise ProviderUnavailableError(
                "FLIGHTS_DUFFEL_ACCESS_TOKEN must be set in environment or .env",
                source="duffel",
                status_code=503,
            )
        body = await self._request(
            "POST",
            "/air/offer_requests",
            params={"return_offers": "false"},
            json={
                "data": {
                    "slices": slices,
                    "passengers": passengers,
                    "cabin_class": cabin_class,
                }
            },
        )
        data = body["data"]
        if not isinstance(data, dict) or not data.get("id"):
            raise ProviderResponseError(
                "Duffel offer request response has no id", source="duffel"
            )
        logger.debug("Created Duffel offer request %s", data["id"])
        return str(data["id"])

    async def list_offers(
        self, offer_request_id: str, *, limit: int = 50
    ) -> list[dict[str, Any]]:
        """``GET /air/offers`` for an offer request, cheapest first."""
        body = await self._request(
            "GET",
            "/air/offers",
            params={
                "offer_request_id": offer_request_id,
                "sort": "total_amount",
                "limit": limit,
            },
        )
        offers = body["data"]
        if not isinstance(offers, list):
            raise ProviderResponseError(
                "Duffel offers response is not a list", source="duffel"
            )
        logger.debug("Duffel returned %d offers for %s", len(offers), offer_request_id)
        return offers

    async def get_airlines(self, *, limit: int = 1) -> list[dict[str, Any]]:
        """``GET /air/airlines``; used as a cheap authenticated ping."""
        body = await self._request("GET", "/air/airlines", params={"limit": limit})
        data = body["data"]
        return data if isinstance(data, list) else []

    async def close(self) -> None:
        """Shut down the underlying HTTPX client."""
        await self._client.aclose()
