"""Duffel flight provider."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from voyana_core.schemas import ApiSource, RawOfferBatch

from ..base import BaseProvider
from .client import DuffelClient
from .response_parser import normalize_offer

if TYPE_CHECKING:
    from voyana_core.schemas import NormalizedFlight, PassengerCount, SearchRequest

logger = logging.getLogger(__name__)


def build_slices(request: SearchRequest) -> list[dict[str, str]]:
    """Outbound slice, plus the reverse slice for round trips."""
    slices = [
        {
            "origin": request.origin,
            "destination": request.destination,
            "departure_date": request.departure_date.isoformat(),
        }
    ]
    if request.return_date is not None:
        slices.append(
            {
                "origin": request.destination,
                "destination": request.origin,
                "departure_date": request.return_date.isoformat(),
            }
        )
    return slices


def build_passengers(passengers: PassengerCount) -> list[dict[str, str]]:
    """One Duffel passenger entry per traveller."""
    return (
        [{"type": "adult"}] * passengers.adults
        + [{"type": "child"}] * (passengers.children + passengers.infants_in_seat)
        + [{"type": "infant_without_seat"}] * passengers.infants_on_lap
    )


class DuffelProvider(BaseProvider):
    """Offers from the Duffel API (offer request, then cheapest-first offers)."""

    source = ApiSource.DUFFEL

    def __init__(self, client: DuffelClient | None = None) -> None:
        self._client = client or DuffelClient()

    async def search(self, request: SearchRequest) -> RawOfferBatch:
        """Create an offer request and list its offers."""
        offer_request_id = await self._client.create_offer_request(
            slices=build_slices(request),
            passengers=build_passengers(request.passengers),
            cabin_class=request.cabin_class.value,
        )
        offers = await self._client.list_offers(
            offer_request_id, limit=request.max_results
        )
        return RawOfferBatch(
            source=self.source,
            offers=[offer for offer in offers if isinstance(offer, dict)],
        )

    def normalize(
        self, offer: dict[str, Any], dictionaries: dict[str, Any] | None = None
    ) -> NormalizedFlight:
        return normalize_offer(offer, dictionaries)

    async def health_check(self) -> bool:
        """Return *True* if a token is configured and Duffel answers."""
        if not self._client.configured:
            return False
        try:
            await self._client.get_airlines(limit=1)
        except Exception:
            logger.warning("Duffel health check failed", exc_info=True)
            return False
        return True

    async def close(self) -> None:
        """Release the underlying HTTP client."""
        await self._client.close()
