"""Amadeus GDS flight provider."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from voyana_core.schemas import ApiSource, CabinClass, RawOfferBatch

from ..base import BaseProvider
from .client import AmadeusClient
from .response_parser import normalize_offer

if TYPE_CHECKING:
    from voyana_core.schemas import NormalizedFlight, SearchRequest

# Map our CabinClass enum values to the Amadeus travelClass parameter
_AMADEUS_CABIN_MAP: dict[CabinClass, str] = {
    CabinClass.ECONOMY: "ECONOMY",
    CabinClass.PREMIUM_ECONOMY: "PREMIUM_ECONOMY",
    CabinClass.BUSINESS: "BUSINESS",
    CabinClass.FIRST: "FIRST",
}


class AmadeusProvider(BaseProvider):
    """Offers from the Amadeus Self-Service ``Flight Offers Search`` API.

    Requires ``FLIGHTS_AMADEUS_CLIENT_ID`` and
    ``FLIGHTS_AMADEUS_CLIENT_SECRET`` unless a configured client is injected.
    """

    source = ApiSource.AMADEUS

    def __init__(self, client: AmadeusClient | None = None) -> None:
        self._client = client or AmadeusClient()

    async def search(self, request: SearchRequest) -> RawOfferBatch:
        """Search for offers priced in the request currency."""
        passengers = request.passengers
        body = await self._client.search_flight_offers(
            origin=request.origin,
            destination=request.destination,
            departure_date=request.departure_date.isoformat(),
            return_date=(
                request.return_date.isoformat() if request.return_date else None
            ),
            adults=passengers.adults,
            children=passengers.children + passengers.infants_in_seat,
            infants=passengers.infants_on_lap,
            travel_class=_AMADEUS_CABIN_MAP.get(request.cabin_class),
            currency_code=request.currency,
            max_results=request.max_results,
        )
        dictionaries = body.get("dictionaries")
        return RawOfferBatch(
            source=self.source,
            offers=[offer for offer in body["data"] if isinstance(offer, dict)],
            dictionaries=dictionaries if isinstance(dictionaries, dict) else {},
        )

    def normalize(
        self, offer: dict[str, Any], dictionaries: dict[str, Any] | None = None
    ) -> NormalizedFlight:
        return normalize_offer(offer, dictionaries)

    async def health_check(self) -> bool:
        """Check if the Amadeus API is reachable and credentials are valid."""
        return await self._client.health_check()

    async def close(self) -> None:
        """Release the Amadeus client."""
        await self._client.close()
