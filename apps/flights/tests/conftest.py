"""Shared fixtures for provider, pipeline and orchestrator tests."""

from __future__ import annotations

import asyncio
from datetime import date, datetime, timedelta
from typing import Any

import pytest

from voyana_core.schemas import (
    ApiSource,
    CabinClass,
    NormalizedFlight,
    PassengerCount,
    RawOfferBatch,
    SearchRequest,
)
from voyana_flights.base import BaseProvider


class FakeProvider(BaseProvider):
    """In-memory provider: canned flights, a raised error, or a slow answer."""

    source = ApiSource.DUFFEL

    def __init__(
        self,
        flights: list[NormalizedFlight] | None = None,
        *,
        source: ApiSource = ApiSource.DUFFEL,
        error: Exception | None = None,
        delay: float = 0.0,
        healthy: bool = True,
        only_origin: str | None = None,
    ) -> None:
        self.source = source
        self._flights = list(flights or [])
        self._error = error
        self._delay = delay
        self._healthy = healthy
        self._only_origin = only_origin
        self.requests: list[SearchRequest] = []
        self.closed = False
        self.cancelled = False

    async def search(self, request: SearchRequest) -> RawOfferBatch:
        self.requests.append(request)
        # delay and error only hit requests from only_origin when it is set
        scoped = self._only_origin in (None, request.origin)
        if scoped and self._delay:
            try:
                await asyncio.sleep(self._delay)
            except asyncio.CancelledError:
                self.cancelled = True
                raise
        if scoped and self._error is not None:
            raise self._error
        return RawOfferBatch(
            source=self.source,
            offers=[{"index": i} for i in range(len(self._flights))],
        )

    def normalize(
        self, offer: dict[str, Any], dictionaries: dict[str, Any] | None = None
    ) -> NormalizedFlight:
        return self._flights[offer["index"]]

    async def health_check(self) -> bool:
        return self._healthy

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def future_date() -> date:
    """Return a date ~30 days from now (avoids past-date errors)."""
    return date.today() + timedelta(days=30)


@pytest.fixture
def fake_provider() -> type[FakeProvider]:
    return FakeProvider


@pytest.fixture
def make_request(future_date: date):
    """Factory fixture for creating SearchRequest instances."""

    def _make(
        origin: str = "JFK",
        destination: str = "LHR",
        *,
        departure_date: date | None = None,
        return_date: date | None = None,
        cabin: CabinClass = CabinClass.ECONOMY,
        passengers: PassengerCount | None = None,
        currency: str = "USD",
        max_results: int = 50,
    ) -> SearchRequest:
        return SearchRequest(
            origin=origin,
            destination=destination,
            departure_date=departure_date or future_date,
            return_date=return_date,
            cabin_class=cabin,
            passengers=passengers or PassengerCount(),
            currency=currency,
            max_results=max_results,
        )

    return _make


@pytest.fixture
def make_flight():
    """Factory fixture for NormalizedFlight records."""

    def _make(
        offer_id: str = "off_1",
        *,
        source: ApiSource = ApiSource.DUFFEL,
        price: float = 100.0,
        currency: str = "USD",
        carrier: str = "British Airways",
        flight_number: str = "BA117",
        origin: str = "JFK",
        destination: str = "LHR",
        departure: datetime | None = None,
        duration: str = "PT7H15M",
        stops: int = 0,
        cabin_class: CabinClass = CabinClass.ECONOMY,
    ) -> NormalizedFlight:
        departure = departure or datetime(2026, 11, 20, 18, 30)
        return NormalizedFlight(
            id=offer_id,
            api_source=source,
            carrier=carrier,
            flight_number=flight_number,
            origin=origin,
            origin_name=origin,
            destination=destination,
            destination_name=destination,
            departure=departure,
            arrival=departure + timedelta(hours=7, minutes=15),
            duration=duration,
            price=price,
            currency=currency,
            cabin_class=cabin_class,
            stops=stops,
        )

    return _make


@pytest.fixture
def make_duffel_offer():
    """Factory fixture for raw Duffel offers as ``GET /air/offers`` returns them."""

    def _make(
        offer_id: str = "off_0000AbCdEf",
        *,
        amount: str | None = "450.00",
        currency: str = "USD",
        carrier_code: str = "BA",
        carrier_name: str = "British Airways",
        number: str = "117",
        origin: str = "JFK",
        destination: str = "LHR",
        departing_at: str | None = "2026-11-20T18:30:00",
        arriving_at: str = "2026-11-21T06:45:00",
        duration: str = "PT7H15M",
        stops: int = 0,
        cabin_name: str | None = "Economy",
        amenities: Any = None,
        baggages: list[dict[str, Any]] | None = None,
    ) -> dict[str, Any]:
        passenger: dict[str, Any] = {
            "passenger_id": "pas_1",
            "cabin_class": "economy",
            "cabin_class_marketing_name": cabin_name,
            "baggages": baggages or [],
        }
        if amenities is not None:
            passenger["cabin"] = {"marketing_name": cabin_name, "amenities": amenities}
        segment = {
            "id": "seg_1",
            "origin": {"iata_code": origin, "name": f"{origin} Airport"},
            "destination": {"iata_code": destination, "name": f"{destination} Airport"},
            "departing_at": departing_at,
            "arriving_at": arriving_at,
            "marketing_carrier": {
                "iata_code": carrier_code,
                "name": carrier_name,
                "logo_symbol_url": f"https://assets.duffel.com/{carrier_code}.svg",
            },
            "marketing_carrier_flight_number": number,
            "passengers": [passenger],
        }
        return {
            "id": offer_id,
            "total_amount": amount,
            "total_currency": currency,
            "slices": [
                {
                    "duration": duration,
                    "segments": [segment] + [dict(segment) for _ in range(stops)],
                }
            ],
        }

    return _make


@pytest.fixture
def make_amadeus_offer():
    """Factory fixture for raw Amadeus Flight Offers Search ``data`` entries."""

    def _make(
        offer_id: str = "1",
        *,
        total: str = "420.50",
        grand_total: str | None = "420.50",
        currency: str = "USD",
        carrier_code: str = "BA",
        number: str = "117",
        origin: str = "JFK",
        destination: str = "LHR",
        departing_at: str = "2026-11-20T18:05:00",
        arriving_at: str = "2026-11-21T06:20:00",
        duration: str = "PT7H15M",
        stops: int = 0,
        cabin: str | None = "ECONOMY",
        branded_fare: str | None = None,
        checked_bags: dict[str, Any] | None = None,
        cabin_bags: dict[str, Any] | None = None,
        amenities: list[dict[str, Any]] | None = None,
    ) -> dict[str, Any]:
        fare_detail: dict[str, Any] = {"segmentId": "1"}
        if cabin is not None:
            fare_detail["cabin"] = cabin
        if branded_fare is not None:
            fare_detail["brandedFareLabel"] = branded_fare
        if checked_bags is not None:
            fare_detail["includedCheckedBags"] = checked_bags
        if cabin_bags is not None:
            fare_detail["includedCabinBags"] = cabin_bags
        if amenities is not None:
            fare_detail["amenities"] = amenities
        segment = {
            "departure": {"iataCode": origin, "at": departing_at},
            "arrival": {"iataCode": destination, "at": arriving_at},
            "carrierCode": carrier_code,
            "number": number,
            "numberOfStops": 0,
        }
        price: dict[str, Any] = {"currency": currency, "total": total}
        if grand_total is not None:
            price["grandTotal"] = grand_total
        return {
            "type": "flight-offer",
            "id": offer_id,
            "source": "GDS",
            "itineraries": [
                {
                    "duration": duration,
                    "segments": [segment] + [dict(segment) for _ in range(stops)],
                }
            ],
            "price": price,
            "travelerPricings": [
                {"travelerId": "1", "fareDetailsBySegment": [fare_detail]}
            ],
        }

    return _make


@pytest.fixture
def amadeus_dictionaries() -> dict[str, Any]:
    return {
        "carriers": {"BA": "BRITISH AIRWAYS", "AA": "AMERICAN AIRLINES"},
        "locations": {"JFK": {"cityCode": "NYC"}, "LHR": {"cityCode": "LON"}},
    }
