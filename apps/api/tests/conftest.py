"""Fixtures for API tests: an app wired to in-memory providers."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

import pytest
from fastapi.testclient import TestClient

from voyana_api.dependencies import get_orchestrator
from voyana_api.main import create_app
from voyana_core.schemas import (
    ApiSource,
    CabinClass,
    NormalizedFlight,
    RawOfferBatch,
    SearchRequest,
)
from voyana_flights.base import BaseProvider
from voyana_flights.orchestrator import SearchOrchestrator


class StaticProvider(BaseProvider):
    """Returns the same flights for every request, or raises *error*."""

    source = ApiSource.DUFFEL

    def __init__(
        self,
        flights: list[NormalizedFlight] | None = None,
        *,
        source: ApiSource = ApiSource.DUFFEL,
        error: Exception | None = None,
    ) -> None:
        self.source = source
        self._flights = list(flights or [])
        self._error = error

    async def search(self, request: SearchRequest) -> RawOfferBatch:
        if self._error is not None:
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
        return self._error is None

    async def close(self) -> None:
        pass


def _flight(
    offer_id: str,
    *,
    source: ApiSource = ApiSource.DUFFEL,
    price: float,
    flight_number: str = "BA117",
    carrier: str = "British Airways",
) -> NormalizedFlight:
    departure = datetime(2026, 11, 20, 18, 30)
    return NormalizedFlight(
        id=offer_id,
        api_source=source,
        carrier=carrier,
        flight_number=flight_number,
        origin="JFK",
        origin_name="New York",
        destination="LHR",
        destination_name="London",
        departure=departure,
        arrival=departure + timedelta(hours=7),
        duration="PT7H",
        price=price,
        currency="USD",
        cabin_class=CabinClass.ECONOMY,
    )


@pytest.fixture
def default_providers() -> list[BaseProvider]:
    return [
        StaticProvider(
            [
                _flight("off_1", price=450.0),
                _flight("off_2", flight_number="BA115", price=1200.0),
            ]
        ),
        StaticProvider(
            [_flight("7", source=ApiSource.AMADEUS, price=420.5)],
            source=ApiSource.AMADEUS,
        ),
    ]


@pytest.fixture
def make_client():
    """Factory: a TestClient whose orchestrator uses the given providers.

    The lifespan is not entered, so no real provider is ever built.
    """

    def _make(providers: list[BaseProvider]) -> TestClient:
        app = create_app()
        orchestrator = SearchOrchestrator(providers)
        app.dependency_overrides[get_orchestrator] = lambda: orchestrator
        return TestClient(app)

    return _make


@pytest.fixture
def client(make_client, default_providers) -> TestClient:
    return make_client(default_providers)


@pytest.fixture
def static_provider() -> type[StaticProvider]:
    return StaticProvider
