"""Flight search request / response schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field

from voyana_core.schemas import (
    FlightFilters,
    GroupBy,
    LegSearchResult,
    MultiCitySearchRequest,
    NormalizedFlight,
    SearchRequest,
)
from voyana_flights.config import settings as flights_settings


def _default_currency() -> str:
    return flights_settings.default_currency


class FlightSearchRequest(SearchRequest):
    """Inbound one-way / round-trip search from the client."""

    currency: str = Field(
        default_factory=_default_currency,
        min_length=3,
        max_length=3,
        validate_default=True,
    )
    filters: FlightFilters | None = None
    group_by: GroupBy | None = None


class FlightSearchResponse(BaseModel):
    """Search response envelope.

    ``flights`` holds one display record per physical flight; its
    ``fare_options`` carry every offer for that flight, cheapest first.
    """

    flights: list[NormalizedFlight]
    total: int
    merged_count: int
    currency: str
    sources: dict[str, int] = Field(default_factory=dict)
    errors: dict[str, str] = Field(default_factory=dict)
    dropped_currency_mismatch: int = 0
    groups: dict[str, list[NormalizedFlight]] | None = None


class MultiCityFlightSearchRequest(MultiCitySearchRequest):
    """Inbound multi-city search; filters apply to every leg."""

    currency: str = Field(
        default_factory=_default_currency,
        min_length=3,
        max_length=3,
        validate_default=True,
    )
    filters: FlightFilters | None = None


class MultiCityFlightSearchResponse(BaseModel):
    """Per-leg results plus the number of possible itineraries."""

    legs: list[LegSearchResult]
    total_combinations: int
    passenger_count: int
    cabin_class: str


class ProviderHealthResponse(BaseModel):
    """Reachability of every enabled provider."""

    providers: dict[str, bool]
    healthy: bool
