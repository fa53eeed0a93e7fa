"""Search outcome schemas returned by the orchestrator."""

from __future__ import annotations

from datetime import date  # noqa: TC003

from pydantic import BaseModel, Field

from .flight import NormalizedFlight


class FlightSearchResult(BaseModel):
    """Display-ready outcome of a single search.

    ``flights`` holds one record per physical flight, cheapest fare first,
    with every fare option attached in ``fare_options``.
    """

    flights: list[NormalizedFlight] = Field(default_factory=list)
    merged_count: int = 0
    currency: str
    sources: dict[str, int] = Field(default_factory=dict)
    errors: dict[str, str] = Field(default_factory=dict)
    dropped_currency_mismatch: int = 0

    @property
    def total(self) -> int:
        return len(self.flights)


class LegSearchResult(BaseModel):
    """Outcome for one leg of a multi-city search."""

    index: int
    origin: str
    destination: str
    departure_date: date
    result: FlightSearchResult


class MultiCitySearchResult(BaseModel):
    """Per-leg outcomes of a multi-city search."""

    legs: list[LegSearchResult] = Field(default_factory=list)
    passenger_count: int
    cabin_class: str

    @property
    def total_combinations(self) -> int:
        combinations = 1
        for leg in self.legs:
            combinations *= leg.result.total
        return combinations
