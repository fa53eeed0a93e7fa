"""Core schemas for Voyana flight search."""

from .enums import AmenityKind, ApiSource, CabinClass, GroupBy
from .flight import Amenities, Baggage, BaggageAllowance, NormalizedFlight
from .provider import ProviderResult, RawOfferBatch
from .results import FlightSearchResult, LegSearchResult, MultiCitySearchResult
from .search import (
    FlightFilters,
    MultiCitySearchRequest,
    PassengerCount,
    SearchLeg,
    SearchRequest,
)

__all__ = [
    "Amenities",
    "AmenityKind",
    "ApiSource",
    "Baggage",
    "BaggageAllowance",
    "CabinClass",
    "FlightFilters",
    "FlightSearchResult",
    "GroupBy",
    "LegSearchResult",
    "MultiCitySearchRequest",
    "MultiCitySearchResult",
    "NormalizedFlight",
    "PassengerCount",
    "ProviderResult",
    "RawOfferBatch",
    "SearchLeg",
    "SearchRequest",
]
