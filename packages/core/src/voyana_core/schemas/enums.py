"""Pydantic-compatible enums shared by every flight provider."""

from enum import StrEnum


class ApiSource(StrEnum):
    """Upstream provider that produced a flight offer."""

    DUFFEL = "duffel"
    AMADEUS = "amadeus"


class CabinClass(StrEnum):
    """Canonical cabin vocabulary; provider marketing names map into it."""

    ECONOMY = "economy"
    PREMIUM_ECONOMY = "premium_economy"
    BUSINESS = "business"
    FIRST = "first"


class AmenityKind(StrEnum):
    """On-board amenity kinds tracked on a normalized flight."""

    WIFI = "wifi"
    POWER = "power"
    ENTERTAINMENT = "entertainment"
    MEALS = "meals"


class GroupBy(StrEnum):
    """Display grouping dimension for a flat list of flights."""

    CARRIER = "carrier"
    PRICE = "price"
    DURATION = "duration"
    STOPS = "stops"
