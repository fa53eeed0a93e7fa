"""Normalized flight DTOs for cross-provider data exchange."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field

from .enums import ApiSource, CabinClass


class Amenities(BaseModel):
    """On-board amenities of the first segment.

    ``None`` means the provider said nothing about that amenity, which is
    different from an explicit ``False``.
    """

    wifi: bool | None = None
    power: bool | None = None
    entertainment: bool | None = None
    meals: bool | None = None

    # True when the flags come from the cabin-class heuristic, not the provider
    inferred: bool = False


class BaggageAllowance(BaseModel):
    """Included allowance for one baggage type, per passenger."""

    quantity: int = Field(ge=0)
    weight: float | None = None
    weight_unit: str | None = None


class Baggage(BaseModel):
    """Included carry-on and checked baggage, per passenger."""

    carry_on: BaggageAllowance = Field(
        default_factory=lambda: BaggageAllowance(quantity=1)
    )
    checked: BaggageAllowance = Field(
        default_factory=lambda: BaggageAllowance(quantity=0)
    )


class NormalizedFlight(BaseModel):
    """One bookable offer, in the shape shared by every provider."""

    # Provider-local identity; not unique across providers
    id: str
    api_source: ApiSource

    # Carrier
    carrier: str
    carrier_logo: str | None = None
    flight_number: str

    # Route
    origin: str = Field(description="IATA airport code")
    origin_name: str
    destination: str = Field(description="IATA airport code")
    destination_name: str

    # Schedule of the first slice, as reported by the provider
    departure: datetime
    arrival: datetime
    duration: str = Field(description="ISO-8601 duration of the first slice")

    # Fare
    price: float = Field(ge=0)
    currency: str = Field(min_length=3, max_length=3)
    cabin_class: CabinClass
    stops: int = Field(default=0, ge=0)

    amenities: Amenities | None = None
    baggage: Baggage | None = None

    # Only set on the display record of a route group
    fare_options: list[NormalizedFlight] | None = None

    raw_data: dict[str, Any] = Field(default_factory=dict, repr=False)

    @property
    def dedup_key(self) -> str:
        """Provider-scoped identity used to drop literal duplicates."""
        return f"{self.api_source.value}:{self.id}"

    @property
    def route_key(self) -> str:
        """Physical-flight identity used to group fare options together.

        The departure is truncated (not rounded) to the hour in its own
        offset, so half-hour zones keep one bucket per local hour.  Aware
        timestamps are then expressed in UTC; naive ones stay airport-local
        wall time, which is what both providers report.
        """
        hour = self.departure.replace(minute=0, second=0, microsecond=0)
        if hour.tzinfo is not None:
            hour = hour.astimezone(UTC).replace(tzinfo=None)
        return ":".join(
            (
                self.carrier.strip().casefold(),
                self.flight_number.strip().casefold(),
                self.origin,
                self.destination,
                hour.isoformat(timespec="minutes"),
            )
        )
