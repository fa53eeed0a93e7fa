"""Search request, passenger and filter schemas."""

from __future__ import annotations

from datetime import date  # noqa: TC003
from itertools import pairwise

from pydantic import BaseModel, Field, field_validator, model_validator

from .enums import CabinClass


class PassengerCount(BaseModel):
    """Number of passengers by type."""

    adults: int = Field(default=1, ge=1, le=9)
    children: int = Field(default=0, ge=0, le=8)
    infants_in_seat: int = Field(default=0, ge=0, le=4)
    infants_on_lap: int = Field(default=0, ge=0, le=4)

    @model_validator(mode="after")
    def _validate_totals(self) -> PassengerCount:
        if self.total > 9:
            msg = f"Total passengers ({self.total}) exceeds maximum of 9"
            raise ValueError(msg)
        if self.infants_on_lap > self.adults:
            msg = "Each infant on lap requires at least one adult"
            raise ValueError(msg)
        return self

    @property
    def total(self) -> int:
        return self.adults + self.children + self.infants_in_seat + self.infants_on_lap


class SearchRequest(BaseModel):
    """Flight search parameters sent to every provider.

    A search is priced in a single ``currency``; offers quoted in any other
    currency are not comparable and are dropped before merging.
    """

    origin: str = Field(min_length=3, max_length=3, description="IATA airport code")
    destination: str = Field(
        min_length=3, max_length=3, description="IATA airport code"
    )
    departure_date: date
    return_date: date | None = None
    cabin_class: CabinClass = CabinClass.ECONOMY
    passengers: PassengerCount = Field(default_factory=PassengerCount)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    max_results: int = Field(default=50, ge=1, le=250)

    @field_validator("origin", "destination", "currency")
    @classmethod
    def _upper(cls, value: str) -> str:
        return value.strip().upper()

    @model_validator(mode="after")
    def _validate_dates(self) -> SearchRequest:
        if self.return_date and self.return_date < self.departure_date:
            msg = "return_date must be after departure_date"
            raise ValueError(msg)
        if self.origin == self.destination:
            msg = "origin and destination must differ"
            raise ValueError(msg)
        return self


class SearchLeg(BaseModel):
    """One leg of a multi-city trip."""

    origin: str = Field(min_length=3, max_length=3, description="IATA airport code")
    destination: str = Field(
        min_length=3, max_length=3, description="IATA airport code"
    )
    departure_date: date

    @field_validator("origin", "destination")
    @classmethod
    def _upper(cls, value: str) -> str:
        return value.strip().upper()


class MultiCitySearchRequest(BaseModel):
    """Multi-city search: every leg shares passengers, cabin and currency."""

    legs: list[SearchLeg] = Field(min_length=2)
    cabin_class: CabinClass = CabinClass.ECONOMY
    passengers: PassengerCount = Field(default_factory=PassengerCount)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    max_results: int = Field(default=50, ge=1, le=250)

    @field_validator("currency")
    @classmethod
    def _upper(cls, value: str) -> str:
        return value.strip().upper()

    @model_validator(mode="after")
    def _validate_leg_order(self) -> MultiCitySearchRequest:
        for prev, nxt in pairwise(self.legs):
            if nxt.departure_date < prev.departure_date:
                msg = "legs must be in chronological order"
                raise ValueError(msg)
        return self

    def leg_request(self, index: int) -> SearchRequest:
        """Build the one-way :class:`SearchRequest` for leg *index*."""
        leg = self.legs[index]
        return SearchRequest(
            origin=leg.origin,
            destination=leg.destination,
            departure_date=leg.departure_date,
            cabin_class=self.cabin_class,
            passengers=self.passengers,
            currency=self.currency,
            max_results=self.max_results,
        )


class FlightFilters(BaseModel):
    """Post-search criteria; every field left unset imposes no constraint."""

    max_price: float | None = Field(default=None, ge=0)
    max_stops: int | None = Field(default=None, ge=0)
    preferred_carriers: list[str] = Field(default_factory=list)
    cabin_class: str | None = None

    @property
    def is_empty(self) -> bool:
        return (
            self.max_price is None
            and self.max_stops is None
            and not self.preferred_carriers
            and not self.cabin_class
        )
