"""Parse Duffel offers into NormalizedFlight objects."""

from __future__ import annotations

from typing import Any

from voyana_core.schemas import AmenityKind, ApiSource, NormalizedFlight

from ..normalization import (
    build_amenities,
    classify_amenity,
    extract_baggage,
    normalize_cabin_class,
    parse_price,
    parse_timestamp,
    require,
)

_AMENITY_TYPES: dict[str, AmenityKind] = {
    "wifi": AmenityKind.WIFI,
    "power": AmenityKind.POWER,
    "usb_power": AmenityKind.POWER,
    "video": AmenityKind.ENTERTAINMENT,
    "audio": AmenityKind.ENTERTAINMENT,
    "food": AmenityKind.MEALS,
    "beverage": AmenityKind.MEALS,
}


def _amenity_entries(raw: Any) -> list[dict[str, Any]]:
    """Flatten Duffel cabin amenities into ``{"type", "description"}`` entries.

    Duffel reports amenities either as a list of typed entries or as a
    mapping of kind to ``{"available": bool, ...}``; unavailable kinds in
    the mapping form are dropped.
    """
    if isinstance(raw, list):
        return [entry for entry in raw if isinstance(entry, dict)]
    if isinstance(raw, dict):
        entries: list[dict[str, Any]] = []
        for kind, detail in raw.items():
            if isinstance(detail, dict) and not detail.get("available", True):
                continue
            description = None
            if isinstance(detail, dict):
                description = detail.get("description")
            entries.append({"type": kind, "description": description})
        return entries
    return []


def _place_name(place: dict[str, Any]) -> str:
    return place.get("city_name") or place.get("name") or place["iata_code"]


def normalize_offer(
    offer: dict[str, Any], dictionaries: dict[str, Any] | None = None
) -> NormalizedFlight:
    """Convert one Duffel offer into a :class:`NormalizedFlight`.

    Only the first slice's first segment feeds the summary fields; stops
    count every further segment of that slice.  Raises
    :class:`~voyana_flights.exceptions.MalformedOfferError` when the
    slice, segment, endpoints, schedule or price are missing.
    """
    offer_id = require(offer, "id", field="offer id")
    slices = require(offer, "slices", field="slices", offer_id=offer_id)
    first_slice = require(slices, 0, field="first slice", offer_id=offer_id)
    segments = require(first_slice, "segments", field="segments", offer_id=offer_id)
    segment = require(segments, 0, field="first segment", offer_id=offer_id)

    origin = require(segment, "origin", field="segment origin", offer_id=offer_id)
    destination = require(
        segment, "destination", field="segment destination", offer_id=offer_id
    )
    origin_code = require(origin, "iata_code", field="origin code", offer_id=offer_id)
    destination_code = require(
        destination, "iata_code", field="destination code", offer_id=offer_id
    )

    carrier = segment.get("marketing_carrier") or segment.get("operating_carrier")
    if not isinstance(carrier, dict):
        carrier = {}
    carrier_code = carrier.get("iata_code") or ""
    carrier_name = carrier.get("name") or carrier_code
    flight_digits = (
        segment.get("marketing_carrier_flight_number")
        or segment.get("operating_carrier_flight_number")
        or ""
    )

    passengers = segment.get("passengers")
    first_passenger: Any = {}
    if isinstance(passengers, list) and passengers:
        first_passenger = passengers[0]
    if not isinstance(first_passenger, dict):
        first_passenger = {}
    cabin = first_passenger.get("cabin")
    if not isinstance(cabin, dict):
        cabin = {}
    cabin_class = normalize_cabin_class(
        first_passenger.get("cabin_class_marketing_name")
        or cabin.get("marketing_name")
        or first_passenger.get("cabin_class")
    )

    amenity_entries = _amenity_entries(cabin.get("amenities"))
    amenities = build_amenities(
        (
            classify_amenity(
                entry.get("type"), entry.get("description"), _AMENITY_TYPES
            )
            for entry in amenity_entries
        ),
        cabin_class,
        has_records=bool(amenity_entries),
    )

    return NormalizedFlight(
        id=str(offer_id),
        api_source=ApiSource.DUFFEL,
        carrier=carrier_name,
        carrier_logo=carrier.get("logo_symbol_url"),
        flight_number=f"{carrier_code}{flight_digits}",
        origin=origin_code,
        origin_name=_place_name(origin),
        destination=destination_code,
        destination_name=_place_name(destination),
        departure=parse_timestamp(
            segment.get("departing_at"), field="departing_at", offer_id=offer_id
        ),
        arrival=parse_timestamp(
            segment.get("arriving_at"), field="arriving_at", offer_id=offer_id
        ),
        duration=first_slice.get("duration") or "",
        price=parse_price(offer.get("total_amount"), offer_id=offer_id),
        currency=require(
            offer, "total_currency", field="total_currency", offer_id=offer_id
        ),
        cabin_class=cabin_class,
        stops=len(segments) - 1,
        amenities=amenities,
        baggage=extract_baggage(first_passenger.get("baggages")),
        raw_data=offer,
    )
