"""Parse Amadeus flight-offers into NormalizedFlight objects."""

from __future__ import annotations

from typing import Any

from voyana_core.schemas import AmenityKind, ApiSource, NormalizedFlight

from ..exceptions import MalformedOfferError
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
    "entertainment": AmenityKind.ENTERTAINMENT,
    "meal": AmenityKind.MEALS,
    "food": AmenityKind.MEALS,
    "beverage": AmenityKind.MEALS,
}

_LOGO_URL = (
    "https://assets.duffel.com/img/airlines/for-light-background/"
    "full-color-logo/{code}.svg"
)


def _first_fare_detail(offer: dict[str, Any]) -> dict[str, Any]:
    """First traveller's fare details for the first segment, or ``{}``."""
    pricings = offer.get("travelerPricings")
    if not isinstance(pricings, list) or not pricings:
        return {}
    if not isinstance(pricings[0], dict):
        return {}
    details = pricings[0].get("fareDetailsBySegment")
    if not isinstance(details, list) or not details:
        return {}
    if not isinstance(details[0], dict):
        return {}
    return details[0]


def _baggage_entries(fare_detail: dict[str, Any]) -> list[dict[str, Any]]:
    """Rewrite Amadeus included-bag objects as typed baggage entries."""
    entries: list[dict[str, Any]] = []
    for bag_type, key in (
        ("carry_on", "includedCabinBags"),
        ("checked", "includedCheckedBags"),
    ):
        bags = fare_detail.get(key)
        if isinstance(bags, dict):
            entries.append({"type": bag_type, **bags})
    return entries


def normalize_offer(
    offer: dict[str, Any], dictionaries: dict[str, Any] | None = None
) -> NormalizedFlight:
    """Convert one Amadeus flight offer into a :class:`NormalizedFlight`.

    Amadeus never sends city names with an offer, so the IATA codes stand
    in for them.  Carrier names come from the response ``dictionaries``
    when present.

    Parameters
    ----------
    offer:
        One element of the Flight Offers Search ``data`` array.
    dictionaries:
        The response ``dictionaries`` object (``carriers`` maps codes to
        names).
    """
    offer_id = require(offer, "id", field="offer id")
    itineraries = require(
        offer, "itineraries", field="itineraries", offer_id=offer_id
    )
    itinerary = require(itineraries, 0, field="first itinerary", offer_id=offer_id)
    segments = require(itinerary, "segments", field="segments", offer_id=offer_id)
    segment = require(segments, 0, field="first segment", offer_id=offer_id)

    departure = require(segment, "departure", field="departure", offer_id=offer_id)
    arrival = require(segment, "arrival", field="arrival", offer_id=offer_id)
    origin = require(departure, "iataCode", field="origin code", offer_id=offer_id)
    destination = require(
        arrival, "iataCode", field="destination code", offer_id=offer_id
    )

    price = require(offer, "price", field="price", offer_id=offer_id)
    if not isinstance(price, dict):
        raise MalformedOfferError("price is not an object", offer_id=offer_id)
    total = price.get("grandTotal") or price.get("total")

    carrier_code = segment.get("carrierCode") or ""
    carriers = (dictionaries or {}).get("carriers")
    carrier_name = carrier_code
    if isinstance(carriers, dict):
        carrier_name = carriers.get(carrier_code) or carrier_code

    fare_detail = _first_fare_detail(offer)
    cabin_class = normalize_cabin_class(
        fare_detail.get("cabin") or fare_detail.get("brandedFareLabel")
    )

    amenity_entries = [
        entry
        for entry in (fare_detail.get("amenities") or segment.get("amenities") or [])
        if isinstance(entry, dict)
    ]
    amenities = build_amenities(
        (
            classify_amenity(
                entry.get("amenityType"), entry.get("description"), _AMENITY_TYPES
            )
            for entry in amenity_entries
        ),
        cabin_class,
        has_records=bool(amenity_entries),
    )

    return NormalizedFlight(
        id=str(offer_id),
        api_source=ApiSource.AMADEUS,
        carrier=carrier_name,
        carrier_logo=_LOGO_URL.format(code=carrier_code) if carrier_code else None,
        flight_number=f"{carrier_code}{segment.get('number') or ''}",
        origin=origin,
        origin_name=origin,
        destination=destination,
        destination_name=destination,
        departure=parse_timestamp(
            departure.get("at"), field="departure.at", offer_id=offer_id
        ),
        arrival=parse_timestamp(
            arrival.get("at"), field="arrival.at", offer_id=offer_id
        ),
        duration=itinerary.get("duration") or "",
        price=parse_price(total, offer_id=offer_id),
        currency=require(price, "currency", field="currency", offer_id=offer_id),
        cabin_class=cabin_class,
        stops=len(segments) - 1,
        amenities=amenities,
        baggage=extract_baggage(_baggage_entries(fare_detail)),
        raw_data=offer,
    )
