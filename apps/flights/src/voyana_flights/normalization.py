"""Provider-independent helpers for mapping raw offers into NormalizedFlight.

Every provider parser funnels its quirks through these functions so that
cabin classes, amenities, baggage and timestamps come out identically
regardless of where an offer was found.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import datetime
from typing import TYPE_CHECKING, Any

from voyana_core.schemas import (
    Amenities,
    AmenityKind,
    Baggage,
    BaggageAllowance,
    CabinClass,
)

from .exceptions import MalformedOfferError

if TYPE_CHECKING:
    from collections.abc import Iterable

# Checked in this order: a name containing both a business alias and
# "premium" resolves to business.
_CABIN_KEYWORDS: tuple[tuple[CabinClass, tuple[str, ...]], ...] = (
    (
        CabinClass.BUSINESS,
        (
            "business",
            "polaris",
            "delta one",
            "upper class",
            "club world",
            "mint",
            "qsuite",
        ),
    ),
    (CabinClass.PREMIUM_ECONOMY, ("premium", "comfort")),
    (CabinClass.FIRST, ("first",)),
)

_AMENITY_KEYWORDS: dict[AmenityKind, tuple[str, ...]] = {
    AmenityKind.WIFI: ("wifi", "wi-fi", "internet"),
    AmenityKind.POWER: ("power", "usb", "outlet"),
    AmenityKind.ENTERTAINMENT: ("entertainment", "video", "movie"),
    AmenityKind.MEALS: ("meal", "food", "snack", "beverage"),
}

_CARRY_ON = "carry_on"
_CHECKED = "checked"


def normalize_cabin_class(raw: str | None) -> CabinClass:
    """Map any provider cabin / fare-brand name onto :class:`CabinClass`."""
    value = (raw or "").strip().lower()
    for cabin, keywords in _CABIN_KEYWORDS:
        if any(keyword in value for keyword in keywords):
            return cabin
    return CabinClass.ECONOMY


def classify_amenity(
    type_code: str | None,
    description: str | None,
    type_map: Mapping[str, AmenityKind],
) -> AmenityKind | None:
    """Resolve one amenity entry to a kind, or ``None`` if it is none of ours.

    The provider's type code wins; the free-text description is only
    searched when the code is missing or unknown.
    """
    if type_code:
        kind = type_map.get(type_code.strip().lower())
        if kind is not None:
            return kind
    text = (description or "").lower()
    if text:
        for kind, keywords in _AMENITY_KEYWORDS.items():
            if any(keyword in text for keyword in keywords):
                return kind
    return None


def build_amenities(
    kinds: Iterable[AmenityKind | None],
    cabin_class: CabinClass,
    *,
    has_records: bool,
) -> Amenities:
    """Fold classified amenity entries into an :class:`Amenities` record.

    With no provider records at all, fall back to a cabin-based guess:
    anything above economy is assumed to include entertainment and meals.
    """
    if not has_records:
        premium = cabin_class is not CabinClass.ECONOMY
        return Amenities(
            entertainment=True if premium else None,
            meals=True if premium else None,
            inferred=True,
        )

    found = {kind for kind in kinds if kind is not None}
    return Amenities(
        wifi=AmenityKind.WIFI in found,
        power=AmenityKind.POWER in found,
        entertainment=AmenityKind.ENTERTAINMENT in found,
        meals=AmenityKind.MEALS in found,
    )


def _allowance(
    entry: Mapping[str, Any] | None, default_quantity: int
) -> BaggageAllowance:
    if entry is None:
        return BaggageAllowance(quantity=default_quantity)
    weight = entry.get("weight")
    raw_quantity = entry.get("quantity")
    if raw_quantity is None:
        # A weight-only allowance still means one bag
        quantity = 1 if weight else default_quantity
    else:
        try:
            quantity = int(raw_quantity)
        except (TypeError, ValueError):
            quantity = default_quantity
    return BaggageAllowance(
        quantity=max(quantity, 0),
        weight=float(weight) if isinstance(weight, int | float) else None,
        weight_unit=entry.get("weight_unit") or entry.get("weightUnit"),
    )


def extract_baggage(entries: Iterable[Mapping[str, Any]] | None) -> Baggage:
    """Pick the first carry-on and first checked entry from a baggage list."""
    carry_on: Mapping[str, Any] | None = None
    checked: Mapping[str, Any] | None = None
    for entry in entries or ():
        if not isinstance(entry, Mapping):
            continue
        bag_type = str(entry.get("type", "")).lower()
        if bag_type == _CARRY_ON and carry_on is None:
            carry_on = entry
        elif bag_type == _CHECKED and checked is None:
            checked = entry
    return Baggage(
        carry_on=_allowance(carry_on, default_quantity=1),
        checked=_allowance(checked, default_quantity=0),
    )


def parse_timestamp(
    value: Any, *, field: str, offer_id: str | None = None
) -> datetime:
    """Parse an ISO-8601 timestamp, keeping whatever offset it carries."""
    if not isinstance(value, str) or not value:
        raise MalformedOfferError(f"missing {field}", offer_id=offer_id)
    try:
        return datetime.fromisoformat(value)
    except ValueError as exc:
        raise MalformedOfferError(
            f"unparseable {field}: {value!r}", offer_id=offer_id
        ) from exc


def parse_price(value: Any, *, offer_id: str | None = None) -> float:
    """Parse a decimal price string; negative or missing prices are malformed."""
    if value is None or value == "":
        raise MalformedOfferError("missing price", offer_id=offer_id)
    try:
        price = float(value)
    except (TypeError, ValueError) as exc:
        raise MalformedOfferError(
            f"unparseable price: {value!r}", offer_id=offer_id
        ) from exc
    if price < 0 or not math.isfinite(price):
        raise MalformedOfferError(f"invalid price: {value!r}", offer_id=offer_id)
    return price


def require(
    mapping: Any, key: str | int, *, field: str, offer_id: str | None = None
) -> Any:
    """Fetch a required element, raising :class:`MalformedOfferError` if absent."""
    try:
        value = mapping[key]
    except (KeyError, IndexError, TypeError) as exc:
        raise MalformedOfferError(f"missing {field}", offer_id=offer_id) from exc
    if value is None or value == [] or value == "":
        raise MalformedOfferError(f"missing {field}", offer_id=offer_id)
    return value
