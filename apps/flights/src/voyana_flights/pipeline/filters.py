"""Post-search filtering and display grouping over flat flight lists."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from voyana_core.schemas import GroupBy

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from voyana_core.schemas import FlightFilters, NormalizedFlight

# ISO-8601 duration: P[nD][T[nH][nM][nS]] (e.g. "PT7H45M", "P1DT2H")
_DURATION_RE = re.compile(
    r"P(?:(\d+)D)?(?:T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+(?:\.\d+)?)S)?)?",
    re.IGNORECASE,
)


def parse_duration_hours(value: str | None) -> float:
    """Convert an ISO-8601 duration to fractional hours; 0 if unparseable."""
    match = _DURATION_RE.fullmatch((value or "").strip())
    if not match:
        return 0.0
    days, hours, minutes, seconds = match.groups()
    return (
        int(days or 0) * 24
        + int(hours or 0)
        + int(minutes or 0) / 60
        + float(seconds or 0) / 3600
    )


def filter_flights(
    flights: Iterable[NormalizedFlight],
    filters: FlightFilters | None,
) -> list[NormalizedFlight]:
    """Keep flights matching every criterion set in *filters*.

    Carrier tokens match case-insensitively anywhere in the carrier name
    or at the start of the flight number.  Input order is preserved.
    """
    flights = list(flights)
    if filters is None or filters.is_empty:
        return flights

    carriers = [c.strip().lower() for c in filters.preferred_carriers if c.strip()]
    cabin = filters.cabin_class.strip().lower() if filters.cabin_class else None

    def _keep(flight: NormalizedFlight) -> bool:
        if filters.max_price is not None and flight.price > filters.max_price:
            return False
        if filters.max_stops is not None and flight.stops > filters.max_stops:
            return False
        if carriers:
            name = flight.carrier.lower()
            number = flight.flight_number.lower()
            if not any(c in name or number.startswith(c) for c in carriers):
                return False
        return not (cabin and flight.cabin_class.value != cabin)

    return [f for f in flights if _keep(f)]


def _price_band(flight: NormalizedFlight) -> str:
    if flight.price < 200:
        return "Under $200"
    if flight.price < 500:
        return "$200-$500"
    if flight.price < 1000:
        return "$500-$1000"
    return "Over $1000"


def _duration_band(flight: NormalizedFlight) -> str:
    hours = parse_duration_hours(flight.duration)
    if hours < 3:
        return "Under 3h"
    if hours < 6:
        return "3-6h"
    if hours < 12:
        return "6-12h"
    return "Over 12h"


def _stops_band(flight: NormalizedFlight) -> str:
    if flight.stops == 0:
        return "Non-stop"
    if flight.stops == 1:
        return "1 stop"
    return f"{flight.stops} stops"


_GROUP_KEYS: dict[GroupBy, Callable[[NormalizedFlight], str]] = {
    GroupBy.CARRIER: lambda f: f.carrier,
    GroupBy.PRICE: _price_band,
    GroupBy.DURATION: _duration_band,
    GroupBy.STOPS: _stops_band,
}


def group_flights(
    flights: Iterable[NormalizedFlight],
    group_by: GroupBy | str,
) -> dict[str, list[NormalizedFlight]]:
    """Partition *flights* into labelled display buckets.

    Buckets appear in first-seen order and keep input order inside.
    Raises ``ValueError`` for an unknown *group_by*.
    """
    key_of = _GROUP_KEYS[GroupBy(group_by)]
    grouped: dict[str, list[NormalizedFlight]] = {}
    for flight in flights:
        grouped.setdefault(key_of(flight), []).append(flight)
    return grouped
