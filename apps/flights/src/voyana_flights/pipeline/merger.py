"""Merge, deduplicate and route-group flight offers from several providers."""

from __future__ import annotations

import logging
from itertools import chain
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from voyana_core.schemas import NormalizedFlight, ProviderResult

logger = logging.getLogger(__name__)


def merge_flights(
    provider_results: Iterable[Iterable[NormalizedFlight]],
) -> list[NormalizedFlight]:
    """Combine per-provider flight lists into one deduplicated list.

    * Deduplicates on :pyattr:`NormalizedFlight.dedup_key` (provider +
      provider-local id), so offers from different providers never
      collapse into one another here.
    * On a repeated key the cheaper record wins; on equal prices the one
      seen first is kept.
    * Returns the survivors sorted by ``price`` ascending.  The sort is
      stable, so equal prices keep their input order.
    """
    best: dict[str, NormalizedFlight] = {}
    seen = 0

    for flight in chain.from_iterable(provider_results):
        seen += 1
        key = flight.dedup_key
        existing = best.get(key)
        if existing is None or flight.price < existing.price:
            best[key] = flight

    merged = sorted(best.values(), key=lambda f: f.price)
    logger.info("Merged %d offers into %d unique offers", seen, len(merged))
    return merged


def merge_provider_results(results: Iterable[ProviderResult]) -> list[NormalizedFlight]:
    """:func:`merge_flights` over the successful :class:`ProviderResult` objects."""
    return merge_flights(r.flights for r in results if r.success)


def route_key(flight: NormalizedFlight) -> str:
    """Physical-flight identity: carrier, flight number, route, departure hour."""
    return flight.route_key


def group_offers_by_route(
    flights: Iterable[NormalizedFlight],
) -> dict[str, list[NormalizedFlight]]:
    """Bucket offers by :func:`route_key`, each bucket cheapest first.

    Buckets keep the order in which their route was first seen; every
    input record lands in exactly one bucket.
    """
    routes: dict[str, list[NormalizedFlight]] = {}
    for flight in flights:
        routes.setdefault(route_key(flight), []).append(flight)

    for offers in routes.values():
        offers.sort(key=lambda f: f.price)
    return routes


def build_display_flights(
    grouped: Mapping[str, list[NormalizedFlight]],
) -> list[NormalizedFlight]:
    """One display record per route: the cheapest offer with all fare options.

    The display record is a shallow copy, so the offers inside
    ``fare_options`` (the cheapest one included) keep ``fare_options``
    unset.
    """
    return [
        offers[0].model_copy(update={"fare_options": list(offers)})
        for offers in grouped.values()
        if offers
    ]
