"""CLI for running flight searches against the configured providers."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from datetime import date

import click
from pydantic import ValidationError

from voyana_core.schemas import (
    CabinClass,
    FlightFilters,
    GroupBy,
    MultiCitySearchRequest,
    NormalizedFlight,
    PassengerCount,
    SearchLeg,
    SearchRequest,
)

from .config import settings
from .exceptions import ProviderError
from .orchestrator import SearchOrchestrator, build_providers
from .pipeline.filters import group_flights

logging.basicConfig(
    level=settings.log_level.upper(), format="%(levelname)s: %(message)s"
)
logger = logging.getLogger(__name__)


def _parse_date(value: str, param: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        msg = f"{value!r} is not a YYYY-MM-DD date"
        raise click.BadParameter(msg, param_hint=param) from exc


def _parse_leg(value: str) -> SearchLeg:
    parts = value.split(":")
    if len(parts) != 3:
        raise click.BadParameter(
            f"{value!r} is not ORIGIN:DESTINATION:DATE", param_hint="--leg"
        )
    origin, destination, departure = parts
    return SearchLeg(
        origin=origin,
        destination=destination,
        departure_date=_parse_date(departure, "--leg"),
    )


def _build_filters(
    max_price: float | None, max_stops: int | None, carriers: tuple[str, ...]
) -> FlightFilters:
    return FlightFilters(
        max_price=max_price,
        max_stops=max_stops,
        preferred_carriers=list(carriers),
    )


def _print_results(flights: list[NormalizedFlight]) -> None:
    if not flights:
        click.echo("No flights found.")
        return
    click.echo(f"\nFound {len(flights)} flight(s):\n")
    for i, f in enumerate(flights, 1):
        options = len(f.fare_options or [f])
        click.echo(
            f"  {i}. {f.carrier} {f.flight_number} | {f.origin} → {f.destination} | "
            f"{f.departure:%Y-%m-%d %H:%M} - {f.arrival:%H:%M} | {f.duration} | "
            f"{f.stops} stop(s) | {f.price:.2f} {f.currency} | "
            f"{f.cabin_class.value} | {options} fare(s) [{f.api_source.value}]"
        )


def _print_groups(flights: list[NormalizedFlight], group_by: str) -> None:
    for label, members in group_flights(flights, group_by).items():
        click.echo(f"\n== {label} ({len(members)}) ==")
        _print_results(members)


async def _with_orchestrator(run):  # type: ignore[no-untyped-def]
    orchestrator = SearchOrchestrator(build_providers())
    try:
        return await run(orchestrator)
    finally:
        await orchestrator.close()


def _run(coro_factory):  # type: ignore[no-untyped-def]
    try:
        return asyncio.run(_with_orchestrator(coro_factory))
    except ProviderError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


@click.group()
def cli() -> None:
    """Voyana flight search CLI."""


@cli.command("search")
@click.argument("origin")
@click.argument("destination")
@click.argument("departure_date")
@click.option("--return-date", default=None, help="Return date for round trips")
@click.option("--adults", default=1, show_default=True, type=int)
@click.option("--children", default=0, show_default=True, type=int)
@click.option(
    "--cabin",
    default=CabinClass.ECONOMY.value,
    type=click.Choice([c.value for c in CabinClass], case_sensitive=False),
    help="Cabin class",
)
@click.option("--currency", default=None, help="ISO currency code")
@click.option("--max-price", default=None, type=float, help="Drop offers above this")
@click.option("--max-stops", default=None, type=int, help="Drop offers with more stops")
@click.option("--carrier", "carriers", multiple=True, help="Preferred carrier")
@click.option(
    "--group-by",
    default=None,
    type=click.Choice([g.value for g in GroupBy], case_sensitive=False),
    help="Group the printed results",
)
@click.option("--json-output", is_flag=True, help="Output as JSON")
def search(
    origin: str,
    destination: str,
    departure_date: str,
    return_date: str | None,
    adults: int,
    children: int,
    cabin: str,
    currency: str | None,
    max_price: float | None,
    max_stops: int | None,
    carriers: tuple[str, ...],
    group_by: str | None,
    json_output: bool,
) -> None:
    """Search one-way or round-trip flights across every provider."""
    try:
        request = SearchRequest(
            origin=origin,
            destination=destination,
            departure_date=_parse_date(departure_date, "DEPARTURE_DATE"),
            return_date=(
                _parse_date(return_date, "--return-date") if return_date else None
            ),
            cabin_class=CabinClass(cabin.lower()),
            passengers=PassengerCount(adults=adults, children=children),
            currency=currency or settings.default_currency,
            max_results=settings.max_results,
        )
        filters = _build_filters(max_price, max_stops, carriers)
    except ValidationError as exc:
        raise click.UsageError(str(exc)) from exc

    result = _run(lambda orchestrator: orchestrator.search(request, filters))

    if json_output:
        click.echo(json.dumps(result.model_dump(mode="json"), indent=2))
        return
    click.echo(
        f"Sources: {result.sources} | Merged: {result.merged_count} | "
        f"Routes: {result.total}"
    )
    for source, error in result.errors.items():
        click.echo(f"Error ({source}): {error}", err=True)
    if result.dropped_currency_mismatch:
        click.echo(
            f"Dropped {result.dropped_currency_mismatch} offer(s) "
            f"not priced in {result.currency}",
            err=True,
        )
    if group_by:
        _print_groups(result.flights, group_by)
    else:
        _print_results(result.flights)


@cli.command("search-multi")
@click.option(
    "--leg",
    "legs",
    multiple=True,
    required=True,
    help="ORIGIN:DESTINATION:YYYY-MM-DD, repeat for every leg",
)
@click.option("--adults", default=1, show_default=True, type=int)
@click.option(
    "--cabin",
    default=CabinClass.ECONOMY.value,
    type=click.Choice([c.value for c in CabinClass], case_sensitive=False),
    help="Cabin class",
)
@click.option("--currency", default=None, help="ISO currency code")
@click.option("--json-output", is_flag=True, help="Output as JSON")
def search_multi(
    legs: tuple[str, ...],
    adults: int,
    cabin: str,
    currency: str | None,
    json_output: bool,
) -> None:
    """Search a multi-city trip, one independent search per leg."""
    try:
        request = MultiCitySearchRequest(
            legs=[_parse_leg(leg) for leg in legs],
            cabin_class=CabinClass(cabin.lower()),
            passengers=PassengerCount(adults=adults),
            currency=currency or settings.default_currency,
            max_results=settings.max_results,
        )
    except ValidationError as exc:
        raise click.UsageError(str(exc)) from exc

    result = _run(lambda orchestrator: orchestrator.search_multi_city(request))

    if json_output:
        click.echo(json.dumps(result.model_dump(mode="json"), indent=2))
        return
    for leg in result.legs:
        click.echo(
            f"\nLeg {leg.index + 1}: {leg.origin} → {leg.destination} "
            f"on {leg.departure_date}"
        )
        _print_results(leg.result.flights)
    click.echo(f"\nPossible combinations: {result.total_combinations}")


@cli.command("health")
def health_check() -> None:
    """Check health of every configured provider."""
    statuses = _run(lambda orchestrator: orchestrator.health())
    if not statuses:
        click.echo("No providers enabled.")
        return
    for source, ok in statuses.items():
        status = "OK" if ok else "FAIL"
        click.echo(f"  {source}: {status}")
