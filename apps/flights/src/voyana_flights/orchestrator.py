"""Fan a search out to every provider and merge what comes back."""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from voyana_core.schemas import (
    FlightSearchResult,
    LegSearchResult,
    MultiCitySearchResult,
    ProviderResult,
)

from .amadeus.provider import AmadeusProvider
from .config import FlightsSettings, settings
from .duffel.provider import DuffelProvider
from .exceptions import ProviderResponseError
from .pipeline.filters import filter_flights
from .pipeline.merger import (
    build_display_flights,
    group_offers_by_route,
    merge_provider_results,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from voyana_core.schemas import (
        FlightFilters,
        MultiCitySearchRequest,
        SearchRequest,
    )

    from .base import BaseProvider

logger = logging.getLogger(__name__)


def build_providers(config: FlightsSettings | None = None) -> list[BaseProvider]:
    """Construct every provider enabled in *config*."""
    config = config or settings
    providers: list[BaseProvider] = []
    if config.duffel_enabled:
        providers.append(DuffelProvider())
    if config.amadeus_enabled:
        providers.append(AmadeusProvider())
    return providers


class SearchOrchestrator:
    """Runs provider searches concurrently and merges the survivors.

    Each provider gets *timeout* seconds.  A provider that fails or times
    out contributes nothing; the merge always runs over whatever
    succeeded, even if that is nothing at all.
    """

    def __init__(
        self,
        providers: Sequence[BaseProvider],
        *,
        timeout: float | None = None,
    ) -> None:
        self._providers = list(providers)
        self._timeout = timeout if timeout is not None else settings.provider_timeout

    @property
    def providers(self) -> list[BaseProvider]:
        return list(self._providers)

    async def _fetch_all(self, request: SearchRequest) -> list[ProviderResult]:
        outcomes = await asyncio.gather(
            *(
                asyncio.wait_for(provider.fetch(request), timeout=self._timeout)
                for provider in self._providers
            ),
            return_exceptions=True,
        )

        results: list[ProviderResult] = []
        structural: ProviderResponseError | None = None
        for provider, outcome in zip(self._providers, outcomes, strict=True):
            if isinstance(outcome, ProviderResult):
                results.append(outcome)
                continue
            if isinstance(outcome, ProviderResponseError):
                structural = structural or outcome
            if isinstance(outcome, TimeoutError):
                error = f"timed out after {self._timeout:g}s"
                logger.warning("%s %s", provider.source.value, error)
            else:
                error = str(outcome) or type(outcome).__name__
                logger.error(
                    "%s search failed: %s",
                    provider.source.value,
                    error,
                    exc_info=outcome,
                )
            results.append(
                ProviderResult(
                    source=provider.source,
                    fetched_at=datetime.now(tz=UTC),
                    error=error,
                    success=False,
                )
            )

        if structural is not None:
            raise structural
        return results

    @staticmethod
    def _same_currency(
        results: Sequence[ProviderResult], currency: str
    ) -> tuple[list[ProviderResult], int]:
        """Drop offers not priced in *currency*, counting how many went."""
        kept: list[ProviderResult] = []
        dropped = 0
        for result in results:
            if not result.success:
                continue
            flights = [f for f in result.flights if f.currency.upper() == currency]
            mismatched = len(result.flights) - len(flights)
            if mismatched:
                dropped += mismatched
                logger.warning(
                    "Dropped %d %s offers not priced in %s",
                    mismatched,
                    result.source.value,
                    currency,
                )
            kept.append(result.model_copy(update={"flights": flights}))
        return kept, dropped

    async def search(
        self,
        request: SearchRequest,
        filters: FlightFilters | None = None,
    ) -> FlightSearchResult:
        """Search every provider, then merge, filter and group by route."""
        logger.info(
            "Searching flights: %s -> %s on %s",
            request.origin,
            request.destination,
            request.departure_date,
        )
        results = await self._fetch_all(request)
        priced, dropped = self._same_currency(results, request.currency)

        merged = merge_provider_results(priced)
        offers = filter_flights(merged, filters)
        display = build_display_flights(group_offers_by_route(offers))

        return FlightSearchResult(
            flights=display,
            merged_count=len(merged),
            currency=request.currency,
            sources={r.source.value: len(r.flights) for r in results},
            errors={r.source.value: r.error for r in results if r.error},
            dropped_currency_mismatch=dropped,
        )

    async def search_multi_city(
        self,
        request: MultiCitySearchRequest,
        filters: FlightFilters | None = None,
    ) -> MultiCitySearchResult:
        """Search every leg concurrently; each leg is merged on its own.

        If one leg fails the remaining legs are cancelled and the first
        failure is raised as is.
        """
        leg_requests = [request.leg_request(i) for i in range(len(request.legs))]
        try:
            async with asyncio.TaskGroup() as group:
                tasks = [
                    group.create_task(self.search(leg, filters))
                    for leg in leg_requests
                ]
        except ExceptionGroup as failed:
            raise failed.exceptions[0] from None
        leg_results = [task.result() for task in tasks]

        legs = [
            LegSearchResult(
                index=i,
                origin=leg.origin,
                destination=leg.destination,
                departure_date=leg.departure_date,
                result=result,
            )
            for i, (leg, result) in enumerate(
                zip(leg_requests, leg_results, strict=True)
            )
        ]
        outcome = MultiCitySearchResult(
            legs=legs,
            passenger_count=request.passengers.total,
            cabin_class=request.cabin_class.value,
        )
        logger.info(
            "Multi-city results: %s = %d possible combinations",
            " x ".join(str(leg.result.total) for leg in legs),
            outcome.total_combinations,
        )
        return outcome

    async def health(self) -> dict[str, bool]:
        """Health of every provider, keyed by source."""
        checks = await asyncio.gather(
            *(provider.health_check() for provider in self._providers),
            return_exceptions=True,
        )
        return {
            provider.source.value: check is True
            for provider, check in zip(self._providers, checks, strict=True)
        }

    async def close(self) -> None:
        """Release every provider, even when one of them fails to close."""
        for provider in self._providers:
            try:
                await provider.close()
            except Exception:
                logger.exception("Failed to close %s provider", provider.source.value)
