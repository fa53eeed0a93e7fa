"""Flight search router."""

from __future__ import annotations

from fastapi import APIRouter

from voyana_api.dependencies import OrchestratorDep  # noqa: TC001
from voyana_api.schemas.flights import (
    FlightSearchRequest,
    FlightSearchResponse,
    MultiCityFlightSearchRequest,
    MultiCityFlightSearchResponse,
    ProviderHealthResponse,
)
from voyana_flights.pipeline.filters import group_flights

router = APIRouter(prefix="/flights", tags=["flights"])


@router.post("/search", response_model=FlightSearchResponse)
async def search_flights(
    request: FlightSearchRequest,
    orchestrator: OrchestratorDep,
) -> FlightSearchResponse:
    """Search every provider and return merged, route-grouped offers."""
    result = await orchestrator.search(request, request.filters)
    groups = (
        group_flights(result.flights, request.group_by) if request.group_by else None
    )
    return FlightSearchResponse(
        flights=result.flights,
        total=result.total,
        merged_count=result.merged_count,
        currency=result.currency,
        sources=result.sources,
        errors=result.errors,
        dropped_currency_mismatch=result.dropped_currency_mismatch,
        groups=groups,
    )


@router.post("/search-multi", response_model=MultiCityFlightSearchResponse)
async def search_multi_city(
    request: MultiCityFlightSearchRequest,
    orchestrator: OrchestratorDep,
) -> MultiCityFlightSearchResponse:
    """Search each leg of a multi-city trip independently."""
    result = await orchestrator.search_multi_city(request, request.filters)
    return MultiCityFlightSearchResponse(
        legs=result.legs,
        total_combinations=result.total_combinations,
        passenger_count=result.passenger_count,
        cabin_class=result.cabin_class,
    )


@router.get("/health", response_model=ProviderHealthResponse)
async def provider_health(orchestrator: OrchestratorDep) -> ProviderHealthResponse:
    """Check whether each provider is reachable."""
    statuses = await orchestrator.health()
    return ProviderHealthResponse(
        providers=statuses,
        healthy=bool(statuses) and all(statuses.values()),
    )
