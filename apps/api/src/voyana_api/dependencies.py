"""FastAPI dependency injection providers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from voyana_flights.orchestrator import SearchOrchestrator


def get_orchestrator(request: Request) -> SearchOrchestrator:
    """Return the orchestrator created by the application lifespan."""
    return request.app.state.orchestrator


OrchestratorDep = Annotated[SearchOrchestrator, Depends(get_orchestrator)]
