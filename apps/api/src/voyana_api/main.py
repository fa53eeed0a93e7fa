"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from voyana_api.config import settings
from voyana_api.routers import flights
from voyana_flights.exceptions import ProviderResponseError
from voyana_flights.orchestrator import SearchOrchestrator, build_providers

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Build the provider set on startup and release it on shutdown."""
    orchestrator = SearchOrchestrator(build_providers())
    app.state.orchestrator = orchestrator
    logger.info(
        "Flight providers enabled: %s",
        ", ".join(p.source.value for p in orchestrator.providers) or "none",
    )
    yield
    await orchestrator.close()


async def _provider_response_error(
    request: Request, exc: ProviderResponseError
) -> JSONResponse:
    logger.error("Provider %s returned an unusable response: %s", exc.source, exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Flight search temporarily unavailable"},
    )


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    app = FastAPI(
        title=settings.title,
        version="0.1.0",
        lifespan=_lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ProviderResponseError, _provider_response_error)

    app.include_router(flights.router, prefix=settings.api_prefix)

    return app


app = create_app()
