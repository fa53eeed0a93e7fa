"""Provider fetch schemas: raw offer batches and per-provider outcomes."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from typing import Any

from pydantic import BaseModel, Field

from .enums import ApiSource
from .flight import NormalizedFlight


class RawOfferBatch(BaseModel):
    """Offers exactly as a provider returned them.

    ``dictionaries`` carries the static reference data that came with the
    response (e.g. carrier names keyed by code) and is handed to the
    provider's normalizer alongside each offer.
    """

    source: ApiSource
    offers: list[dict[str, Any]] = Field(default_factory=list)
    dictionaries: dict[str, Any] = Field(default_factory=dict)


class ProviderResult(BaseModel):
    """Result of one provider's search + normalization for one request."""

    flights: list[NormalizedFlight] = Field(default_factory=list)
    source: ApiSource
    fetched_at: datetime
    duration_ms: int = 0
    skipped: int = 0
    error: str | None = None
    success: bool = True
