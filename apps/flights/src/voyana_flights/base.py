"""Abstract base class for all flight providers."""

from __future__ import annotations

import abc
import logging
import time
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import ValidationError

from voyana_core.schemas import ProviderResult

from .exceptions import MalformedOfferError, ProviderResponseError

if TYPE_CHECKING:
    from voyana_core.schemas import (
        ApiSource,
        NormalizedFlight,
        RawOfferBatch,
        SearchRequest,
    )

logger = logging.getLogger(__name__)


class BaseProvider(abc.ABC):
    """Base class that every upstream flight provider implements.

    Subclasses supply the network call (:meth:`search`) and the pure
    per-offer mapping (:meth:`normalize`); :meth:`fetch` ties the two
    together and applies the failure policy.
    """

    source: ClassVar[ApiSource]

    @abc.abstractmethod
    async def search(self, request: SearchRequest) -> RawOfferBatch:
        """Query the provider and return its offers untouched."""

    @abc.abstractmethod
    def normalize(
        self, offer: dict[str, Any], dictionaries: dict[str, Any] | None = None
    ) -> NormalizedFlight:
        """Map one raw offer; raise :class:`MalformedOfferError` if unusable."""

    @abc.abstractmethod
    async def health_check(self) -> bool:
        """Return True if the provider is configured and reachable."""

    @abc.abstractmethod
    async def close(self) -> None:
        """Release any held resources (HTTP clients, SDK handles, etc.)."""

    def normalize_batch(
        self, batch: RawOfferBatch
    ) -> tuple[list[NormalizedFlight], int]:
        """Normalize every offer in *batch*, dropping malformed ones.

        Returns the normalized flights and the number of offers skipped.
        """
        flights: list[NormalizedFlight] = []
        skipped = 0
        for offer in batch.offers:
            try:
                flights.append(self.normalize(offer, batch.dictionaries))
            except (MalformedOfferError, ValidationError) as exc:
                skipped += 1
                logger.warning(
                    "Skipping malformed %s offer %s: %s",
                    self.source.value,
                    getattr(exc, "offer_id", None) or offer.get("id", "?"),
                    exc,
                )
        return flights, skipped

    async def fetch(self, request: SearchRequest) -> ProviderResult:
        """Search and normalize, absorbing provider failures.

        A failing or misconfigured provider yields an unsuccessful result
        with no flights.  Only :class:`ProviderResponseError` propagates.
        """
        start = time.monotonic()
        try:
            batch = await self.search(request)
        except ProviderResponseError:
            raise
        except Exception as exc:
            elapsed_ms = int((time.monotonic() - start) * 1000)
            logger.exception("%s search failed", self.source.value)
            return ProviderResult(
                source=self.source,
                fetched_at=datetime.now(tz=UTC),
                duration_ms=elapsed_ms,
                error=str(exc) or type(exc).__name__,
                success=False,
            )

        flights, skipped = self.normalize_batch(batch)
        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.info(
            "%s returned %d offers (%d skipped) in %dms",
            self.source.value,
            len(flights),
            skipped,
            elapsed_ms,
        )
        return ProviderResult(
            flights=flights,
            source=self.source,
            fetched_at=datetime.now(tz=UTC),
            duration_ms=elapsed_ms,
            skipped=skipped,
        )
