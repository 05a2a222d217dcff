"""Duplicate-avoiding acquisition of new quote records."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Iterable

import structlog

from .hashing import fingerprint
from .models import QuoteRecord
from .providers import BaseProvider, ProviderChain

DEFAULT_MAX_RETRIES = 10
DEFAULT_RETRY_DELAY = 0.2


@dataclass
class IngestionResult:
    requested: int
    records: list[QuoteRecord] = field(default_factory=list)
    exhausted_slots: list[int] = field(default_factory=list)
    empty_slots: list[int] = field(default_factory=list)

    @property
    def appended(self) -> int:
        return len(self.records)


class IngestionEngine:
    """Fill ``count`` slots with candidates whose fingerprint is not yet known."""

    def __init__(
        self,
        provider: ProviderChain | BaseProvider,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        offline: bool = False,
        clock: Callable[[], datetime] | None = None,
        sleep: Callable[[float], None] = time.sleep,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.provider = provider
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.offline = offline
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._sleep = sleep
        self.logger = logger or structlog.get_logger("quote_keeper.ingest")

    def ingest(self, count: int, known: Iterable[str] = ()) -> IngestionResult:
        seen = set(known)
        result = IngestionResult(requested=count)
        for slot in range(count):
            record = self._fill_slot(slot, seen, result)
            if record is not None:
                result.records.append(record)
        return result

    # ------------------------------------------------------------------
    def _fill_slot(self, slot: int, seen: set[str], result: IngestionResult) -> QuoteRecord | None:
        retries = 0
        while retries < self.max_retries:
            outcome = self.provider.get_candidate(slot, retries)
            if not outcome.found:
                self.logger.warning("no_candidate", slot=slot, attempt=retries, reason=outcome.reason)
                result.empty_slots.append(slot)
                return None

            digest = fingerprint(outcome.candidate.text_original)
            if digest not in seen:
                seen.add(digest)
                self.logger.info("candidate_accepted", slot=slot, provider=outcome.provider, hash=digest[:8])
                return QuoteRecord.from_candidate(outcome.candidate, digest, now=self._clock())

            retries += 1
            self.logger.info(
                "duplicate_candidate",
                slot=slot,
                retry=retries,
                max_retries=self.max_retries,
                provider=outcome.provider,
                hash=digest[:8],
            )
            if not self.offline and self.retry_delay > 0:
                self._sleep(self.retry_delay)

        self.logger.warning("slot_exhausted", slot=slot, max_retries=self.max_retries)
        result.exhausted_slots.append(slot)
        return None


__all__ = ["DEFAULT_MAX_RETRIES", "DEFAULT_RETRY_DELAY", "IngestionEngine", "IngestionResult"]
