"""Run coordinator wiring storage, providers, ingestion and deduplication."""

from __future__ import annotations

import random
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable

import httpx
import structlog

from .config import ConfigLocator, KeeperSettings
from .engine import IngestionEngine, deduplicate
from .engine.providers import RemoteProvider, SeedCatalog, build_chain
from .infra import QuoteStore, ReadStatus


@dataclass
class FetchSummary:
    requested: int
    before: int
    appended: int
    total: int
    exhausted_slots: list[int] = field(default_factory=list)
    empty_slots: list[int] = field(default_factory=list)
    read_status: ReadStatus = ReadStatus.LOADED
    dry_run: bool = False
    written: bool = False


@dataclass
class DedupSummary:
    before: int
    after: int
    duplicates: int
    read_status: ReadStatus = ReadStatus.LOADED
    dry_run: bool = False
    written: bool = False


class Orchestrator:
    """Central coordinator for the two batch entry points."""

    def __init__(
        self,
        settings: KeeperSettings,
        locator: ConfigLocator,
        store: QuoteStore | None = None,
        catalog: SeedCatalog | None = None,
        client: httpx.Client | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] | None = None,
        sleep: Callable[[float], None] = time.sleep,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.settings = settings
        self.locator = locator
        self.logger = logger or structlog.get_logger("quote_keeper.orchestrator")
        self.store = store or QuoteStore(
            locator.collection_path(), locator.mirror_path(), logger=self.logger.bind(component="storage")
        )
        self.catalog = catalog or SeedCatalog(file_path=locator.seeds_path())
        self._client = client
        self._rng = rng
        self._clock = clock
        self._sleep = sleep

    # ------------------------------------------------------------------
    def run_fetch(self) -> FetchSummary:
        settings = self.settings
        loaded = self.store.load()
        records = list(loaded.records)
        known = self.store.known_fingerprints(records)
        self.logger.info(
            "fetch_started",
            requested=settings.max_quotes_per_run,
            existing=len(records),
            offline=settings.offline_mode,
            dry_run=settings.dry_run,
        )

        remote = None
        if not settings.offline_mode:
            remote = RemoteProvider(
                client=self._client,
                random_url=settings.remote_url,
                legacy_url=settings.legacy_remote_url,
                timeout=settings.http_timeout,
            )
        chain = build_chain(self.catalog, offline=settings.offline_mode, remote=remote, rng=self._rng)
        engine = IngestionEngine(
            chain,
            max_retries=settings.max_retries,
            retry_delay=settings.retry_delay,
            offline=settings.offline_mode,
            clock=self._clock,
            sleep=self._sleep,
        )
        try:
            result = engine.ingest(settings.max_quotes_per_run, known)
        finally:
            chain.close()

        records.extend(record.to_dict() for record in result.records)
        summary = FetchSummary(
            requested=result.requested,
            before=len(loaded.records),
            appended=result.appended,
            total=len(records),
            exhausted_slots=list(result.exhausted_slots),
            empty_slots=list(result.empty_slots),
            read_status=loaded.status,
            dry_run=settings.dry_run,
        )
        if not result.appended:
            self.logger.info("fetch_nothing_appended", requested=result.requested)
            return summary
        if settings.dry_run:
            self.logger.info("fetch_dry_run", would_append=result.appended, would_total=len(records))
            return summary
        self.store.save(records)
        summary.written = True
        self.logger.info("fetch_completed", appended=result.appended, total=len(records))
        return summary

    def run_dedup(self) -> DedupSummary:
        loaded = self.store.load()
        self.logger.info("dedup_started", total=len(loaded.records))
        result = deduplicate(loaded.records, logger=self.logger.bind(component="dedup"))
        summary = DedupSummary(
            before=result.before,
            after=result.after,
            duplicates=result.duplicates,
            read_status=loaded.status,
            dry_run=self.settings.dry_run,
        )
        if not result.changed:
            self.logger.info("dedup_clean", total=result.before)
            return summary
        if self.settings.dry_run:
            self.logger.info("dedup_dry_run", would_remove=result.duplicates, would_total=result.after)
            return summary
        self.store.save(result.records)
        summary.written = True
        self.logger.info("dedup_completed", before=result.before, after=result.after, removed=result.duplicates)
        return summary


__all__ = ["DedupSummary", "FetchSummary", "Orchestrator"]
