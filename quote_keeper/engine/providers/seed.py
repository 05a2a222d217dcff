"""Bundled seed quotes used when the remote source is unavailable or disabled."""

from __future__ import annotations

import json
import random
from pathlib import Path
from threading import Lock
from typing import Any, Iterable, List, Optional

import structlog

from ..models import CandidateQuote
from .base import BaseProvider, ProviderResult

SEED_SOURCE_NAME = "Seed"


class SeedCatalog:
    """Seed entries loaded lazily from a JSON array and cached for the catalog's lifetime."""

    def __init__(
        self,
        entries: Iterable[Any] | None = None,
        file_path: Path | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self._lock = Lock()
        self._file_path = file_path
        self._entries: Optional[List[dict]] = None
        self.logger = logger or structlog.get_logger("quote_keeper.providers.seed")
        if entries is not None:
            self._entries = self._filter(entries)

    @staticmethod
    def _filter(items: Iterable[Any]) -> List[dict]:
        return [item for item in items if isinstance(item, dict) and isinstance(item.get("text_original"), str)]

    def _load(self) -> List[dict]:
        if self._file_path is None:
            return []
        try:
            payload = json.loads(self._file_path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            self.logger.info("seed_file_missing", path=str(self._file_path))
            return []
        except (OSError, ValueError) as exc:
            self.logger.warning("seed_file_unreadable", path=str(self._file_path), error=str(exc))
            return []
        if not isinstance(payload, list):
            self.logger.warning("seed_file_invalid", path=str(self._file_path))
            return []
        return self._filter(payload)

    @property
    def entries(self) -> List[dict]:
        with self._lock:
            if self._entries is None:
                self._entries = self._load()
                self.logger.debug("seed_catalog_loaded", count=len(self._entries))
            return self._entries

    def __len__(self) -> int:
        return len(self.entries)

    def select(self, index: int) -> ProviderResult:
        """Pick the entry at ``index`` modulo the catalog size."""

        entries = self.entries
        if not entries:
            return ProviderResult.absent(SeedProvider.name, "empty_catalog")
        raw = entries[index % len(entries)]
        candidate = CandidateQuote.from_raw(raw, default_source=SEED_SOURCE_NAME)
        if candidate is None:
            return ProviderResult.absent(SeedProvider.name, "invalid_seed")
        return ProviderResult(provider=SeedProvider.name, candidate=candidate)


class SeedProvider(BaseProvider):
    """Deterministic seed pick: ``slot + attempt`` walks the catalog."""

    name = "seed"

    def __init__(self, catalog: SeedCatalog) -> None:
        self.catalog = catalog

    def get_candidate(self, slot: int, attempt: int) -> ProviderResult:
        return self.catalog.select(slot + attempt)


class RandomSeedProvider(BaseProvider):
    """Last-resort pick of a pseudo-random seed."""

    name = "random_seed"

    def __init__(self, catalog: SeedCatalog, rng: random.Random | None = None) -> None:
        self.catalog = catalog
        self._rng = rng or random.Random()

    def get_candidate(self, slot: int, attempt: int) -> ProviderResult:
        size = len(self.catalog)
        if size == 0:
            return ProviderResult.absent(self.name, "empty_catalog")
        result = self.catalog.select(self._rng.randrange(size))
        result.provider = self.name
        return result


__all__ = ["RandomSeedProvider", "SEED_SOURCE_NAME", "SeedCatalog", "SeedProvider"]
