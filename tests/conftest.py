"""Shared fixtures for quote-keeper tests."""

from __future__ import annotations

import json
import random
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Iterable, Iterator

import httpx
import pytest

from quote_keeper.config import ConfigLocator
from quote_keeper.config.loader import ENV_FIELDS, HOME_ENV
from quote_keeper.engine.models import CandidateQuote
from quote_keeper.engine.providers import BaseProvider, ProviderResult, SeedCatalog

FIXED_NOW = datetime(2024, 5, 17, 8, 30, 15, 123000, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (*ENV_FIELDS, HOME_ENV):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    return lambda: FIXED_NOW


@pytest.fixture
def locator(tmp_path: Path) -> ConfigLocator:
    return ConfigLocator(project_root=tmp_path)


@pytest.fixture
def write_json() -> Callable[[Path, Any], Path]:
    def _writer(path: Path, payload: Any) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")
        return path

    return _writer


@pytest.fixture
def seed_entries() -> list[dict[str, Any]]:
    return [
        {"text_original": "Simplicity is prerequisite for reliability.", "author": "Edsger W. Dijkstra"},
        {"text_original": "Well done is better than well said.", "author": "Benjamin Franklin", "tags": ["action"]},
        {"text_original": "What we think, we become.", "author": "Buddha"},
        {"text_original": "Knowing is not enough; we must apply.", "author": "Goethe"},
    ]


@pytest.fixture
def seed_catalog(seed_entries: list[dict[str, Any]]) -> SeedCatalog:
    return SeedCatalog(entries=seed_entries)


@pytest.fixture
def quotable_client() -> Iterator[Callable[[Callable[[httpx.Request], httpx.Response]], httpx.Client]]:
    """Build an ``httpx.Client`` whose requests are answered by ``handler``."""

    clients: list[httpx.Client] = []

    def _builder(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.Client:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield _builder
    for client in clients:
        client.close()


class CyclingProvider(BaseProvider):
    """Yield texts in order, wrapping around; records every call."""

    name = "cycling"

    def __init__(self, texts: Iterable[str]) -> None:
        self.texts = list(texts)
        self.calls: list[tuple[int, int]] = []
        self._position = 0

    def get_candidate(self, slot: int, attempt: int) -> ProviderResult:
        self.calls.append((slot, attempt))
        if not self.texts:
            return ProviderResult.absent(self.name, "empty_catalog")
        text = self.texts[self._position % len(self.texts)]
        self._position += 1
        return ProviderResult(provider=self.name, candidate=CandidateQuote(text_original=text))


@pytest.fixture
def cycling_provider() -> Callable[[Iterable[str]], CyclingProvider]:
    return CyclingProvider


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)
