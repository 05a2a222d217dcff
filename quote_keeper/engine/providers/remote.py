"""Remote quote source backed by the Quotable HTTP API."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from ..models import CandidateQuote
from .base import BaseProvider, ProviderResult

DEFAULT_RANDOM_URL = "https://api.quotable.io/quotes/random?limit=1"
DEFAULT_LEGACY_URL = "https://api.quotable.io/random"
QUOTE_URL_TEMPLATE = "https://api.quotable.io/quotes/{quote_id}"


class _Absent(Exception):
    """Internal signal carrying the reason a lookup produced nothing."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


def candidate_from_payload(item: Any) -> CandidateQuote | None:
    """Map one Quotable object (``content``/``author``/``tags``/``_id``) to a candidate."""

    if not isinstance(item, dict):
        return None
    content = item.get("content")
    if not isinstance(content, str) or not content.strip():
        return None
    author = item.get("author")
    tags = item.get("tags")
    quote_id = item.get("_id")
    return CandidateQuote(
        text_original=content,
        author=author if isinstance(author, str) and author else None,
        source_name="Quotable",
        source_url=QUOTE_URL_TEMPLATE.format(quote_id=quote_id if quote_id is not None else ""),
        language="en",
        tags=[str(tag) for tag in tags] if isinstance(tags, list) else [],
    )


class RemoteProvider(BaseProvider):
    """Look a random quote up, tolerating both the array and legacy object shapes."""

    name = "remote"

    def __init__(
        self,
        client: httpx.Client | None = None,
        random_url: str = DEFAULT_RANDOM_URL,
        legacy_url: str = DEFAULT_LEGACY_URL,
        timeout: float = 10.0,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.Client(
            follow_redirects=True,
            timeout=timeout,
        )
        self.random_url = random_url
        self.legacy_url = legacy_url
        self.logger = logger or structlog.get_logger("quote_keeper.providers.remote")

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def get_candidate(self, slot: int, attempt: int) -> ProviderResult:
        try:
            candidate = self._from_random_endpoint()
            if candidate is None:
                candidate = self._from_legacy_endpoint()
        except _Absent as exc:
            self.logger.warning("remote_fetch_failed", slot=slot, attempt=attempt, reason=exc.reason)
            return ProviderResult.absent(self.name, exc.reason)
        except httpx.HTTPError as exc:
            self.logger.warning("remote_fetch_failed", slot=slot, attempt=attempt, reason="http_error", error=str(exc))
            return ProviderResult.absent(self.name, "http_error")
        return ProviderResult(provider=self.name, candidate=candidate)

    # ------------------------------------------------------------------
    def _get_json(self, url: str) -> Any:
        response = self._client.get(url, headers={"Accept": "application/json"})
        if not response.is_success:
            raise _Absent(f"bad_status:{response.status_code}")
        try:
            return response.json()
        except ValueError as exc:
            raise _Absent("malformed") from exc

    def _from_random_endpoint(self) -> CandidateQuote | None:
        try:
            payload = self._get_json(self.random_url)
        except _Absent as exc:
            self.logger.debug("remote_primary_unavailable", url=self.random_url, reason=exc.reason)
            return None
        item = payload[0] if isinstance(payload, list) and payload else None
        return candidate_from_payload(item)

    def _from_legacy_endpoint(self) -> CandidateQuote:
        candidate = candidate_from_payload(self._get_json(self.legacy_url))
        if candidate is None:
            raise _Absent("malformed")
        return candidate


__all__ = ["DEFAULT_LEGACY_URL", "DEFAULT_RANDOM_URL", "RemoteProvider", "candidate_from_payload"]
