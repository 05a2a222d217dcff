"""Quote record shapes shared by providers, ingestion and deduplication."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping

from .hashing import hash_field


def _optional_str(value: Any) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


def _tag_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(tag) for tag in value]


@dataclass(slots=True)
class CandidateQuote:
    """Unvalidated quote draft produced by a provider."""

    text_original: str
    author: str | None = None
    source_name: str | None = None
    source_url: str | None = None
    language: str = "en"
    tags: list[str] = field(default_factory=list)

    @classmethod
    def from_raw(cls, raw: Any, default_source: str | None = None) -> "CandidateQuote | None":
        """Shape-check a raw JSON object; ``None`` when it has no usable text."""

        if not isinstance(raw, Mapping):
            return None
        text = raw.get("text_original")
        if not isinstance(text, str) or not text.strip():
            return None
        return cls(
            text_original=text,
            author=_optional_str(raw.get("author")),
            source_name=_optional_str(raw.get("source_name")) or default_source,
            source_url=_optional_str(raw.get("source_url")),
            language=_optional_str(raw.get("language")) or "en",
            tags=_tag_list(raw.get("tags")),
        )


@dataclass(slots=True)
class QuoteRecord:
    """Persisted quote entry; field order here is the on-disk order."""

    id: str
    text_original: str
    author: str | None
    source_name: str | None
    source_url: str | None
    language: str
    tags: list[str]
    fetched_at: str
    hash: str

    @classmethod
    def from_candidate(
        cls, candidate: CandidateQuote, digest: str, now: datetime | None = None
    ) -> "QuoteRecord":
        moment = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
        return cls(
            id=f"{moment.date().isoformat()}_{digest[:10]}",
            text_original=candidate.text_original,
            author=candidate.author,
            source_name=candidate.source_name,
            source_url=candidate.source_url,
            language=candidate.language or "en",
            tags=list(candidate.tags),
            fetched_at=format_timestamp(moment),
            hash=hash_field(digest),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC with millisecond precision and a ``Z`` suffix."""

    utc = moment.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


__all__ = ["CandidateQuote", "QuoteRecord", "format_timestamp"]
