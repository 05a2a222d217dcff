"""Deduplication pass keyed on normalized content fingerprints."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

import structlog

from .hashing import fingerprint, hash_field


@dataclass
class DeduplicationResult:
    before: int
    records: list[dict[str, Any]] = field(default_factory=list)
    duplicates: int = 0

    @property
    def after(self) -> int:
        return len(self.records)

    @property
    def changed(self) -> bool:
        return self.duplicates > 0


def deduplicate(
    records: Sequence[dict[str, Any]], logger: structlog.BoundLogger | None = None
) -> DeduplicationResult:
    """Keep the first record per fingerprint, rewriting ``hash`` on every survivor.

    Input records are not mutated; survivors are shallow copies in original order.
    """

    log = logger or structlog.get_logger("quote_keeper.dedup")
    seen: dict[str, dict[str, Any]] = {}
    result = DeduplicationResult(before=len(records))
    for record in records:
        text = record.get("text_original")
        digest = fingerprint(text if isinstance(text, str) else None)
        if digest in seen:
            result.duplicates += 1
            preview = text[:50] if isinstance(text, str) else ""
            log.info("duplicate_found", preview=preview, hash=digest[:8], kept_id=seen[digest].get("id"))
            continue
        seen[digest] = record
        result.records.append({**record, "hash": hash_field(digest)})
    return result


__all__ = ["DeduplicationResult", "deduplicate"]
