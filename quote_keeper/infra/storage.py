"""JSON collection storage with crash-safe replace semantics."""

from __future__ import annotations

import json
import os
import secrets
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Iterator, Sequence

import structlog

from ..engine.hashing import fingerprint, strip_hash_prefix
from ..errors import MirrorWriteError, StorageWriteError


class ReadStatus(str, Enum):
    LOADED = "loaded"
    MISSING = "missing"
    UNREADABLE = "unreadable"
    INVALID = "invalid"


@dataclass(slots=True)
class CollectionRead:
    """Outcome of reading a collection file."""

    status: ReadStatus
    records: list[dict[str, Any]] = field(default_factory=list)
    dropped: int = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is ReadStatus.LOADED


def serialize(records: Sequence[dict[str, Any]]) -> str:
    return json.dumps(list(records), ensure_ascii=False, indent=2) + "\n"


def read_collection(path: Path) -> CollectionRead:
    """Parse the JSON array at ``path``; malformed storage reads as empty."""

    try:
        raw = path.read_bytes()
    except FileNotFoundError:
        return CollectionRead(ReadStatus.MISSING)
    except OSError as exc:
        return CollectionRead(ReadStatus.UNREADABLE, error=str(exc))
    # Stray invalid bytes must not cost the whole collection.
    text = raw.decode("utf-8", errors="replace")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        return CollectionRead(ReadStatus.UNREADABLE, error=str(exc))
    if not isinstance(payload, list):
        return CollectionRead(ReadStatus.INVALID, error=f"expected array, got {type(payload).__name__}")
    records = [item for item in payload if isinstance(item, dict)]
    return CollectionRead(ReadStatus.LOADED, records, dropped=len(payload) - len(records))


def _temp_name() -> str:
    return f".tmp_{int(time.time() * 1000)}_{secrets.token_hex(6)}"


@contextmanager
def _staged_file(dest: Path) -> Iterator[Path]:
    """Yield a temp path beside ``dest``; it is removed unless it got renamed."""

    tmp = dest.parent / _temp_name()
    try:
        yield tmp
    finally:
        if tmp.exists():
            tmp.unlink()


def atomic_write(dest: Path, content: str) -> None:
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        with _staged_file(dest) as tmp:
            # Lone surrogates can only sit inside JSON strings; write them back as escapes.
            with tmp.open("w", encoding="utf-8", errors="backslashreplace", newline="\n") as stream:
                stream.write(content)
                stream.flush()
                os.fsync(stream.fileno())
            os.replace(tmp, dest)
    except (OSError, UnicodeError) as exc:
        raise StorageWriteError(dest, f"atomic write failed ({exc})") from exc


def write_collection(path: Path, records: Sequence[dict[str, Any]]) -> None:
    atomic_write(path, serialize(records))


def mirror(records: Sequence[dict[str, Any]], secondary_path: Path) -> None:
    try:
        atomic_write(secondary_path, serialize(records))
    except StorageWriteError as exc:
        raise MirrorWriteError(secondary_path, "mirror write failed") from exc


class QuoteStore:
    """Primary collection file plus its published mirror."""

    def __init__(
        self,
        path: Path,
        mirror_path: Path | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.path = path
        self.mirror_path = mirror_path
        self.logger = logger or structlog.get_logger("quote_keeper.storage")

    def load(self) -> CollectionRead:
        result = read_collection(self.path)
        if result.status is ReadStatus.MISSING:
            self.logger.info("collection_missing", path=str(self.path))
        elif not result.ok:
            self.logger.warning(
                "collection_unusable",
                path=str(self.path),
                status=result.status.value,
                error=result.error,
            )
        if result.dropped:
            self.logger.warning("collection_items_dropped", path=str(self.path), dropped=result.dropped)
        return result

    def save(self, records: Sequence[dict[str, Any]]) -> None:
        write_collection(self.path, records)
        self.logger.info("collection_written", path=str(self.path), total=len(records))
        if self.mirror_path is not None:
            mirror(records, self.mirror_path)
            self.logger.info("collection_mirrored", path=str(self.mirror_path), total=len(records))

    @staticmethod
    def known_fingerprints(records: Sequence[dict[str, Any]]) -> set[str]:
        """Fingerprints recomputed from text plus any stored ``hash`` values."""

        known: set[str] = set()
        for record in records:
            text = record.get("text_original")
            if isinstance(text, str):
                known.add(fingerprint(text))
            stored = record.get("hash")
            if isinstance(stored, str) and stored:
                known.add(strip_hash_prefix(stored))
        return known


__all__ = [
    "CollectionRead",
    "QuoteStore",
    "ReadStatus",
    "atomic_write",
    "mirror",
    "read_collection",
    "serialize",
    "write_collection",
]
