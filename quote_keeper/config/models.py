"""Pydantic models for run configuration."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

TRUTHY_VALUES = frozenset({"1", "true", "yes", "on"})


def truthy(value: Any) -> bool:
    """Only ``1``/``true``/``yes``/``on`` (any case) count as true."""

    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).lower() in TRUTHY_VALUES


class KeeperSettings(BaseModel):
    """Resolved values handed to the fetch and dedup runs."""

    max_quotes_per_run: int = Field(default=1, description="Slots to fill per fetch run.")
    offline_mode: bool = False
    dry_run: bool = False
    max_retries: int = 10
    retry_delay: float = 0.2
    http_timeout: float = 10.0
    remote_url: str = "https://api.quotable.io/quotes/random?limit=1"
    legacy_remote_url: str = "https://api.quotable.io/random"

    @field_validator("offline_mode", "dry_run", mode="before")
    @classmethod
    def _coerce_flag(cls, value: Any) -> bool:
        return truthy(value)

    @field_validator("max_quotes_per_run", mode="before")
    @classmethod
    def _coerce_count(cls, value: Any) -> int:
        if value in (None, ""):
            return 1
        try:
            count = int(str(value).strip())
        except ValueError as exc:
            raise ValueError(f"max_quotes_per_run must be an integer, got {value!r}") from exc
        if count < 1:
            raise ValueError("max_quotes_per_run must be >= 1")
        return count

    @field_validator("max_retries")
    @classmethod
    def _positive_retries(cls, value: int) -> int:
        if value < 1:
            raise ValueError("max_retries must be >= 1")
        return value

    @field_validator("retry_delay", "http_timeout")
    @classmethod
    def _non_negative(cls, value: float) -> float:
        if value < 0:
            raise ValueError("delays and timeouts must be non-negative")
        return value


__all__ = ["KeeperSettings", "TRUTHY_VALUES", "truthy"]
