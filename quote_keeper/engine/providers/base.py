"""Provider contract and the ordered fallback chain."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

import structlog

from ..models import CandidateQuote


@dataclass(slots=True)
class ProviderResult:
    """A candidate, or the reason a provider had none."""

    provider: str
    candidate: CandidateQuote | None = None
    reason: str | None = None

    @property
    def found(self) -> bool:
        return self.candidate is not None

    @classmethod
    def absent(cls, provider: str, reason: str) -> "ProviderResult":
        return cls(provider=provider, reason=reason)


class BaseProvider(ABC):
    """Uniform source contract; implementations never raise."""

    name: str = "provider"

    @abstractmethod
    def get_candidate(self, slot: int, attempt: int) -> ProviderResult:
        """Return one candidate for ``slot`` on its ``attempt``-th try."""

    def close(self) -> None:
        return


class ProviderChain:
    """Try providers in priority order until one yields a candidate."""

    def __init__(
        self,
        providers: Optional[List[BaseProvider]] = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.providers = providers or []
        self.logger = logger or structlog.get_logger("quote_keeper.providers")

    @property
    def names(self) -> list[str]:
        return [provider.name for provider in self.providers]

    def get_candidate(self, slot: int, attempt: int) -> ProviderResult:
        misses: list[str] = []
        for provider in self.providers:
            result = provider.get_candidate(slot, attempt)
            if result.found:
                return result
            self.logger.debug(
                "provider_miss", provider=provider.name, slot=slot, attempt=attempt, reason=result.reason
            )
            misses.append(f"{provider.name}:{result.reason}")
        return ProviderResult.absent("chain", ",".join(misses) or "no_providers")

    def close(self) -> None:
        for provider in self.providers:
            provider.close()


__all__ = ["BaseProvider", "ProviderChain", "ProviderResult"]
