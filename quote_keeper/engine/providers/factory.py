"""Assemble the provider chain for a run."""

from __future__ import annotations

import random

import structlog

from .base import BaseProvider, ProviderChain
from .remote import RemoteProvider
from .seed import RandomSeedProvider, SeedCatalog, SeedProvider


def build_chain(
    catalog: SeedCatalog,
    offline: bool = False,
    remote: RemoteProvider | None = None,
    rng: random.Random | None = None,
    logger: structlog.BoundLogger | None = None,
) -> ProviderChain:
    """Remote first unless offline, then the seed walk, then a random seed."""

    providers: list[BaseProvider] = []
    if not offline:
        providers.append(remote or RemoteProvider(logger=logger))
    providers.append(SeedProvider(catalog))
    providers.append(RandomSeedProvider(catalog, rng=rng))
    return ProviderChain(providers, logger=logger)


__all__ = ["build_chain"]
