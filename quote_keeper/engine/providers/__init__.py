"""Quote sources tried in priority order by the ingestion engine."""

from .base import BaseProvider, ProviderChain, ProviderResult
from .factory import build_chain
from .remote import RemoteProvider
from .seed import RandomSeedProvider, SeedCatalog, SeedProvider

__all__ = [
    "BaseProvider",
    "ProviderChain",
    "ProviderResult",
    "RandomSeedProvider",
    "RemoteProvider",
    "SeedCatalog",
    "SeedProvider",
    "build_chain",
]
