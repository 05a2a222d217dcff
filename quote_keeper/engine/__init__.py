"""Engine components: hashing, providers, ingestion and deduplication."""

from .dedup import DeduplicationResult, deduplicate
from .hashing import fingerprint, normalize
from .ingest import IngestionEngine, IngestionResult
from .models import CandidateQuote, QuoteRecord

__all__ = [
    "CandidateQuote",
    "DeduplicationResult",
    "IngestionEngine",
    "IngestionResult",
    "QuoteRecord",
    "deduplicate",
    "fingerprint",
    "normalize",
]
