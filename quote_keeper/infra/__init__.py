"""Infra layer utilities (collection storage)."""

from .storage import CollectionRead, QuoteStore, ReadStatus, read_collection, write_collection

__all__ = ["CollectionRead", "QuoteStore", "ReadStatus", "read_collection", "write_collection"]
