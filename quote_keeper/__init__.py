"""quote-keeper: deduplicated quote collection maintenance."""

__version__ = "0.1.0"
