"""Exception hierarchy surfaced to the CLI boundary."""

from __future__ import annotations


class QuoteKeeperError(Exception):
    """Base class for failures that end a run."""


class ConfigError(QuoteKeeperError, ValueError):
    pass


class StorageWriteError(QuoteKeeperError):
    """Writing or renaming a collection file failed; the destination is untouched."""

    def __init__(self, path, message: str) -> None:
        super().__init__(f"{message}: {path}")
        self.path = path


class MirrorWriteError(StorageWriteError):
    """Primary store was written but the published copy could not be."""


__all__ = ["ConfigError", "MirrorWriteError", "QuoteKeeperError", "StorageWriteError"]
