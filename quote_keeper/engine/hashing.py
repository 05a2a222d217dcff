"""Text canonicalisation and content fingerprints."""

from __future__ import annotations

import hashlib
import re

HASH_PREFIX = "sha256:"

# ECMAScript whitespace and line terminators, so fingerprints match the
# hashes already stored by the JavaScript tooling.
_WHITESPACE_RUN = re.compile(
    "[\t\n\v\f\r \u00a0\u1680\u2000-\u200a\u2028\u2029\u202f\u205f\u3000\ufeff]+"
)


def normalize(text: str | None) -> str:
    """Collapse whitespace runs to one space, strip and lowercase."""

    if not text:
        return ""
    return _WHITESPACE_RUN.sub(" ", text).strip(" ").lower()


def _utf8(text: str) -> bytes:
    # Lone surrogates (valid in JSON escapes) hash as U+FFFD.
    return text.encode("utf-16", "surrogatepass").decode("utf-16", "replace").encode("utf-8")


def fingerprint(text: str | None) -> str:
    return hashlib.sha256(_utf8(normalize(text))).hexdigest()


def hash_field(digest: str) -> str:
    return f"{HASH_PREFIX}{digest}"


def strip_hash_prefix(value: str) -> str:
    if value.startswith(HASH_PREFIX):
        return value[len(HASH_PREFIX):]
    return value


__all__ = ["HASH_PREFIX", "fingerprint", "hash_field", "normalize", "strip_hash_prefix"]
