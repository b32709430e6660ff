"""One-way password hashing applied before credentials leave the client."""

from __future__ import annotations

import hashlib


def hash_password(value: str | None) -> str:
    """Return the SHA-256 hex digest of ``value``, or ``""`` for empty input."""
    if not value:
        return ""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()
