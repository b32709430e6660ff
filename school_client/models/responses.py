"""Normalization of successful backend payloads.

The backend wraps most replies in ``{ success?, data?, message? }``; list
endpoints may return a bare JSON array instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class UnwrappedResponse:
    """Stable view of a successful payload.

    ``raw`` keeps the original payload for fields outside the envelope.
    """

    data: Any
    message: Any
    success: Any
    raw: Any


def with_message(payload: Any) -> UnwrappedResponse:
    """Unwrap ``payload`` into ``data``/``message``/``success``/``raw``.

    Without an explicit ``success`` field, JSON objects and bare arrays count
    as successful; any other payload does not.
    """
    envelope = payload if isinstance(payload, dict) else {}

    data = envelope.get("data")
    message = envelope.get("message")
    success = envelope.get("success")
    if success is None:
        success = isinstance(payload, (dict, list))

    return UnwrappedResponse(
        data=data,
        message="" if message is None else message,
        success=success,
        raw=payload,
    )


def extract_list(payload: Any) -> list:
    """Return the record list carried by ``payload``, or ``[]``."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get("data"), list):
        return payload["data"]
    return []
