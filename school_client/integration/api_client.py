"""HTTP access layer for the school management REST backend.

Builds request URLs, serializes JSON bodies, and normalizes every failure
(transport error, non-2xx status, undecodable body, explicit
``success: false`` envelope) into ``ApiRequestError``.

Each call opens its own ``httpx.AsyncClient``; no connection or response state
is shared between calls, so concurrent calls never interfere. No retries are
performed here.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import Mapping
from typing import Any

import httpx

from school_client.errors import ApiRequestError

logger = logging.getLogger(__name__)

DEFAULT_HEADERS: dict[str, str] = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}

FALLBACK_ERROR_MESSAGE = "Something went wrong"


class _Omitted:
    """Marker for "no body" (distinct from a JSON ``null`` body)."""

    def __repr__(self) -> str:
        return "OMITTED"


OMITTED: Any = _Omitted()


def build_url(base_url: str, path: str, query: Mapping[str, Any] | None = None) -> str:
    """Join ``path`` onto ``base_url`` and append the filtered query string.

    ``None`` and ``""`` values are dropped; ``0`` and ``False`` are kept.
    List and tuple values become repeated parameters in order.
    """
    url = path if path.startswith("http") else f"{base_url}{path}"
    if not isinstance(query, Mapping):
        return url

    params: list[tuple[str, Any]] = []
    for key, value in query.items():
        if value is None or value == "":
            continue
        if isinstance(value, (list, tuple)):
            params.extend((key, item) for item in value)
        else:
            params.append((key, value))

    query_string = str(httpx.QueryParams(params))
    return f"{url}?{query_string}" if query_string else url


def _parse_payload(response: httpx.Response) -> Any:
    """Decode a response body into a payload.

    Non-JSON bodies become ``{"message": text}`` (or ``{}`` when empty).
    Undecodable JSON raises ``ApiRequestError``.
    """
    content_type = response.headers.get("content-type", "")

    if "application/json" not in content_type:
        text = response.text
        return {"message": text} if text else {}

    try:
        return response.json()
    except ValueError as exc:
        raise ApiRequestError(
            "Unable to parse server response",
            status=response.status_code,
            details={"cause": exc},
        ) from exc


def _is_failure(response: httpx.Response, payload: Any) -> bool:
    """Non-2xx status OR an explicit ``success: false`` marks a failed call."""
    if not response.is_success:
        return True
    return isinstance(payload, dict) and payload.get("success", True) is False


def _error_message(response: httpx.Response, payload: Any) -> str:
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return response.reason_phrase or FALLBACK_ERROR_MESSAGE


class ApiClient:
    """Async JSON client for the school backend.

    Parameters
    ----------
    base_url:
        Backend origin prepended to relative paths (e.g. "https://school.example.com").
    timeout_seconds:
        HTTP timeout per call (default 30).
    default_headers:
        Replaces the JSON ``Content-Type``/``Accept`` defaults when given.
    transport:
        Optional httpx transport (mock or ASGI) used instead of the network.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = 30.0,
        default_headers: Mapping[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds
        self._default_headers = dict(
            DEFAULT_HEADERS if default_headers is None else default_headers
        )
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._base_url

    def build_url(self, path: str, query: Mapping[str, Any] | None = None) -> str:
        return build_url(self._base_url, path, query)

    async def request(
        self,
        path: str,
        *,
        method: str = "GET",
        body: Any = OMITTED,
        headers: Mapping[str, str] | None = None,
        query: Mapping[str, Any] | None = None,
        signal: asyncio.Event | None = None,
    ) -> Any:
        """Issue one request and return the parsed payload.

        Raises
        ------
        ApiRequestError
            On any transport, status, decode, or envelope failure.
        asyncio.CancelledError
            If ``signal`` is set before or while the request is in flight.
        """
        url = self.build_url(path, query)
        merged_headers = httpx.Headers(self._default_headers)
        merged_headers.update(headers or {})

        content: str | None = None
        if body is not OMITTED:
            content = body if isinstance(body, str) else json.dumps(body)

        if signal is None:
            return await self._send(method, url, merged_headers, content)

        if signal.is_set():
            raise asyncio.CancelledError(f"{method} {url} aborted before sending")

        request_task = asyncio.ensure_future(
            self._send(method, url, merged_headers, content)
        )
        abort_task = asyncio.ensure_future(signal.wait())
        try:
            done, _ = await asyncio.wait(
                {request_task, abort_task}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            abort_task.cancel()
            if not request_task.done():
                request_task.cancel()

        if request_task in done:
            return request_task.result()

        logger.info("Request aborted: %s %s", method, url)
        raise asyncio.CancelledError(f"{method} {url} aborted")

    async def _send(
        self,
        method: str,
        url: str,
        headers: httpx.Headers,
        content: str | None,
    ) -> Any:
        started = time.monotonic()
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.request(
                    method,
                    url,
                    content=content,
                    headers=headers,
                    timeout=self._timeout_seconds,
                )
        except httpx.RequestError as exc:
            # Transport failures plus body decoding and redirect errors
            label = (
                "Network error" if isinstance(exc, httpx.TransportError) else "Request error"
            )
            logger.warning(
                "Request did not complete: %s %s (%s)",
                method,
                url,
                exc.__class__.__name__,
                extra={"method": method, "url": url},
            )
            raise ApiRequestError(
                f"{label}: {str(exc) or exc.__class__.__name__}",
                status=None,
                details={"cause": exc},
            ) from exc

        duration_ms = round((time.monotonic() - started) * 1000, 1)
        log_fields = {
            "method": method,
            "url": url,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        }

        payload = _parse_payload(response)

        if _is_failure(response, payload):
            message = _error_message(response, payload)
            logger.warning(
                "Request failed: %s %s -> %d: %s",
                method,
                url,
                response.status_code,
                message,
                extra=log_fields,
            )
            raise ApiRequestError(message, status=response.status_code, details=payload)

        logger.debug(
            "Request completed: %s %s -> %d",
            method,
            url,
            response.status_code,
            extra=log_fields,
        )
        return payload

    async def get(self, path: str, **options: Any) -> Any:
        return await self.request(path, **{**options, "method": "GET"})

    async def post(self, path: str, **options: Any) -> Any:
        return await self.request(path, **{**options, "method": "POST"})

    async def put(self, path: str, **options: Any) -> Any:
        return await self.request(path, **{**options, "method": "PUT"})

    async def patch(self, path: str, **options: Any) -> Any:
        return await self.request(path, **{**options, "method": "PATCH"})

    async def delete(self, path: str, **options: Any) -> Any:
        return await self.request(path, **{**options, "method": "DELETE"})
