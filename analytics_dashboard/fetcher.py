"""Fetch the admin user collection from the backend API.

One authenticated GET per call. The bearer token is read from an injected
``TokenStore`` and the in-flight request can be abandoned through an explicit
``asyncio.Event``. Failures are raised to the caller; the dashboard layer
decides to log and degrade to empty charts.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from .config import DashboardSettings
from .token_store import TokenStore

logger = logging.getLogger(__name__)


class UsersFetchError(RuntimeError):
    """Raised when the users endpoint answers with an unusable response."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def build_headers(token: str) -> dict[str, str]:
    """Return the request headers for an authenticated JSON read."""
    return {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {token}",
    }


def _parse_users(response: httpx.Response) -> list[dict[str, Any]]:
    if not response.is_success:
        raise UsersFetchError(
            f"Network response was not ok: HTTP {response.status_code}",
            status_code=response.status_code,
        )
    try:
        payload = response.json()
    except ValueError as exc:
        raise UsersFetchError(
            "Response body is not valid JSON", status_code=response.status_code
        ) from exc
    if not isinstance(payload, list):
        raise UsersFetchError(
            f"Expected a JSON array of users, got {type(payload).__name__}",
            status_code=response.status_code,
        )
    # Non-object entries are kept so they still count under "Unknown"
    return [item if isinstance(item, dict) else {} for item in payload]


async def _get_with_cancel(
    request: asyncio.Future[httpx.Response],
    cancel: asyncio.Event,
) -> httpx.Response | None:
    waiter = asyncio.ensure_future(cancel.wait())
    try:
        done, _ = await asyncio.wait(
            {request, waiter}, return_when=asyncio.FIRST_COMPLETED
        )
    except BaseException:
        # asyncio.wait leaves its futures running when the caller is cancelled
        if not request.done():
            request.cancel()
            # Let the request unwind before the caller closes the client
            await asyncio.wait({request})
        raise
    finally:
        waiter.cancel()
    if request in done:
        return request.result()
    request.cancel()
    try:
        await request
    except asyncio.CancelledError:
        pass
    return None


async def fetch_users(
    token_store: TokenStore,
    settings: DashboardSettings,
    *,
    client: httpx.AsyncClient | None = None,
    cancel: asyncio.Event | None = None,
) -> list[dict[str, Any]] | None:
    """Read the full user collection.

    Args:
        token_store: Storage holding the bearer token under ``settings.token_key``.
        settings: Dashboard settings (endpoint URL, timeout).
        client: Optional shared ``httpx.AsyncClient``; left open when provided.
        cancel: Optional event; once set the request is abandoned.

    Returns:
        The decoded user records, or ``None`` when no token is stored or the
        request was cancelled.

    Raises:
        UsersFetchError: on a non-success status or a body that is not a JSON
            array.
        httpx.HTTPError: on transport failures.
    """

    token = token_store.get(settings.token_key)
    if not token:
        logger.info("No token found")
        return None
    if cancel is not None and cancel.is_set():
        logger.debug("Fetch cancelled before start")
        return None

    owns_client = client is None
    http = client or httpx.AsyncClient(timeout=settings.request_timeout)
    try:
        request = asyncio.ensure_future(
            http.get(settings.users_url, headers=build_headers(token))
        )
        if cancel is None:
            response = await request
        else:
            response = await _get_with_cancel(request, cancel)
            if response is None:
                logger.info("Fetch of %s cancelled", settings.users_url)
                return None
    finally:
        if owns_client:
            await http.aclose()

    users = _parse_users(response)
    logger.info("Fetched %d users", len(users))
    return users
