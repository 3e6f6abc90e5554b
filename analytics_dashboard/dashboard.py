"""Dashboard lifecycle: fetch once on mount, aggregate, hold the result.

The dashboard has two states only. It starts with ``AggregateResult.empty()``
and moves to the loaded tables after a successful fetch. A failed or skipped
fetch leaves it empty; there is no transition back and no re-fetch.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

import httpx

from .analytics import aggregate_users
from .config import DashboardSettings
from .fetcher import UsersFetchError, fetch_users
from .models import AggregateResult
from .token_store import TokenStore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Dashboard:
    """Holds the aggregate result for the lifetime of one view."""

    token_store: TokenStore
    settings: DashboardSettings
    client: httpx.AsyncClient | None = None
    data: AggregateResult = field(default_factory=AggregateResult.empty)
    cancel: asyncio.Event = field(default_factory=asyncio.Event)
    _mounted: bool = field(default=False, init=False, repr=False)

    @property
    def loaded(self) -> bool:
        return not self.data.is_empty

    async def mount(self) -> AggregateResult:
        """Run the single fetch for this view and store the aggregate.

        Subsequent calls return the stored result without fetching again.
        """

        if self._mounted:
            return self.data
        self._mounted = True
        try:
            users = await fetch_users(
                self.token_store,
                self.settings,
                client=self.client,
                cancel=self.cancel,
            )
        except (UsersFetchError, httpx.HTTPError) as exc:
            logger.error("Failed to fetch data: %s", exc)
            return self.data
        # Teardown may race the response; a set signal discards the result
        if users is None or self.cancel.is_set():
            return self.data
        self.data = aggregate_users(users)
        return self.data

    def teardown(self) -> None:
        """Signal any in-flight fetch to stop and discard its result."""
        self.cancel.set()


async def load_dashboard(
    token_store: TokenStore,
    settings: DashboardSettings,
    *,
    client: httpx.AsyncClient | None = None,
) -> AggregateResult:
    """Mount a fresh dashboard and return its tables."""
    dashboard = Dashboard(token_store=token_store, settings=settings, client=client)
    return await dashboard.mount()
