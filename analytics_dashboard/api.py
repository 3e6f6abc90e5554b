"""FastAPI wrapper exposing the dashboard tables as JSON.

The Flask analytics page is mounted under ``/admin``.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import Depends, FastAPI
from fastapi.middleware.wsgi import WSGIMiddleware

from . import __version__
from .config import DashboardSettings, get_settings
from .dashboard import load_dashboard
from .token_store import TokenStore, build_token_store

logging.basicConfig(level=get_settings().log_level.upper())
logger = logging.getLogger(__name__)

app = FastAPI(title="Site Analytics API", version=__version__)


def get_token_store(
    settings: DashboardSettings = Depends(get_settings),
) -> TokenStore:
    return build_token_store(settings)


@app.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/stats")
async def stats(
    settings: DashboardSettings = Depends(get_settings),
    token_store: TokenStore = Depends(get_token_store),
) -> dict[str, Any]:
    result = await load_dashboard(token_store, settings)
    return result.to_payload()


# Mount Flask Admin UI under /admin
try:
    from .flask_ui import create_app as _create_flask_app

    app.mount("/admin", WSGIMiddleware(_create_flask_app()))
except ValueError as exc:
    # Misconfigured token backend; the JSON API still starts
    logger.warning("Analytics UI not mounted: %s", exc)
