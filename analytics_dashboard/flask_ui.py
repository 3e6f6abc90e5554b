from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

import httpx
from flask import Flask, jsonify, render_template
from plotly.offline import get_plotlyjs_version

from .charts import build_panels
from .config import DashboardSettings, get_settings
from .dashboard import Dashboard
from .models import AggregateResult
from .token_store import TokenStore, build_token_store

ClientFactory = Callable[[DashboardSettings], httpx.AsyncClient]


def create_app(
    settings: DashboardSettings | None = None,
    token_store: TokenStore | None = None,
    client_factory: ClientFactory | None = None,
) -> Flask:
    app = Flask(__name__)
    cfg = settings or get_settings()
    store = token_store or build_token_store(cfg)
    app.secret_key = cfg.flask_secret_key

    async def _mount() -> AggregateResult:
        client = client_factory(cfg) if client_factory else None
        dashboard = Dashboard(token_store=store, settings=cfg, client=client)
        try:
            return await dashboard.mount()
        finally:
            if client is not None:
                await client.aclose()

    def _load() -> AggregateResult:
        # One view, one fetch
        return asyncio.run(_mount())

    @app.route("/")
    def index() -> str:
        result = _load()
        panels = build_panels(result)
        return render_template(
            "analytics.html",
            panels=panels,
            loaded=not result.is_empty,
            plotlyjs_version=get_plotlyjs_version(),
        )

    @app.get("/stats")
    def stats() -> Any:
        return jsonify(_load().to_payload())

    return app
