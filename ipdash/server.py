"""FastAPI application serving the dashboard page and its JSON API."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import httpx
from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates

from ipdash import __version__
from ipdash import details
from ipdash.config import PING_INVALID_TARGET
from ipdash.engine import build_client, measure_all, measure_target
from ipdash.export import ping_result_to_dict
from ipdash.ipintel import IpLookupError, client_address, lookup, parse_record
from ipdash.models import DashboardConfig
from ipdash.targets import get_target, list_targets

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

api = APIRouter(prefix="/api", tags=["api"])
pages = APIRouter(tags=["pages"])


def _config(request: Request) -> DashboardConfig:
    return request.app.state.config


def _client(request: Request) -> httpx.AsyncClient:
    return request.app.state.client


# ── API ───────────────────────────────────────────────────────────────


@api.get("/health")
async def health() -> dict:
    return {"status": "ok", "version": __version__}


@api.get("/ip")
async def ip_info(request: Request) -> JSONResponse:
    """Relay the upstream intelligence record for the visitor's address."""
    config = _config(request)
    address = client_address(request.headers)
    try:
        data = await lookup(
            _client(request),
            address,
            endpoint=config.ipregistry_endpoint,
            key=config.ipregistry_key,
        )
    except IpLookupError as exc:
        body: dict = {"success": False, "message": exc.message}
        if exc.from_upstream:
            body["status"] = exc.status
        return JSONResponse(body, status_code=exc.status)
    return JSONResponse({"success": True, **data})


@api.get("/ping")
async def ping_targets() -> list[dict]:
    """List the available ping targets."""
    return [t.describe() for t in list_targets()]


@api.post("/ping")
async def ping(request: Request) -> JSONResponse:
    """Measure one target named by ``{"id": ...}`` in the request body."""
    try:
        body = await request.json()
    except ValueError:
        body = None

    target_id = body.get("id") if isinstance(body, dict) else None
    if not isinstance(target_id, str):
        return JSONResponse({"error": PING_INVALID_TARGET}, status_code=400)
    try:
        target = get_target(target_id)
    except ValueError:
        return JSONResponse({"error": PING_INVALID_TARGET}, status_code=400)

    result = await measure_target(target, _client(request), _config(request).timeout)
    status_code = 200 if result.is_reachable else 504
    return JSONResponse(ping_result_to_dict(result), status_code=status_code)


@api.post("/ping/all")
async def ping_all(request: Request) -> list[dict]:
    """Measure every target concurrently and return all results."""
    results = await measure_all(_client(request), _config(request).timeout)
    return [ping_result_to_dict(r) for r in results]


# ── Pages ─────────────────────────────────────────────────────────────


@pages.get("/", response_class=HTMLResponse)
async def dashboard(request: Request):
    """Dashboard page; resolver cards are filled in by the browser."""
    config = _config(request)
    record = None
    error = None
    try:
        data = await lookup(
            _client(request),
            client_address(request.headers),
            endpoint=config.ipregistry_endpoint,
            key=config.ipregistry_key,
        )
        record = parse_record(data)
    except IpLookupError:
        error = "Failed to load IP intelligence data. Try refreshing."

    context = {
        "record": record,
        "error": error,
        "targets": [t.describe() for t in list_targets()],
    }
    if record is not None:
        context.update(
            network=details.network_details(record),
            location=details.location_details(record),
            connection=details.connection_details(record),
            timezone=details.timezone_details(record) + details.user_agent_details(record),
            headline_badges=details.security_badges(record),
            all_badges=details.security_badges(record, all_flags=True),
            hosting=details.is_hosting(record),
        )
    return templates.TemplateResponse(request, "dashboard.html", context)


# ── Application factory ───────────────────────────────────────────────


def create_app(
    config: Optional[DashboardConfig] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Build the application.

    *transport* replaces the network transport of the shared upstream
    client; tests pass an ``httpx.MockTransport``.
    """
    config = config or DashboardConfig()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.client = build_client(config.timeout, config.http2, transport)
        logger.info("ipdash %s ready, upstream timeout %.1fs", __version__, config.timeout)
        try:
            yield
        finally:
            await app.state.client.aclose()

    app = FastAPI(
        title="ipdash",
        description="IP intelligence and DNS-over-HTTPS latency dashboard",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config

    @app.middleware("http")
    async def no_store(request: Request, call_next):
        response = await call_next(request)
        if request.url.path.startswith("/api/"):
            response.headers["cache-control"] = "no-store"
        return response

    @app.exception_handler(Exception)
    async def unhandled(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            {"error": "Internal server error"},
            status_code=500,
            headers={"cache-control": "no-store"},
        )

    app.include_router(api)
    app.include_router(pages)
    return app
