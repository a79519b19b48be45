# winpool/main.py
from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
import asyncio
import logging
import time

from winpool.core import settings
from winpool.core.pool_config import load_pool_config
from winpool.core.refresh import RefreshManager
from winpool.routers import pool_routes

# ------------ Logging ------------
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("winpool")
access_logger = logging.getLogger("winpool.access")


# ------------ Startup / shutdown ------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    manager = RefreshManager(load_pool_config(settings.POOL_CONFIG_FILE), display_tz=settings.DISPLAY_TIMEZONE)
    app.state.manager = manager
    # first load runs in the background so startup isn't blocked on ESPN
    initial = asyncio.create_task(manager.refresh())
    if settings.AUTO_REFRESH:
        manager.start_auto_refresh(settings.REFRESH_SECONDS)
    try:
        yield
    finally:
        manager.stop_auto_refresh()
        if not initial.done():
            initial.cancel()


# ------------ App ------------
app = FastAPI(
    title="NFL Win Pool API",
    version="1.0.0",
    docs_url="/docs",
    redoc_url=None,
    openapi_url="/openapi.json",
    lifespan=lifespan,
)


# ------------ Access log middleware ------------
def _snapshot_source(request: Request) -> str:
    manager = getattr(request.app.state, "manager", None)
    snap = manager.snapshot if manager is not None else None
    return snap.source if snap is not None else "none"


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Logs each request with the provenance of the snapshot it was served from."""

    async def dispatch(self, request, call_next):
        t0 = time.perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            response.headers["X-Pool-Source"] = _snapshot_source(request)
        finally:
            access_logger.info(
                "ACCESS %s %s -> %s in %.1fms source=%s",
                request.method,
                request.url.path,
                status,
                (time.perf_counter() - t0) * 1000,
                _snapshot_source(request),
            )
        return response


app.add_middleware(AccessLogMiddleware)

# ------------ CORS (the pool dashboard page is served from another origin) ------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
    expose_headers=["X-Pool-Source"],
)


# ------------ Global error handler ------------
@app.exception_handler(Exception)
async def _unhandled(request: Request, exc: Exception):
    logger.exception("POOL unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "internal_error"})


# ------------ Health ------------
@app.get("/health")
async def health(request: Request):
    return {"ok": True, "source": _snapshot_source(request)}


# ------------ Mount routers ------------
app.include_router(pool_routes.router, prefix="/api/pool")
