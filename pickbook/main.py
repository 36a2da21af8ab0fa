# pickbook/main.py
from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
import logging
import time

from pickbook.core import config
from pickbook.core.db import close_engine, init_engine
from pickbook.core.errors import UpstreamError, ValidationError
from pickbook.core.persist import ensure_schema

# ------------ Router imports ------------
from pickbook.routers import picks_routes, schedule_routes

# ------------ Logging ------------
logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger("pickbook")


@asynccontextmanager
async def lifespan(_: FastAPI):
    if await init_engine():
        await ensure_schema()
    yield
    await close_engine()


# ------------ App ------------
app = FastAPI(
    title="Pickbook API",
    version="1.0.0",
    docs_url="/docs",
    redoc_url=None,
    openapi_url="/openapi.json",
    lifespan=lifespan,
)


# ------------ Access log middleware ------------
class AccessLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        t0 = time.perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
        finally:
            dt = (time.perf_counter() - t0) * 1000
            logger.info(
                "ACCESS %s %s q=%s -> %s in %.1fms",
                request.method,
                request.url.path,
                request.url.query,
                status,
                dt,
            )
        return response


app.add_middleware(AccessLogMiddleware)

# ------------ CORS (open; can tighten later) ------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ------------ Error handlers ------------
@app.exception_handler(ValidationError)
async def _invalid(request: Request, exc: ValidationError):
    return JSONResponse(status_code=422, content={"error": "validation_error", "detail": str(exc)})


@app.exception_handler(UpstreamError)
async def _upstream(request: Request, exc: UpstreamError):
    logger.warning("UPSTREAM ERROR: %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=502, content={"error": "upstream_error", "detail": str(exc)})


@app.exception_handler(Exception)
async def _unhandled(request: Request, exc: Exception):
    logger.exception("UNHANDLED ERROR: %s %s", request.method, request.url)
    return JSONResponse(status_code=500, content={"error": "internal_error"})


# ------------ Health & status ------------
@app.get("/health")
async def health():
    return {"ok": True}


@app.get("/status")
async def status():
    return {
        "ok": True,
        "has_odds_key": bool(config.ODDS_API_KEY),
        "regions": config.ODDS_REGIONS,
        "books": config.ODDS_BOOKMAKERS or None,
        "sports": {
            sport: {
                "seasonOpen": cfg.season_open.isoformat(),
                "weeks": cfg.weeks,
                "matchStrategy": cfg.strategy,
                "toleranceHours": cfg.tolerance.total_seconds() / 3600,
            }
            for sport, cfg in config.SPORT_CONFIGS.items()
        },
    }


# ------------ Mount routers ------------
app.include_router(picks_routes.router, prefix="/api/{sport}")
app.include_router(schedule_routes.router, prefix="/api/{sport}")
