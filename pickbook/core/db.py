# pickbook/core/db.py
import logging
import os
from typing import Any, Dict, Iterable, List
from urllib.parse import urlparse, urlunparse, parse_qsl, urlencode

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine

from pickbook.core.errors import UpstreamError

logger = logging.getLogger("pickbook.db")

_engine: AsyncEngine | None = None


def _ensure_asyncpg(url: str) -> str:
    """
    Normalize any postgres URL to asyncpg + ssl=require.
    Works for:
      - postgres://...
      - postgresql://...
      - postgresql+psycopg2://...
    asyncpg does not understand libpq's `sslmode`; it is translated to `ssl`.
    """
    if not url:
        return url

    # normalize scheme
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    if url.startswith("postgresql+psycopg2://"):
        url = "postgresql://" + url[len("postgresql+psycopg2://"):]
    if not url.startswith("postgresql+asyncpg://"):
        url = "postgresql+asyncpg://" + url.split("postgresql://", 1)[-1]

    parsed = urlparse(url)
    q = dict(parse_qsl(parsed.query))
    if "sslmode" in q:
        q.setdefault("ssl", q.pop("sslmode"))
    q.setdefault("ssl", "require")
    final_url = urlunparse(parsed._replace(query=urlencode(q)))

    # minimal debug (no secrets)
    logger.info("[DB] Using asyncpg URL -> host=%s port=%s ssl=%s",
                parsed.hostname or "?", parsed.port or "?", q.get("ssl"))
    return final_url


def get_database_url() -> str | None:
    raw = os.getenv("DATABASE_URL")
    if not raw:
        logger.warning("[DB] DATABASE_URL not set; DB layer disabled.")
        return None
    return _ensure_asyncpg(raw)


async def init_engine() -> AsyncEngine | None:
    global _engine
    url = get_database_url()
    if not url:
        return None
    _engine = create_async_engine(url, pool_pre_ping=True)
    return _engine


async def close_engine():
    global _engine
    if _engine:
        await _engine.dispose()
        _engine = None


def _require_engine() -> AsyncEngine:
    if not _engine:
        raise UpstreamError("database not configured")
    return _engine


async def exec_sql(sql: str, params: dict[str, Any] | None = None) -> None:
    engine = _require_engine()
    try:
        async with engine.begin() as conn:
            await conn.execute(text(sql), params or {})
    except SQLAlchemyError as e:
        raise UpstreamError(str(e)) from e


async def fetch_all(sql: str, params: dict[str, Any] | None = None) -> List[Dict[str, Any]]:
    engine = _require_engine()
    try:
        async with engine.connect() as conn:
            res = await conn.execute(text(sql), params or {})
            return [dict(r) for r in res.mappings()]
    except SQLAlchemyError as e:
        raise UpstreamError(str(e)) from e


async def exec_script(sql: str) -> None:
    """Run a multi-statement DDL script one statement at a time (asyncpg rejects batches)."""
    for stmt in (s.strip() for s in sql.split(";")):
        if stmt:
            await exec_sql(stmt)


async def exec_many(sql: str, rows: Iterable[dict[str, Any]]) -> None:
    engine = _require_engine()
    try:
        async with engine.begin() as conn:
            await conn.execute(text(sql), list(rows))
    except SQLAlchemyError as e:
        raise UpstreamError(str(e)) from e
