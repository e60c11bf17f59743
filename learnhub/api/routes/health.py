# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Liveness and readiness endpoints.

``/health`` pings the database. ``/health/ready`` additionally checks that
every LearnHub table exists, so a deployment whose schema has not been
created yet is reported as not ready.
"""

import logging
import time
from datetime import datetime
from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel, Field
from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError

from learnhub import __version__
from learnhub.core.config import get_settings
from learnhub.infrastructure.database.connection import DatabaseError, get_engine
from learnhub.infrastructure.database.models import Base
from learnhub.utils.datetime import utc_now

logger = logging.getLogger(__name__)

router = APIRouter()

_started_at = time.monotonic()


class DatabaseHealth(BaseModel):
    """Result of the database ping."""

    status: str = Field(description="healthy or unhealthy")
    latency_ms: float | None = None
    message: str | None = None


class HealthResponse(BaseModel):
    """Liveness response."""

    status: str
    timestamp: datetime
    version: str
    environment: str
    uptime_seconds: int
    database: DatabaseHealth


class ReadinessResponse(BaseModel):
    """Readiness response."""

    ready: bool
    checks: dict[str, Any]


async def ping_database() -> DatabaseHealth:
    try:
        engine = get_engine()
        start = time.monotonic()
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return DatabaseHealth(status="healthy", latency_ms=round((time.monotonic() - start) * 1000, 2))
    except (DatabaseError, SQLAlchemyError) as e:
        logger.error("Database ping failed: %s", e)
        return DatabaseHealth(status="unhealthy", message=str(e))


async def missing_tables() -> list[str]:
    """Names of LearnHub tables absent from the connected database."""
    engine = get_engine()
    async with engine.connect() as conn:
        existing = await conn.run_sync(lambda sync_conn: set(inspect(sync_conn).get_table_names()))
    return sorted(set(Base.metadata.tables) - existing)


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Report process uptime and database reachability.

    Always answers 200; the body carries the database state.
    """
    database = await ping_database()
    return HealthResponse(
        status=database.status,
        timestamp=utc_now(),
        version=__version__,
        environment=get_settings().environment,
        uptime_seconds=int(time.monotonic() - _started_at),
        database=database,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check() -> ReadinessResponse:
    database = await ping_database()
    checks: dict[str, Any] = {"database": database.model_dump(exclude_none=True)}

    if database.status != "healthy":
        return ReadinessResponse(ready=False, checks=checks)

    try:
        missing = await missing_tables()
    except (DatabaseError, SQLAlchemyError) as e:
        logger.error("Schema inspection failed: %s", e)
        checks["schema"] = {"status": "unknown", "message": str(e)}
        return ReadinessResponse(ready=False, checks=checks)

    checks["schema"] = {"status": "ok" if not missing else "incomplete", "missing_tables": missing}
    return ReadinessResponse(ready=not missing, checks=checks)
