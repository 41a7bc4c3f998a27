"""
Docs Wallet Backend — Health Check Route
=========================================

What:  Dependency probe for load balancers and monitoring.
How:   SELECT 1 against the database, HEAD on the bucket.

Status levels:
    - healthy:   database and object store reachable
    - degraded:  database reachable, object store not (listing still works)
    - unhealthy: database unreachable
"""

import logging
import time

from fastapi import APIRouter, Depends
from sqlalchemy import text

from docs_wallet import __version__
from docs_wallet.context import AppContext, get_context
from docs_wallet.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get("/health", response_model=HealthResponse, summary="Service health check")
async def health_check(context: AppContext = Depends(get_context)) -> HealthResponse:
    db_status = "connected"
    store_status = "available"
    overall = "healthy"

    try:
        async with context.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", e)

    if not await context.object_store.ping():
        store_status = "unavailable"
        if overall != "unhealthy":
            overall = "degraded"

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        object_store=store_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
