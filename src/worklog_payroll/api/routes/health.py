"""Service and database health endpoints."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Response, status
from pydantic import BaseModel

from worklog_payroll import __version__
from worklog_payroll.api.dependencies import Store
from worklog_payroll.exceptions import StoreError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Overall status plus the record store's reachability."""

    status: str
    version: str
    timestamp: datetime
    database: str


async def _store_reachable(store: Store) -> bool:
    try:
        await store.ping()
    except StoreError:
        logger.warning("Record store did not answer the health ping")
        return False
    return True


@router.get("/health", response_model=HealthResponse)
async def health_check(store: Store) -> HealthResponse:
    """Always 200; a failed ping reports the service as degraded."""
    reachable = await _store_reachable(store)
    return HealthResponse(
        status="healthy" if reachable else "degraded",
        version=__version__,
        timestamp=datetime.now(timezone.utc),
        database="healthy" if reachable else "unhealthy",
    )


@router.get("/ready")
async def readiness_check(store: Store, response: Response) -> dict[str, str]:
    """503 until the record store answers, so traffic is held back."""
    if not await _store_reachable(store):
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return {"status": "unavailable"}
    return {"status": "ready"}


@router.get("/live")
async def liveness_check() -> dict[str, str]:
    """Process is up; does not touch the database."""
    return {"status": "alive"}
