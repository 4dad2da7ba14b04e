"""Health check endpoints for debugging and monitoring."""

from fastapi import APIRouter, Depends
import redis.asyncio as redis

from src.api.core.dependencies import AsyncSessionDep
from src.modules.health.service import HealthService, OverallHealthStatus
from src.redis.client import get_redis_client
from src.utils.settings.app import AppSettings

root_router = APIRouter()
router = APIRouter(prefix="/health", tags=["health"])


@root_router.get("/")
async def root() -> dict:
    return {"name": "Uwezo Career API", "version": AppSettings().API_VERSION}


@router.get("")
async def health_check(
    db: AsyncSessionDep,
    redis_client: redis.Redis = Depends(get_redis_client),
) -> OverallHealthStatus:
    """Health check for the database and Redis."""
    return await HealthService(db, redis_client).run_all_checks()


@router.get("/liveness")
async def liveness_check() -> dict:
    """Simple liveness check - indicates if service is running."""
    return {"status": "alive"}
