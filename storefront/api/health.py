import logging

from fastapi import APIRouter
from sqlalchemy import text

from storefront.database import engine
from storefront.utils.cache import cache_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


@router.get(
    "/",
    summary="Health check",
    description="Basic health check endpoint."
)
def health_check():
    """Simple health check."""
    return {"status": "healthy"}


@router.get(
    "/ready",
    summary="Readiness check",
    description="Check if the database and the Redis cache are reachable."
)
def readiness_check():
    """
    Readiness check for all dependencies.

    The database is required. Redis is reported but only required when the
    cache is enabled, since the cache degrades to misses without it.
    """
    checks = {
        "database": False,
        "redis": False,
    }

    # Check database
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
            checks["database"] = True
    except Exception as e:
        logger.warning(f"Database readiness check failed: {e}")
        checks["database_error"] = str(e)

    # Check Redis
    if cache_service.enabled:
        try:
            cache_service.client.ping()
            checks["redis"] = True
        except Exception as e:
            logger.warning(f"Redis readiness check failed: {e}")
            checks["redis_error"] = str(e)

    ready = checks["database"] and (checks["redis"] or not cache_service.enabled)

    return {
        "status": "ready" if ready else "not_ready",
        "checks": checks
    }
