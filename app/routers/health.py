# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Provides health check endpoints for monitoring and load balancers.
# =============================================================================

from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from app.config import settings

router = APIRouter()


# =============================================================================
# Response Models
# =============================================================================

class HealthResponse(BaseModel):
    """Basic health check response."""
    status: str
    timestamp: str
    environment: str
    version: str


class ChecksResponse(BaseModel):
    """Individual service checks."""
    firestore: str
    storage: str
    broker: str


class ReadinessResponse(BaseModel):
    """Readiness check response."""
    status: str
    checks: ChecksResponse
    timestamp: str


class LivenessResponse(BaseModel):
    """Liveness check response."""
    status: str
    timestamp: str


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint.

    Returns basic health status for load balancers and monitoring.
    """
    return HealthResponse(
        status="healthy",
        timestamp=_now(),
        environment=settings.ENVIRONMENT,
        version="1.0.0",
    )


@router.get("/health/ready", response_model=ReadinessResponse)
def readiness_check():
    """
    Readiness check endpoint.

    Checks Firestore, Supabase Storage and the Redis broker the reminder
    worker uses.
    """
    import redis
    from lib.firestore_client import FirestoreClient, MEDICINES_COLLECTION
    from lib.supabase_client import SupabaseClient

    checks = ChecksResponse(firestore="unknown", storage="unknown", broker="unknown")

    try:
        FirestoreClient.list_documents(MEDICINES_COLLECTION, limit=1)
        checks.firestore = "healthy"
    except Exception as e:
        checks.firestore = f"unhealthy: {str(e)[:50]}"

    try:
        SupabaseClient.bucket(settings.PROFILE_PICTURES_BUCKET).list()
        checks.storage = "healthy"
    except Exception as e:
        checks.storage = f"unhealthy: {str(e)[:50]}"

    try:
        client = redis.Redis.from_url(settings.REDIS_URL, socket_connect_timeout=2)
        client.ping()
        client.close()
        checks.broker = "healthy"
    except redis.RedisError as e:
        checks.broker = f"unhealthy: {str(e)[:50]}"

    all_healthy = all(value == "healthy" for value in checks.model_dump().values())

    return ReadinessResponse(
        status="ready" if all_healthy else "degraded",
        checks=checks,
        timestamp=_now(),
    )


@router.get("/health/live", response_model=LivenessResponse)
async def liveness_check():
    """
    Liveness check endpoint.

    Returns whether the service process is alive.
    """
    return LivenessResponse(
        status="alive",
        timestamp=_now(),
    )
