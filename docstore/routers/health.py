"""
Health check, status and monitoring endpoints.
"""

import time
from datetime import datetime

from fastapi import APIRouter, Depends, Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from docstore.config import settings
from docstore.models import HealthStatus, ServerStatus
from docstore.storage import Storage, get_storage

router = APIRouter(tags=["monitoring"])

# Track application start time
START_TIME = time.time()


@router.get("/status", response_model=ServerStatus)
async def get_status():
    """
    Server status.

    Reports that the server is up, who owns it and the current time in
    milliseconds since epoch.
    """
    return ServerStatus(
        up=True,
        owner=settings.status_owner,
        timestamp=int(time.time() * 1000)
    )


@router.get("/health", response_model=HealthStatus)
async def health_check(store_storage: Storage = Depends(get_storage)):
    """
    Health check endpoint.

    Returns the overall health status of the service including:
    - Storage availability
    - Service uptime
    - Application version
    """
    storage_ok = await store_storage.health_check()

    return HealthStatus(
        status="healthy" if storage_ok else "unhealthy",
        version=settings.app_version,
        storage="available" if storage_ok else "unavailable",
        uptime_seconds=time.time() - START_TIME,
        timestamp=datetime.utcnow()
    )


@router.get("/health/live")
async def liveness_check():
    """
    Liveness probe.

    Simple check that the application is running.
    Does not check dependencies.
    """
    return {"status": "alive"}


@router.get("/health/ready")
async def readiness_check(store_storage: Storage = Depends(get_storage)):
    """
    Readiness probe.

    Verifies the data directory is present and writable.
    """
    if not await store_storage.health_check():
        return Response(
            content='{"status": "not ready", "reason": "storage unavailable"}',
            status_code=503,
            media_type="application/json"
        )

    return {"status": "ready"}


@router.get(settings.metrics_path)
async def metrics():
    """
    Prometheus metrics endpoint.

    Returns metrics in Prometheus text format including:
    - Store operation counts by outcome
    - Store operation latency
    """
    if not settings.enable_metrics:
        return Response(status_code=404)

    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


@router.get("/info")
async def info():
    """
    Service information endpoint.

    Returns basic information about the running service.
    """
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "uptime_seconds": time.time() - START_TIME
    }
