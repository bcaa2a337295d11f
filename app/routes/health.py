"""
Health check endpoints.
Used for monitoring, deployment readiness checks, and basic connectivity tests.
"""

from fastapi import APIRouter, HTTPException
from app.core.settings import settings
from app.models.report import utcnow
from app.services.report_store import get_report_store


router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
async def health_check():
    """
    Basic health check endpoint.
    Returns 200 if service is running.
    """
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "timestamp": utcnow().isoformat()
    }


@router.get("/store")
async def store_health():
    """
    Report store connectivity check.
    Reads the store once to verify it is reachable and well-formed.
    """
    try:
        details = get_report_store().check()
    except Exception as e:
        raise HTTPException(
            status_code=503,
            detail=f"Report store check failed: {str(e)}"
        )

    return {
        "status": "healthy",
        "connected": True,
        **details,
        "timestamp": utcnow().isoformat()
    }
