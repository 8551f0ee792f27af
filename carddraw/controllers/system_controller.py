# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: liveness, readiness and the Prometheus scrape endpoint.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from carddraw.core.catalog import RoleCatalog
from carddraw.core.config import settings
from carddraw.core.dependencies import get_assignment_repo, get_catalog
from carddraw.core.logging import get_logger
from carddraw.repositories.assignment_repository import STORE_ERRORS

router = APIRouter(tags=["System"])
logger = get_logger(__name__)


@router.get("/health")
def health_check(catalog: RoleCatalog = Depends(get_catalog)):
    """Process is up and the card catalog is loaded. Does not touch the store."""
    return {
        "status": "ok",
        "service": settings.SERVICE_NAME,
        "version": settings.SERVICE_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "cards_loaded": len(catalog),
    }


@router.get("/health/ready")
def readiness_check(repo=Depends(get_assignment_repo)):
    """Ready once the assignment store answers a trivial query."""
    store = "database" if settings.DATABASE_URL else "memory"
    try:
        repo.verify_connection()
    except STORE_ERRORS as exc:
        logger.warning("Readiness check failed: %s", exc)
        return JSONResponse(
            status_code=503,
            content={"status": "unavailable", "service": settings.SERVICE_NAME,
                     "store": store, "detail": str(exc)},
        )
    return {"status": "ready", "service": settings.SERVICE_NAME, "store": store}


@router.get("/metrics")
def prometheus_metrics():
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
