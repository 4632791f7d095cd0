"""
Health Check Endpoints
Liveness, detailed status and latency metrics.
"""

import logging
import time
from datetime import datetime
from typing import Any, Dict

from fastapi import APIRouter, Depends, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import APISettings, get_settings
from ..dependencies import get_db
from ..middleware.timing import get_latency_tracker

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check() -> Dict[str, str]:
    return {"status": "healthy", "timestamp": datetime.utcnow().isoformat()}


@router.get("/status", status_code=status.HTTP_200_OK)
async def status_check(
    settings: APISettings = Depends(get_settings),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    """
    Detailed status check.

    Reports database connectivity and request latency percentiles. A failed
    database check marks the service as degraded instead of erroring.
    """
    status_info: Dict[str, Any] = {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "version": settings.version,
        "environment": settings.environment,
        "components": {},
    }

    start = time.perf_counter()
    try:
        db.execute(text("SELECT 1"))
        status_info["components"]["database"] = {
            "status": "healthy",
            "url": settings.database_url.split("@")[-1],  # Hide credentials
            "latency_ms": round((time.perf_counter() - start) * 1000, 2),
        }
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        status_info["components"]["database"] = {"status": "unhealthy", "error": str(e)}
        status_info["status"] = "degraded"

    stats = get_latency_tracker().get_stats()
    status_info["performance"] = {
        "request_count": stats["count"],
        "latency_p50_ms": round(stats["p50"], 2),
        "latency_p95_ms": round(stats["p95"], 2),
        "latency_p99_ms": round(stats["p99"], 2),
        "target_p95_ms": settings.target_p95_latency_ms,
        "meets_target": stats["p95"] <= settings.target_p95_latency_ms,
    }

    return status_info


@router.get("/metrics", status_code=status.HTTP_200_OK)
async def get_metrics() -> Dict[str, Any]:
    """Latency statistics over the recent request window."""
    stats = get_latency_tracker().get_stats()

    return {
        "requests": {"total": stats["count"]},
        "latency": {
            "p50_ms": round(stats["p50"], 2),
            "p95_ms": round(stats["p95"], 2),
            "p99_ms": round(stats["p99"], 2),
            "mean_ms": round(stats["mean"], 2),
            "min_ms": round(stats["min"], 2),
            "max_ms": round(stats["max"], 2),
        },
        "timestamp": datetime.utcnow().isoformat(),
    }
