"""
Health check and monitoring endpoints.

Unauthenticated so load balancers and uptime probes can reach them.
"""

import logging
from typing import Dict, Any
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, status
from sqlalchemy import func, inspect, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.models.department import Department
from app.models.evaluation import Evaluation, ReviewStatus
from app.models.user import User

router = APIRouter(tags=["Health"])
logger = logging.getLogger(__name__)

REQUIRED_TABLES = ("departments", "users", "evaluations")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check() -> Dict[str, str]:
    """Liveness probe: 200 while the process is serving requests."""
    return {"status": "healthy", "timestamp": _now()}


@router.get("/health/detailed", status_code=status.HTTP_200_OK)
def detailed_health_check(db: Session = Depends(get_db)) -> Dict[str, Any]:
    """
    Readiness check.

    Checks:
    - Database connectivity
    - Schema: the HR tables exist (migrations applied)
    """
    health_status = {"status": "healthy", "timestamp": _now(), "checks": {}}

    try:
        db.execute(text("SELECT 1"))
        health_status["checks"]["database"] = {
            "status": "healthy",
            "message": "Database connection successful"
        }
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        health_status["status"] = "unhealthy"
        health_status["checks"]["database"] = {
            "status": "unhealthy",
            "message": f"Database error: {str(e)}"
        }
        return health_status

    existing = set(inspect(db.get_bind()).get_table_names())
    missing = [table for table in REQUIRED_TABLES if table not in existing]
    if missing:
        logger.error(f"Schema health check failed, missing tables: {missing}")
        health_status["status"] = "unhealthy"
        health_status["checks"]["schema"] = {
            "status": "unhealthy",
            "message": f"Missing tables: {', '.join(missing)}. Run 'alembic upgrade head'."
        }
    else:
        health_status["checks"]["schema"] = {"status": "healthy", "message": "All tables present"}

    return health_status


@router.get("/health/metrics", status_code=status.HTTP_200_OK)
def get_metrics(db: Session = Depends(get_db)) -> Dict[str, Any]:
    """
    Operational counters: staff, departments, evaluations and the review backlog.
    """
    try:
        metrics = {
            "total_users": db.query(func.count(User.id)).scalar() or 0,
            "active_users": db.query(func.count(User.id)).filter(User.is_active.is_(True)).scalar() or 0,
            "total_departments": db.query(func.count(Department.id)).scalar() or 0,
            "total_evaluations": db.query(func.count(Evaluation.id)).scalar() or 0,
            "awaiting_review": db.query(func.count(Evaluation.id)).filter(
                Evaluation.review_status == ReviewStatus.PENDING
            ).scalar() or 0,
        }
    except SQLAlchemyError as e:
        logger.error(f"Failed to retrieve metrics: {e}")
        return {"timestamp": _now(), "error": "Failed to retrieve metrics", "message": str(e)}

    return {"timestamp": _now(), "metrics": metrics}
