# backend/tooladmin/routes/system.py
"""
System health and version endpoints (no authentication).

/health reports whether the app is running on its configured database or on
the in-memory fallback it switches to when that database is unreachable at
start-up.
"""

import sys
import time

from flask import Blueprint, current_app
from sqlalchemy import text

from ..extensions import db
from ..time_utils import utcnow, to_utc_z

system_bp = Blueprint("system", __name__)

API_VERSION = "1.0.0"


def check_database_health() -> dict:
    """Round-trip a trivial query and time it."""
    start_time = time.time()
    try:
        db.session.execute(text("SELECT 1"))
        elapsed_ms = (time.time() - start_time) * 1000
        return {"status": "healthy", "latency_ms": round(elapsed_ms, 2)}
    except Exception:
        elapsed_ms = (time.time() - start_time) * 1000
        db.session.rollback()
        current_app.logger.exception("Database health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error",
        }


@system_bp.get("/health")
def health():
    """
    Returns:
    - 200 with status "healthy" on the configured database
    - 200 with status "degraded" when running on the in-memory fallback
    - 503 when the database does not answer
    """
    database_health = check_database_health()
    degraded = bool(current_app.config.get("STORAGE_DEGRADED"))

    if database_health["status"] == "unhealthy":
        overall_status, http_status = "unhealthy", 503
    elif degraded:
        overall_status, http_status = "degraded", 200
    else:
        overall_status, http_status = "healthy", 200

    return {
        "status": overall_status,
        "storage": "degraded" if degraded else "primary",
        "timestamp": to_utc_z(utcnow()),
        "checks": {"database": database_health},
    }, http_status


@system_bp.get("/version")
def version():
    """Non-sensitive deployment info. No secrets, credentials or paths."""
    env = "production" if not current_app.debug else "development"
    return {
        "api_version": API_VERSION,
        "environment": env,
        "python_version": sys.version.split()[0],
        "server_time": to_utc_z(utcnow()),
    }
