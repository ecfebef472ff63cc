# backend/storefront/routes/system.py
"""
System health endpoint and local media serving.
"""

import time
from flask import Blueprint, current_app, send_from_directory
from ..extensions import db
from ..models import Product, UsedProduct
from ..services.media_service import upload_root

system_bp = Blueprint("system", __name__)


def check_database_health() -> dict:
    """
    Check database connectivity and basic operations.

    Returns dict with status and details.
    """
    start_time = time.time()
    try:
        pending = db.session.query(UsedProduct).filter_by(status="pending").count()
        active_products = db.session.query(Product).filter_by(is_active=True).count()

        elapsed_ms = (time.time() - start_time) * 1000

        return {
            "status": "healthy",
            "latency_ms": round(elapsed_ms, 2),
            "details": {
                "pending_submissions": pending,
                "active_products": active_products,
            }
        }
    except Exception:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Database health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error"
        }


@system_bp.get("/api/health")
def health():
    database = check_database_health()
    status_code = 200 if database["status"] == "healthy" else 503
    return {"status": database["status"], "checks": {"database": database}}, status_code


@system_bp.get("/uploads/<path:filename>")
def serve_upload(filename: str):
    # send_from_directory refuses paths escaping the upload root
    return send_from_directory(upload_root(), filename)
