# backend/gearpos/routes/system.py
"""
System health endpoint (public; sits outside the access gate).
"""

import time
from flask import Blueprint, current_app
from sqlalchemy import text

from ..extensions import db
from ..services.register_service import get_register

system_bp = Blueprint("system", __name__)


def check_database_health() -> dict:
    """Check snapshot-store connectivity."""
    start_time = time.time()
    try:
        db.session.execute(text("SELECT 1"))
        elapsed_ms = (time.time() - start_time) * 1000
        return {"status": "healthy", "latency_ms": round(elapsed_ms, 2)}
    except Exception:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Database health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error",
        }


@system_bp.get("/health")
def health():
    database = check_database_health()
    body = {"status": database["status"], "checks": {"database": database}}
    if database["status"] == "healthy":
        register = get_register()
        body["checks"]["register"] = {
            "products": len(register.catalog),
            "customers": len(register.customers),
            "sales": len(register.history),
            "cart_lines": len(register.cart.lines),
            "sync_configured": register.settings.sync_configured,
        }
    return body, (200 if database["status"] == "healthy" else 503)
