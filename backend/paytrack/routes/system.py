# backend/paytrack/routes/system.py
"""
System health endpoint.

Reports database reachability, realtime subscriber count and whether the
overdue scanner thread is alive.
"""

import time
from flask import Blueprint, current_app, jsonify

from ..components import get_components
from ..validation import StorageError

system_bp = Blueprint("system", __name__)


def check_database_health() -> dict:
    start_time = time.time()
    try:
        get_components().storage.ping()
        elapsed_ms = (time.time() - start_time) * 1000
        return {"status": "healthy", "latency_ms": round(elapsed_ms, 2)}
    except StorageError:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Database health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error",
        }


@system_bp.get("/health")
def health():
    components = get_components()
    database = check_database_health()
    healthy = database["status"] == "healthy"
    return jsonify({
        "status": "healthy" if healthy else "unhealthy",
        "database": database,
        "realtime": {"subscribers": len(components.registry)},
        "overdue_scanner": {
            "running": components.scanner.running,
            "interval_seconds": components.scanner.interval_seconds,
        },
    }), (200 if healthy else 503)
