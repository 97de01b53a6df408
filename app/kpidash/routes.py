from datetime import datetime, timezone

from flask import Blueprint

bp = Blueprint("routes", __name__)


@bp.get("/api/health")
def health():
    """Health check endpoint. Returns JSON."""
    return {"status": "OK", "timestamp": datetime.now(timezone.utc).isoformat()}


@bp.get("/healthz")
def healthz():
    """
    Fast health check for container probes. No DB access, minimal overhead.
    """
    return "ok", 200
