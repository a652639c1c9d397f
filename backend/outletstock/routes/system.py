# backend/outletstock/routes/system.py
"""
System endpoints: health check and uploaded file serving.
"""

from flask import Blueprint, send_from_directory

from ..responses import ok
from ..services.image_service import upload_root
from outletstock.time_utils import utcnow, to_utc_z

system_bp = Blueprint("system", __name__)


@system_bp.get("/api/health")
def health():
    return ok({"status": "ok", "timestamp": to_utc_z(utcnow())})


@system_bp.get("/uploads/<path:filename>")
def uploaded_file(filename: str):
    """Serve stored waste photos. send_from_directory rejects path traversal."""
    return send_from_directory(upload_root(), filename)
