# Overview: Flask API routes for outlets; read-only reference data.

from flask import Blueprint

from ..decorators import require_auth, require_policy
from ..responses import ok
from ..services import catalog_service


outlets_bp = Blueprint("outlets", __name__, url_prefix="/api/outlets")


@outlets_bp.get("")
@require_auth
@require_policy("outlets.list")
def list_outlets():
    return ok([outlet.to_dict() for outlet in catalog_service.list_outlets()])
