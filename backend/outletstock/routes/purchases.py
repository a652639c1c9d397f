# Overview: Flask API routes for purchases; parses input and returns JSON responses.

from flask import Blueprint, request, g, current_app

from ..decorators import require_auth, require_policy
from ..responses import ok
from ..services import recording_service
from ..validation import optional_id_arg, optional_date_arg


purchases_bp = Blueprint("purchases", __name__, url_prefix="/api/purchases")


@purchases_bp.get("")
@require_auth
@require_policy("purchases.list")
def list_purchases():
    """
    Purchases, newest first. Purchases have no outlet, so every role sees
    all of them.

    Query params:
    - productId: int (optional)
    - startDate, endDate: ISO dates (optional, inclusive)
    """
    tz = current_app.config["ORG_TIMEZONE"]
    rows = recording_service.list_records(
        recording_service.PURCHASE,
        product_id=optional_id_arg(request.args, "productId", "Product ID"),
        start=optional_date_arg(request.args, "startDate", tz),
        end=optional_date_arg(request.args, "endDate", tz),
    )
    return ok([row.to_dict() for row in rows])


@purchases_bp.post("")
@require_auth
@require_policy("purchases.record")
def record_purchase():
    """Append a purchase entered by the caller."""
    row = recording_service.record(
        recording_service.PURCHASE,
        request.get_json(silent=True),
        g.session_context,
    )
    return ok(row.to_dict(), 201)
