# Overview: Flask API routes for sales; parses input and returns JSON responses.

from flask import Blueprint, request, g, current_app

from ..decorators import require_auth, require_policy, scoped_outlet_id
from ..responses import ok
from ..services import recording_service
from ..validation import optional_id_arg, optional_date_arg


sales_bp = Blueprint("sales", __name__, url_prefix="/api/sales")


@sales_bp.get("")
@require_auth
@require_policy("sales.list")
def list_sales():
    """
    Sales, newest first.

    Query params:
    - outletId: int (optional, honoured for owners only)
    - startDate, endDate: ISO dates (optional, inclusive)
    """
    tz = current_app.config["ORG_TIMEZONE"]
    rows = recording_service.list_records(
        recording_service.SALE,
        outlet_id=scoped_outlet_id(optional_id_arg(request.args, "outletId", "Outlet ID")),
        start=optional_date_arg(request.args, "startDate", tz),
        end=optional_date_arg(request.args, "endDate", tz),
    )
    return ok([row.to_dict() for row in rows])


@sales_bp.post("")
@require_auth
@require_policy("sales.record")
def record_sale():
    """Append a sale. Outlet staff always record against their own outlet."""
    row = recording_service.record(
        recording_service.SALE,
        request.get_json(silent=True),
        g.session_context,
    )
    return ok(row.to_dict(), 201)
