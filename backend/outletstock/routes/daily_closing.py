# Overview: Flask API routes for daily closings; parses input and returns JSON responses.

from flask import Blueprint, request, g, current_app

from ..decorators import require_auth, require_policy, scoped_outlet_id
from ..responses import ok
from ..services import recording_service
from ..validation import optional_id_arg, optional_date_arg


daily_closing_bp = Blueprint("daily_closing", __name__, url_prefix="/api/daily-closing")


@daily_closing_bp.get("")
@require_auth
@require_policy("daily_closing.list")
def list_daily_closings():
    """
    Daily closings, newest first.

    Query params:
    - outletId: int (optional, honoured for owners only)
    - startDate, endDate: ISO dates (optional, inclusive)
    """
    tz = current_app.config["ORG_TIMEZONE"]
    rows = recording_service.list_records(
        recording_service.DAILY_CLOSING,
        outlet_id=scoped_outlet_id(optional_id_arg(request.args, "outletId", "Outlet ID")),
        start=optional_date_arg(request.args, "startDate", tz),
        end=optional_date_arg(request.args, "endDate", tz),
    )
    return ok([row.to_dict() for row in rows])


@daily_closing_bp.post("")
@require_auth
@require_policy("daily_closing.record")
def record_daily_closing():
    """Create or overwrite the closing for (outlet, date)."""
    row = recording_service.record(
        recording_service.DAILY_CLOSING,
        request.get_json(silent=True),
        g.session_context,
    )
    return ok(row.to_dict(), 201)
