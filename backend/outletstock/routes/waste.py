# Overview: Flask API routes for waste; parses input (JSON or multipart) and returns JSON responses.

from flask import Blueprint, request, g, current_app

from ..decorators import require_auth, require_policy, scoped_outlet_id
from ..responses import ok
from ..services import recording_service
from ..validation import optional_id_arg, optional_date_arg


waste_bp = Blueprint("waste", __name__, url_prefix="/api/waste")


@waste_bp.get("")
@require_auth
@require_policy("waste.list")
def list_waste():
    """
    Waste records, newest first.

    Query params:
    - outletId: int (optional, honoured for owners only)
    - startDate, endDate: ISO dates (optional, inclusive)
    """
    tz = current_app.config["ORG_TIMEZONE"]
    rows = recording_service.list_records(
        recording_service.WASTE,
        outlet_id=scoped_outlet_id(optional_id_arg(request.args, "outletId", "Outlet ID")),
        start=optional_date_arg(request.args, "startDate", tz),
        end=optional_date_arg(request.args, "endDate", tz),
    )
    return ok([row.to_dict() for row in rows])


@waste_bp.post("")
@require_auth
@require_policy("waste.record")
def record_waste():
    """
    Append a waste record.

    Accepts multipart/form-data (fields + optional "image" file) or JSON
    without an image.
    """
    if request.mimetype == "multipart/form-data":
        payload = request.form.to_dict()
        image = request.files.get("image")
        if image is not None and not image.filename:
            image = None
    else:
        payload = request.get_json(silent=True)
        image = None

    row = recording_service.record_waste(payload, g.session_context, image=image)
    return ok(row.to_dict(), 201)
