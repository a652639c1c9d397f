# Overview: Flask API routes for inventory snapshots; parses input and returns JSON responses.

from flask import Blueprint, request, g, current_app

from ..decorators import require_auth, require_policy, scoped_outlet_id
from ..responses import ok
from ..services import recording_service
from ..validation import optional_id_arg, optional_date_arg


inventory_bp = Blueprint("inventory", __name__, url_prefix="/api/inventory")


@inventory_bp.get("")
@require_auth
@require_policy("inventory.list")
def list_inventory():
    """
    Stock counts, newest first.

    Query params:
    - outletId: int (optional, honoured for owners only)
    - date: ISO date (optional) - counts taken on exactly that day
    """
    outlet_id = scoped_outlet_id(optional_id_arg(request.args, "outletId", "Outlet ID"))
    on_date = optional_date_arg(request.args, "date", current_app.config["ORG_TIMEZONE"])

    rows = recording_service.list_records(
        recording_service.INVENTORY,
        outlet_id=outlet_id,
        on_date=on_date,
    )
    return ok([row.to_dict() for row in rows])


@inventory_bp.post("")
@require_auth
@require_policy("inventory.record")
def record_inventory():
    """Create or overwrite the count for (productId, outletId, date)."""
    row = recording_service.record(
        recording_service.INVENTORY,
        request.get_json(silent=True),
        g.session_context,
    )
    return ok(row.to_dict(), 201)
