from flask import Blueprint, request, current_app

from ..decorators import require_auth, require_policy, scoped_outlet_id
from ..responses import ok
from ..services import reporting_service
from ..time_utils import SystemClock
from ..validation import optional_id_arg, optional_date_arg, required_date_arg


reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


def get_clock():
    """Clock for "today"; tests swap it via app.config["CLOCK"]."""
    clock = current_app.config.get("CLOCK")
    if clock is None:
        clock = SystemClock(current_app.config["ORG_TIMEZONE"])
    return clock


@reports_bp.get("/inventory")
@require_auth
@require_policy("reports.inventory")
def inventory_report():
    tz = current_app.config["ORG_TIMEZONE"]
    report = reporting_service.inventory_report(
        outlet_id=scoped_outlet_id(optional_id_arg(request.args, "outletId", "Outlet ID")),
        start=optional_date_arg(request.args, "startDate", tz),
        end=optional_date_arg(request.args, "endDate", tz),
    )
    return ok(report)


@reports_bp.get("/sales")
@require_auth
@require_policy("reports.sales")
def sales_report():
    tz = current_app.config["ORG_TIMEZONE"]
    start = required_date_arg(request.args, "startDate", "Start date is required", tz)
    end = required_date_arg(request.args, "endDate", "End date is required", tz)
    report = reporting_service.sales_report(
        outlet_id=scoped_outlet_id(optional_id_arg(request.args, "outletId", "Outlet ID")),
        start=start,
        end=end,
    )
    return ok(report)


@reports_bp.get("/daily-summary")
@require_auth
@require_policy("reports.daily_summary")
def daily_summary_report():
    tz = current_app.config["ORG_TIMEZONE"]
    start = required_date_arg(request.args, "startDate", "Start date is required", tz)
    end = required_date_arg(request.args, "endDate", "End date is required", tz)
    return ok(reporting_service.daily_summary(start=start, end=end))


@reports_bp.get("/dashboard-stats")
@require_auth
@require_policy("reports.dashboard_stats")
def dashboard_stats():
    return ok(reporting_service.dashboard_stats(clock=get_clock()))
