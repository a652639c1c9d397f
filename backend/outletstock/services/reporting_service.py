# Overview: Service-layer operations for reporting; encapsulates business logic and database work.

"""
Reports derived from raw transaction rows.

Nothing here is materialized: every report re-sums Purchase, Sale, Waste and
DailyClosing rows on each call. Sub-queries run independently, so under
concurrent writes a report may mix rows committed between its queries.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import func

from outletstock.extensions import db
from outletstock.models import Product, Purchase, Sale, Waste, DailyClosing, Outlet
from outletstock.models.inventory import as_number
from outletstock.time_utils import month_bounds, to_iso_date


QUANTITY_PLACES = Decimal("0.001")
AMOUNT_PLACES = Decimal("0.01")


def _to_decimal(value, places: Decimal) -> Decimal:
    # SQLite sums Numeric columns as floats; pin them back to column scale
    if value is None:
        return Decimal(0).quantize(places)
    return Decimal(str(value)).quantize(places)


def _sum_quantity(
    model,
    product_id: int,
    *,
    start: date | None,
    end: date | None,
    outlet_id: int | None = None,
) -> Decimal:
    query = db.session.query(
        func.coalesce(func.sum(model.quantity), 0)
    ).filter(model.product_id == product_id)

    if start is not None:
        query = query.filter(model.date >= start)
    if end is not None:
        query = query.filter(model.date <= end)
    if outlet_id is not None:
        query = query.filter(model.outlet_id == outlet_id)

    return _to_decimal(query.scalar(), QUANTITY_PLACES)


def inventory_report(
    *,
    outlet_id: int | None,
    start: date | None,
    end: date | None,
) -> list[dict]:
    """
    Remaining stock per product: purchased - sold - wasted.

    Purchases are organization-wide and never outlet-filtered; sales and
    waste are limited to outlet_id when one is given. Remaining is signed;
    a negative value means more left the shelves than was bought and is
    reported as is.
    """
    products = db.session.query(Product).order_by(Product.name.asc(), Product.id.asc()).all()

    rows = []
    for product in products:
        purchased = _sum_quantity(Purchase, product.id, start=start, end=end)
        sold = _sum_quantity(Sale, product.id, start=start, end=end, outlet_id=outlet_id)
        wasted = _sum_quantity(Waste, product.id, start=start, end=end, outlet_id=outlet_id)
        remaining = purchased - sold - wasted

        rows.append(
            {
                "product": product.to_dict(),
                "purchased": as_number(purchased),
                "sold": as_number(sold),
                "wasted": as_number(wasted),
                "remaining": as_number(remaining),
            }
        )
    return rows


def sales_report(
    *,
    outlet_id: int | None,
    start: date,
    end: date,
) -> list[dict]:
    """
    Sales in [start, end] grouped into one bucket per calendar day.

    Rows are read in ascending (date, id) order and buckets are emitted in
    the order their day is first seen, which is therefore ascending.
    """
    query = db.session.query(Sale).filter(Sale.date >= start, Sale.date <= end)
    if outlet_id is not None:
        query = query.filter(Sale.outlet_id == outlet_id)
    sales = query.order_by(Sale.date.asc(), Sale.id.asc()).all()

    buckets: dict[str, dict] = {}
    totals: dict[str, Decimal] = {}
    for sale in sales:
        day = to_iso_date(sale.date)
        if day not in buckets:
            buckets[day] = {"date": day, "items": [], "totalQuantity": 0}
            totals[day] = Decimal(0)
        buckets[day]["items"].append(sale.to_dict())
        totals[day] += _to_decimal(sale.quantity, QUANTITY_PLACES)

    for day, bucket in buckets.items():
        bucket["totalQuantity"] = as_number(totals[day])
    return list(buckets.values())


def daily_summary(*, start: date, end: date) -> dict:
    """All outlets' daily closings in [start, end] plus their grand totals."""
    closings = _closings_between(start, end)

    card = cash = net = Decimal(0)
    for closing in closings:
        card += _to_decimal(closing.card_sales, AMOUNT_PLACES)
        cash += _to_decimal(closing.cash_sales, AMOUNT_PLACES)
        net += _to_decimal(closing.net_cash, AMOUNT_PLACES)

    return {
        "closings": [closing.to_dict() for closing in closings],
        "totals": {
            "totalCardSales": as_number(card),
            "totalCashSales": as_number(cash),
            "totalNetCash": as_number(net),
        },
    }


def _closings_between(start: date, end: date) -> list[DailyClosing]:
    return (
        db.session.query(DailyClosing)
        .filter(DailyClosing.date >= start, DailyClosing.date <= end)
        .order_by(DailyClosing.date.asc(), DailyClosing.outlet_id.asc())
        .all()
    )


def _sales_totals(closings) -> dict:
    card = cash = Decimal(0)
    for closing in closings:
        card += _to_decimal(closing.card_sales, AMOUNT_PLACES)
        cash += _to_decimal(closing.cash_sales, AMOUNT_PLACES)
    return {
        "cardSales": as_number(card),
        "cashSales": as_number(cash),
        "totalSales": as_number(card + cash),
    }


def dashboard_stats(*, clock) -> dict:
    """
    Owner dashboard KPIs for "today" and "this month" according to clock.

    clock must provide now() and today() (see time_utils.SystemClock);
    tests pass a FixedClock. The month window runs from the first to the
    last day of today's month.
    """
    today = clock.today()
    month_start, month_end = month_bounds(today)

    monthly_closings = _closings_between(month_start, month_end)
    today_closings = [c for c in monthly_closings if c.date == today]

    by_outlet: dict[str, list[DailyClosing]] = {}
    outlet_types: dict[str, str] = {}
    for closing in monthly_closings:
        name = closing.outlet.name
        by_outlet.setdefault(name, []).append(closing)
        outlet_types[name] = closing.outlet.type

    breakdown = {}
    for name, closings in by_outlet.items():
        totals = _sales_totals(closings)
        totals["type"] = outlet_types[name]
        breakdown[name] = totals

    return {
        "today": _sales_totals(today_closings),
        "monthly": _sales_totals(monthly_closings),
        "outletBreakdown": breakdown,
        "outletCount": db.session.query(Outlet).count(),
        "month": clock.now().strftime("%B %Y"),
    }
