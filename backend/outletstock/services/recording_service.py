# Overview: Service-layer operations for recording transactions; one code path for all five record types.

"""
Recordable Transactions

Inventory snapshots, purchases, sales, waste and daily closings differ only
in their fields, in how the outlet is chosen, and in whether a write appends
or overwrites. Each is described by a RecordType and goes through the same
prepare -> save pipeline:

    prepare: validate fields (first failure wins), resolve outlet, check
             referenced rows exist, derive computed columns
    save:    append a row, or upsert on the natural key

APPEND (purchase, sale, waste): every call inserts, duplicates included.
UPSERT (inventory, daily closing): the natural key is looked up and
overwritten. A unique-key collision from a concurrent insert is turned into
an update, so the last committed write wins.

Every call touches exactly one row; on any database error the session is
rolled back and InternalError is raised.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..errors import Forbidden, InternalError, ValidationError
from ..extensions import db
from ..models import Inventory, Purchase, Sale, Waste, DailyClosing, Product, Outlet
from ..permissions import SCOPE_ANY, outlet_scope
from ..validation import (
    FieldRule,
    KIND_ID,
    KIND_QUANTITY,
    KIND_DATE,
    KIND_TEXT,
    AMOUNT_PLACES,
    coerce_id,
    validate_fields,
)
from . import image_service
from .session_service import SessionContext


OUTLET_NONE = "none"        # record has no outlet
OUTLET_PAYLOAD = "payload"  # outletId is an ordinary required field
OUTLET_CALLER = "caller"    # caller's own outlet; only SCOPE_ANY roles may name one


@dataclass(frozen=True)
class RecordType:
    name: str
    model: type
    fields: tuple[FieldRule, ...]
    outlet_mode: str = OUTLET_NONE
    upsert_key: tuple[str, ...] | None = None
    derive: Callable[[dict, SessionContext], dict] | None = None

    @property
    def is_snapshot(self) -> bool:
        return self.upsert_key is not None


PRODUCT_ID = FieldRule("productId", "product_id", KIND_ID, "Product ID")
QUANTITY = FieldRule("quantity", "quantity", KIND_QUANTITY, "Quantity")
DATE = FieldRule("date", "date", KIND_DATE, "Date")


def _derive_entered_by(values: dict, context: SessionContext) -> dict:
    return {"entered_by_id": context.user_id}


def _derive_net_cash(values: dict, context: SessionContext) -> dict:
    # Net cash is recorded as the cash takings, nothing deducted
    return {"net_cash": values["cash_sales"]}


INVENTORY = RecordType(
    name="inventory",
    model=Inventory,
    fields=(
        PRODUCT_ID,
        FieldRule("outletId", "outlet_id", KIND_ID, "Outlet ID"),
        QUANTITY,
        DATE,
    ),
    outlet_mode=OUTLET_PAYLOAD,
    upsert_key=("product_id", "outlet_id", "date"),
)

PURCHASE = RecordType(
    name="purchase",
    model=Purchase,
    fields=(PRODUCT_ID, QUANTITY, DATE),
    derive=_derive_entered_by,
)

SALE = RecordType(
    name="sale",
    model=Sale,
    fields=(PRODUCT_ID, QUANTITY, DATE),
    outlet_mode=OUTLET_CALLER,
)

WASTE = RecordType(
    name="waste",
    model=Waste,
    fields=(
        PRODUCT_ID,
        QUANTITY,
        DATE,
        FieldRule("reason", "reason", KIND_TEXT, "Reason", required=False),
    ),
    outlet_mode=OUTLET_CALLER,
)

DAILY_CLOSING = RecordType(
    name="daily_closing",
    model=DailyClosing,
    fields=(
        FieldRule("cardSales", "card_sales", KIND_QUANTITY, "Card sales", places=AMOUNT_PLACES),
        FieldRule("cashSales", "cash_sales", KIND_QUANTITY, "Cash sales", places=AMOUNT_PLACES),
        DATE,
    ),
    outlet_mode=OUTLET_CALLER,
    upsert_key=("outlet_id", "date"),
    derive=_derive_net_cash,
)


# =============================================================================
# PREPARE
# =============================================================================

def resolve_outlet(payload, context: SessionContext) -> int:
    """
    Outlet a caller-scoped record is written against.

    Outlet staff always write to their own outlet; naming a different one is
    refused. Owners must name the outlet explicitly.
    """
    raw = payload.get("outletId") if payload else None
    requested = None
    if raw is not None and not (isinstance(raw, str) and not raw.strip()):
        requested = coerce_id(raw, "Outlet ID")

    if outlet_scope(context.role) == SCOPE_ANY:
        outlet_id = requested
    else:
        if requested is not None and requested != context.outlet_id:
            current_app.logger.warning(
                "Cross-outlet write refused: user=%s outlet=%s requested=%s",
                context.user_id, context.outlet_id, requested,
            )
            raise Forbidden("Cannot record for another outlet")
        outlet_id = context.outlet_id

    if outlet_id is None:
        raise ValidationError("Outlet ID is required")
    return outlet_id


def _check_references(values: dict) -> None:
    if "product_id" in values and db.session.get(Product, values["product_id"]) is None:
        raise ValidationError("Product not found")
    if "outlet_id" in values and db.session.get(Outlet, values["outlet_id"]) is None:
        raise ValidationError("Outlet not found")


def prepare(record_type: RecordType, payload, context: SessionContext) -> dict:
    """Validate a payload and return the column values to write."""
    values = validate_fields(
        payload,
        record_type.fields,
        tz_name=current_app.config.get("ORG_TIMEZONE"),
    )

    if record_type.outlet_mode == OUTLET_CALLER:
        values["outlet_id"] = resolve_outlet(payload, context)

    _check_references(values)

    if record_type.derive:
        values.update(record_type.derive(values, context))
    return values


# =============================================================================
# SAVE
# =============================================================================

def _upsert(model, key: tuple[str, ...], values: dict):
    filters = {k: values[k] for k in key}
    row = db.session.query(model).filter_by(**filters).first()

    if row is None:
        row = model(**values)
        db.session.add(row)
        try:
            db.session.commit()
            return row
        except IntegrityError:
            # Another request inserted the same key first; overwrite it
            db.session.rollback()
            row = db.session.query(model).filter_by(**filters).one()

    for attr, value in values.items():
        setattr(row, attr, value)
    db.session.commit()
    return row


def save(record_type: RecordType, values: dict):
    try:
        if record_type.is_snapshot:
            return _upsert(record_type.model, record_type.upsert_key, values)

        row = record_type.model(**values)
        db.session.add(row)
        db.session.commit()
        return row
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Failed to save %s record", record_type.name)
        raise InternalError()


def record(record_type: RecordType, payload, context: SessionContext):
    """Validate and write one record. Returns the saved model instance."""
    values = prepare(record_type, payload, context)
    return save(record_type, values)


def record_waste(payload, context: SessionContext, image=None):
    """
    Record waste with an optional photo (a werkzeug FileStorage).

    The payload is validated before the image is touched; if the row cannot
    be saved the stored image is removed again.
    """
    values = prepare(WASTE, payload, context)

    image_path = None
    if image is not None:
        image_url, image_path = image_service.store_waste_image(image.mimetype, image.read())
        values["image_url"] = image_url

    try:
        return save(WASTE, values)
    except InternalError:
        image_service.discard(image_path)
        raise


# =============================================================================
# LIST
# =============================================================================

def list_records(
    record_type: RecordType,
    *,
    outlet_id: int | None = None,
    product_id: int | None = None,
    start: date | None = None,
    end: date | None = None,
    on_date: date | None = None,
) -> list:
    """
    Rows of one record type, newest date first.

    Date bounds are inclusive. outlet_id must already be the effective
    filter (see permissions.effective_outlet_id); it is ignored for record
    types without an outlet.
    """
    model = record_type.model
    query = db.session.query(model)

    if outlet_id is not None and record_type.outlet_mode != OUTLET_NONE:
        query = query.filter(model.outlet_id == outlet_id)
    if product_id is not None and hasattr(model, "product_id"):
        query = query.filter(model.product_id == product_id)
    if on_date is not None:
        query = query.filter(model.date == on_date)
    if start is not None:
        query = query.filter(model.date >= start)
    if end is not None:
        query = query.filter(model.date <= end)

    return query.order_by(model.date.desc(), model.id.desc()).all()
