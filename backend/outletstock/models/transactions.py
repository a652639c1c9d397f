from __future__ import annotations

from ..extensions import db
from outletstock.time_utils import to_utc_z, to_iso_date
from .inventory import as_number


class Purchase(db.Model):
    """
    Stock bought for the whole organization.

    APPEND-ONLY: every recorded purchase is a new row, identical payloads
    included. Purchases have no outlet; they feed the inventory report for
    every outlet.
    """
    __tablename__ = "purchases"
    __table_args__ = (
        db.Index("ix_purchases_product_date", "product_id", "date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=False, index=True)
    quantity = db.Column(db.Numeric(12, 3), nullable=False)
    date = db.Column(db.Date, nullable=False, index=True)
    entered_by_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    product = db.relationship("Product")
    entered_by = db.relationship("User")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "productId": self.product_id,
            "quantity": as_number(self.quantity),
            "date": to_iso_date(self.date),
            "enteredById": self.entered_by_id,
            "product": self.product.to_dict() if self.product else None,
            "enteredBy": self.entered_by.to_summary_dict() if self.entered_by else None,
            "createdAt": to_utc_z(self.created_at),
        }


class Sale(db.Model):
    """Quantity of a product sold at an outlet on a day. APPEND-ONLY."""
    __tablename__ = "sales"
    __table_args__ = (
        db.Index("ix_sales_outlet_date", "outlet_id", "date"),
        db.Index("ix_sales_product_date", "product_id", "date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    outlet_id = db.Column(db.Integer, db.ForeignKey("outlets.id"), nullable=False, index=True)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=False, index=True)
    quantity = db.Column(db.Numeric(12, 3), nullable=False)
    date = db.Column(db.Date, nullable=False, index=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    product = db.relationship("Product")
    outlet = db.relationship("Outlet")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "outletId": self.outlet_id,
            "productId": self.product_id,
            "quantity": as_number(self.quantity),
            "date": to_iso_date(self.date),
            "product": self.product.to_dict() if self.product else None,
            "outlet": self.outlet.to_dict() if self.outlet else None,
            "createdAt": to_utc_z(self.created_at),
        }


class Waste(db.Model):
    """
    Spoiled or discarded stock at an outlet. APPEND-ONLY.

    image_url points at a re-encoded photo under /uploads/waste when one
    was attached.
    """
    __tablename__ = "waste"
    __table_args__ = (
        db.Index("ix_waste_outlet_date", "outlet_id", "date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    outlet_id = db.Column(db.Integer, db.ForeignKey("outlets.id"), nullable=False, index=True)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=False, index=True)
    quantity = db.Column(db.Numeric(12, 3), nullable=False)
    date = db.Column(db.Date, nullable=False, index=True)
    reason = db.Column(db.Text, nullable=True)
    image_url = db.Column(db.String(255), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    product = db.relationship("Product")
    outlet = db.relationship("Outlet")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "outletId": self.outlet_id,
            "productId": self.product_id,
            "quantity": as_number(self.quantity),
            "date": to_iso_date(self.date),
            "reason": self.reason,
            "imageUrl": self.image_url,
            "product": self.product.to_dict() if self.product else None,
            "outlet": self.outlet.to_dict() if self.outlet else None,
            "createdAt": to_utc_z(self.created_at),
        }


class DailyClosing(db.Model):
    """
    End-of-day takings for one outlet.

    SNAPSHOT: (outlet_id, date) is unique; resubmitting overwrites.
    net_cash is stored equal to cash_sales. No float or deduction logic is
    applied to it.
    """
    __tablename__ = "daily_closings"
    __table_args__ = (
        db.UniqueConstraint("outlet_id", "date", name="uq_daily_closings_outlet_date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    outlet_id = db.Column(db.Integer, db.ForeignKey("outlets.id"), nullable=False, index=True)
    date = db.Column(db.Date, nullable=False, index=True)
    card_sales = db.Column(db.Numeric(12, 2), nullable=False)
    cash_sales = db.Column(db.Numeric(12, 2), nullable=False)
    net_cash = db.Column(db.Numeric(12, 2), nullable=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    outlet = db.relationship("Outlet")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "outletId": self.outlet_id,
            "date": to_iso_date(self.date),
            "cardSales": as_number(self.card_sales),
            "cashSales": as_number(self.cash_sales),
            "netCash": as_number(self.net_cash),
            "outlet": self.outlet.to_dict() if self.outlet else None,
            "createdAt": to_utc_z(self.created_at),
            "updatedAt": to_utc_z(self.updated_at),
        }
