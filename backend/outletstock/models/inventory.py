from __future__ import annotations

from decimal import Decimal

from ..extensions import db
from outletstock.time_utils import to_utc_z, to_iso_date


def as_number(value: Decimal | None) -> float | int:
    """JSON-friendly number for Numeric columns (None counts as zero)."""
    if value is None:
        return 0
    if value == value.to_integral_value():
        return int(value)
    return float(value)


class Product(db.Model):
    """
    Product master data.

    Shared by every outlet; there is no per-outlet product catalogue.
    is_fixed marks staples that are stocked at a fixed level.
    """
    __tablename__ = "products"
    __table_args__ = (
        db.Index("ix_products_name", "name"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    unit = db.Column(db.String(32), nullable=False)
    category = db.Column(db.String(120), nullable=True)
    is_fixed = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    def __repr__(self) -> str:
        return f"<Product id={self.id} name={self.name!r} unit={self.unit!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "unit": self.unit,
            "category": self.category,
            "isFixed": self.is_fixed,
            "createdAt": to_utc_z(self.created_at),
        }


class Inventory(db.Model):
    """
    Point-in-time stock count for one product at one outlet on one day.

    SNAPSHOT: (product_id, outlet_id, date) is unique; a second count for the
    same key overwrites the quantity instead of adding a row. This is not a
    running ledger; remaining stock is derived by reporting_service.
    """
    __tablename__ = "inventory"
    __table_args__ = (
        db.UniqueConstraint("product_id", "outlet_id", "date", name="uq_inventory_product_outlet_date"),
        db.Index("ix_inventory_outlet_date", "outlet_id", "date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=False, index=True)
    outlet_id = db.Column(db.Integer, db.ForeignKey("outlets.id"), nullable=False, index=True)
    quantity = db.Column(db.Numeric(12, 3), nullable=False)
    date = db.Column(db.Date, nullable=False, index=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    product = db.relationship("Product")
    outlet = db.relationship("Outlet")

    def __repr__(self) -> str:
        return f"<Inventory product_id={self.product_id} outlet_id={self.outlet_id} date={self.date} qty={self.quantity}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "productId": self.product_id,
            "outletId": self.outlet_id,
            "quantity": as_number(self.quantity),
            "date": to_iso_date(self.date),
            "product": self.product.to_dict() if self.product else None,
            "outlet": self.outlet.to_dict() if self.outlet else None,
            "createdAt": to_utc_z(self.created_at),
            "updatedAt": to_utc_z(self.updated_at),
        }
