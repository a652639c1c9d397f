from __future__ import annotations

from ..extensions import db
from outletstock.time_utils import to_utc_z


class Outlet(db.Model):
    """
    Physical point of sale: cafe, restaurant or mini-market.

    Static reference data created by `flask system init`. Sales, waste,
    inventory snapshots and daily closings are all scoped to an outlet;
    purchases are not (they are organization-wide).
    """
    __tablename__ = "outlets"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False, unique=True)
    type = db.Column(db.String(32), nullable=False, index=True)

    created_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
    )

    def __repr__(self) -> str:
        return f"<Outlet id={self.id} name={self.name!r} type={self.type}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "createdAt": to_utc_z(self.created_at),
        }
