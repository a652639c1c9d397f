from __future__ import annotations

from ..extensions import db
from outletstock.time_utils import to_utc_z


class User(db.Model):
    """
    User accounts for authentication and attribution.

    Role is one of permissions.Role. Outlet staff roles carry an outlet
    affiliation; OWNER and PURCHASING do not. Users are created by the CLI
    and are read-only through the API.
    """
    __tablename__ = "users"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), nullable=False, unique=True, index=True)

    # Bcrypt hashed password
    password_hash = db.Column(db.String(255), nullable=False)

    name = db.Column(db.String(120), nullable=False)
    role = db.Column(db.String(32), nullable=False, index=True)

    # Required for outlet roles, null for OWNER / PURCHASING
    outlet_id = db.Column(db.Integer, db.ForeignKey("outlets.id"), nullable=True, index=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    outlet = db.relationship("Outlet", backref=db.backref("users", lazy=True))

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r} role={self.role}>"

    def to_public_dict(self) -> dict:
        """Projection returned at login; never includes the hash."""
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": self.role,
            "outlet": self.outlet.to_dict() if self.outlet else None,
        }

    def to_summary_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
        }

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": self.role,
            "outletId": self.outlet_id,
            "createdAt": to_utc_z(self.created_at),
        }
