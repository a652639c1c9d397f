# Overview: Service-layer operations for reference data (outlets, products) and the default seed.

from __future__ import annotations

from ..errors import ValidationError
from ..extensions import db
from ..models import Outlet, Product, User
from ..permissions import ALL_OUTLET_TYPES, OutletType, Role


DEFAULT_OUTLETS = [
    ("University Cafe", OutletType.CAFE),
    ("University Restaurant", OutletType.RESTAURANT),
    ("Mini Market", OutletType.MINI_MARKET),
]

# (email, name, role, outlet type or None)
DEFAULT_USERS = [
    ("owner@inventory.com", "Owner Admin", Role.OWNER, None),
    ("purchasing@inventory.com", "Purchasing Staff", Role.PURCHASING, None),
    ("cafe@inventory.com", "Cafe Staff", Role.OUTLET_CAFE, OutletType.CAFE),
    ("restaurant@inventory.com", "Restaurant Staff", Role.OUTLET_RESTAURANT, OutletType.RESTAURANT),
    ("minimarket@inventory.com", "Mini Market Staff", Role.OUTLET_MINI_MARKET, OutletType.MINI_MARKET),
]

# (name, unit, category, is_fixed)
DEFAULT_PRODUCTS = [
    ("Coffee Beans", "kg", "Beverages", False),
    ("Sugar", "kg", "Ingredients", True),
    ("Bread", "pieces", "Bakery", False),
    ("Bottled Water", "bottles", "Beverages", True),
]


def list_products() -> list[Product]:
    return db.session.query(Product).order_by(Product.name.asc(), Product.id.asc()).all()


def list_outlets() -> list[Outlet]:
    return db.session.query(Outlet).order_by(Outlet.name.asc(), Outlet.id.asc()).all()


def create_outlet(name: str, outlet_type: str) -> Outlet:
    if not name:
        raise ValidationError("Outlet name is required")
    if outlet_type not in ALL_OUTLET_TYPES:
        raise ValidationError(f"Unknown outlet type: {outlet_type}")
    if db.session.query(Outlet).filter_by(name=name).first():
        raise ValidationError("Outlet name already exists")

    outlet = Outlet(name=name, type=outlet_type)
    db.session.add(outlet)
    db.session.commit()
    return outlet


def create_product(name: str, unit: str, category: str | None = None, is_fixed: bool = False) -> Product:
    if not name:
        raise ValidationError("Product name is required")
    if not unit:
        raise ValidationError("Unit is required")

    product = Product(name=name, unit=unit, category=category, is_fixed=is_fixed)
    db.session.add(product)
    db.session.commit()
    return product


def seed_defaults(password_hash: str) -> dict:
    """
    Idempotently create the default outlets, users and products.

    Rows are matched by natural identity (outlet name, user email, product
    name) so running twice adds nothing. Returns counts of rows created.
    """
    created = {"outlets": 0, "users": 0, "products": 0}

    outlets_by_type = {}
    for name, outlet_type in DEFAULT_OUTLETS:
        outlet = db.session.query(Outlet).filter_by(name=name).first()
        if not outlet:
            outlet = Outlet(name=name, type=outlet_type)
            db.session.add(outlet)
            db.session.flush()
            created["outlets"] += 1
        outlets_by_type[outlet_type] = outlet

    for email, name, role, outlet_type in DEFAULT_USERS:
        if db.session.query(User).filter_by(email=email).first():
            continue
        outlet = outlets_by_type[outlet_type] if outlet_type else None
        db.session.add(
            User(
                email=email,
                password_hash=password_hash,
                name=name,
                role=role,
                outlet_id=outlet.id if outlet else None,
            )
        )
        created["users"] += 1

    for name, unit, category, is_fixed in DEFAULT_PRODUCTS:
        if db.session.query(Product).filter_by(name=name).first():
            continue
        db.session.add(Product(name=name, unit=unit, category=category, is_fixed=is_fixed))
        created["products"] += 1

    db.session.commit()
    return created
