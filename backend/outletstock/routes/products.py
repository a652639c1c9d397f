# Overview: Flask API routes for products; read-only reference data.

from flask import Blueprint

from ..decorators import require_auth, require_policy
from ..responses import ok
from ..services import catalog_service


products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
@require_auth
@require_policy("products.list")
def list_products():
    """All products ordered by name. Products are shared by every outlet."""
    return ok([product.to_dict() for product in catalog_service.list_products()])
