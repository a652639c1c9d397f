from .outlets import Outlet
from .auth import User
from .inventory import Product, Inventory
from .transactions import Purchase, Sale, Waste, DailyClosing

__all__ = [
    'Outlet',
    'User',
    'Product', 'Inventory',
    'Purchase', 'Sale', 'Waste', 'DailyClosing',
]
