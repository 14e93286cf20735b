from .sessions import SalesSession
from .inventory import Product, Movement, MOVEMENT_KINDS
from .sales import Sale, SaleItem

__all__ = [
    'SalesSession',
    'Product', 'Movement', 'MOVEMENT_KINDS',
    'Sale', 'SaleItem',
]
