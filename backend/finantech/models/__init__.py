from .catalog import Product
from .sales import Sale, SaleItem
from .snapshots import Snapshot

__all__ = [
    'Product',
    'Sale', 'SaleItem',
    'Snapshot',
]
