"""
Пакет с сервисами приложения
"""

from .cart import CartService
from .catalog import CatalogService, CatalogPage
from .pricing import compute_price, get_discount_price
from .line_item_builder import build_line_item, build_default_line_item, default_selection

__all__ = [
    'CartService',
    'CatalogService',
    'CatalogPage',
    'compute_price',
    'get_discount_price',
    'build_line_item',
    'build_default_line_item',
    'default_selection',
]
