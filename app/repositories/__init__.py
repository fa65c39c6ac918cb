from .catalog_repository import CatalogRepository
from .cart_repository import CartStorage, SqlCartStorage, InMemoryCartStorage

__all__ = [
    'CatalogRepository',
    'CartStorage',
    'SqlCartStorage',
    'InMemoryCartStorage',
]
