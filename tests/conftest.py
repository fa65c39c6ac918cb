import pytest

from app.config import DEFAULT_CATALOG_PATH
from app.models.catalog import Product
from app.repositories.cart_repository import InMemoryCartStorage
from app.repositories.catalog_repository import CatalogRepository
from app.services.catalog import CatalogService


CLASSIC_PRODUCT = {
    "id": 1,
    "title": "Вертикальный памятник 'Классика'",
    "price": 19000,
    "discount_price": 22000,
    "category_id": 1,
    "description": "Классический вертикальный памятник из черного гранита.",
    "base_price": 19000,
    "images": [
        {"id": 1, "image_url": "/images/0000.png", "is_main": True},
        {"id": 2, "image_url": "/images/0001.png", "is_main": False},
    ],
    "price_modifiers": {
        "sizes": {
            "90x45x5": {"price": 0, "name": "90x45x5 см (Стандарт)"},
            "110x50x5": {"price": 2500, "name": "110x50x5 см (+2500 ₽)"},
            "130x60x5": {"price": 5000, "name": "130x60x5 см (+5000 ₽)"},
        },
        "base_sizes": {
            "50x15x15": {"price": 0, "name": "50x15x15 см (Стандарт)"},
            "70x20x15": {"price": 1800, "name": "70x20x15 см (+1800 ₽)"},
            "90x25x15": {"price": 3500, "name": "90x25x15 см (+3500 ₽)"},
        },
        "flower_sizes": {
            "90x45": {"price": 0, "name": "90x45 см (Стандарт)"},
            "110x50": {"price": 1200, "name": "110x50 см (+1200 ₽)"},
            "130x60": {"price": 2400, "name": "130x60 см (+2400 ₽)"},
        },
        "materials": {
            "black_granite": {"price": 0, "name": "Гранит черный"},
            "gray_granite": {"price": 2500, "name": "Гранит серый"},
            "marble": {"price": 6000, "name": "Мрамор"},
        },
        "engravings": {
            "text": {"price": 1700, "name": "Текст"},
            "portrait": {"price": 3200, "name": "Портрет"},
            "ornament": {"price": 1550, "name": "Орнамент"},
        },
    },
}


@pytest.fixture
def classic_product():
    return Product.from_dict(CLASSIC_PRODUCT)


@pytest.fixture
def bare_product():
    """Товар без таблиц модификаторов и без base_price"""
    return Product.from_dict({
        "id": 5,
        "title": "Памятник 'Плита'",
        "price": 15000,
        "category_id": 2,
    })


@pytest.fixture
def storage():
    return InMemoryCartStorage()


@pytest.fixture
def catalog_repository():
    return CatalogRepository.from_file(DEFAULT_CATALOG_PATH)


@pytest.fixture
def catalog_service(catalog_repository):
    return CatalogService(catalog_repository, page_size=8, search_min_length=3, suggestions_limit=5)
