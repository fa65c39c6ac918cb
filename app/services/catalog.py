from dataclasses import dataclass
from typing import List, Optional, Tuple
import math
import logging

from ..repositories.catalog_repository import CatalogRepository
from ..models.catalog import Product, ProductImage, Category
from ..core.constants import PLACEHOLDER_IMAGE_URL

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY_NAME = "Памятники"


@dataclass
class CatalogPage:
    """Страница списка товаров"""
    items: List[Product]
    page: int
    total_pages: int
    total_count: int

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def build_placeholder_product(product_id: int) -> Product:
    """Товар-заглушка, который показывается вместо отсутствующего"""
    return Product.from_dict({
        "id": product_id,
        "title": "Памятник из гранита",
        "price": 19000,
        "discount_price": 22000,
        "category_id": 1,
        "description": "Классический памятник из черного гранита с полированной поверхностью.",
        "base_price": 19000,
        "images": [
            {"id": 1, "image_url": PLACEHOLDER_IMAGE_URL.format(seed=10 + product_id), "is_main": True},
        ],
        "price_modifiers": {
            "sizes": {
                "90x45x5": {"price": 0, "name": "90x45x5 см (Стандарт)"},
                "110x50x5": {"price": 2500, "name": "110x50x5 см (+2500 ₽)"},
            },
            "engravings": {
                "text": {"price": 1200, "name": "Текст"},
                "portrait": {"price": 3500, "name": "Портрет"},
                "ornament": {"price": 1800, "name": "Орнамент"},
            },
        },
    })


class CatalogService:
    """
    Сервис каталога: фильтрация, поиск, пагинация и запасные значения
    для отсутствующих товаров и изображений.
    """

    def __init__(
        self,
        repository: CatalogRepository,
        page_size: int = 8,
        search_min_length: int = 3,
        suggestions_limit: int = 5,
        image_base_url: str = ""
    ):
        self.repository = repository
        self.page_size = max(1, page_size)
        self.search_min_length = search_min_length
        self.suggestions_limit = suggestions_limit
        self.image_base_url = image_base_url.rstrip("/")

    def get_categories(self) -> List[Category]:
        """Получить все категории"""
        return self.repository.get_categories()

    def get_category_name(self, category_id: Optional[int]) -> str:
        category = self.repository.get_category_by_id(category_id) if category_id else None
        return category.name if category else DEFAULT_CATEGORY_NAME

    def get_product_or_placeholder(self, product_id: int) -> Product:
        """Получить товар; если его нет - вернуть заглушку"""
        product = self.repository.get_product_by_id(product_id)
        if product is None:
            logger.warning(f"Product {product_id} not found, showing placeholder")
            return build_placeholder_product(product_id)
        return product

    def list_products(self, category_id: Optional[int] = None, query: Optional[str] = None) -> List[Product]:
        """
        Список товаров с фильтром по категории и поиском по названию.

        Args:
            category_id: ID категории, None - все товары
            query: подстрока названия (без учета регистра)
        """
        if category_id:
            products = self.repository.get_products_by_category(category_id)
        else:
            products = self.repository.get_all_products()

        query = (query or "").strip().lower()
        if query:
            products = [p for p in products if query in p.title.lower()]
        return products

    def paginate(self, products: List[Product], page: int = 1) -> CatalogPage:
        """Разбить список на страницы; номер страницы приводится к допустимому"""
        total_pages = max(1, math.ceil(len(products) / self.page_size))
        page = min(max(1, page), total_pages)
        start = (page - 1) * self.page_size
        return CatalogPage(
            items=products[start:start + self.page_size],
            page=page,
            total_pages=total_pages,
            total_count=len(products),
        )

    def search_suggestions(self, query: str) -> List[Product]:
        """Быстрые подсказки: только для запросов от search_min_length символов"""
        query = (query or "").strip()
        if len(query) < self.search_min_length:
            return []
        return self.list_products(query=query)[:self.suggestions_limit]

    def get_neighbours(self, product_id: int, products: List[Product]) -> Tuple[Optional[Product], Optional[Product]]:
        """Соседние товары в списке для навигации"""
        index = next((i for i, p in enumerate(products) if p.id == product_id), -1)
        if index < 0:
            return None, None
        prev_product = products[index - 1] if index > 0 else None
        next_product = products[index + 1] if index < len(products) - 1 else None
        return prev_product, next_product

    def get_product_images(self, product: Product) -> Tuple[ProductImage, ...]:
        """Изображения товара; если их нет - сгенерированные заглушки"""
        if product.images:
            return product.images
        count = max(1, product.id % 6 + 1)
        images = [ProductImage(id=1, url=PLACEHOLDER_IMAGE_URL.format(seed=f"{product.id}1"), is_main=True)]
        for i in range(1, count):
            images.append(ProductImage(id=i + 1, url=PLACEHOLDER_IMAGE_URL.format(seed=f"{product.id}2")))
        return tuple(images)

    def resolve_image_url(self, url: Optional[str], product_id: int) -> str:
        """
        Абсолютный адрес изображения.
        Локальные пути /images/... разрешаются относительно IMAGE_BASE_URL,
        без него подставляется заглушка.
        """
        if url and url.startswith("/images/"):
            if self.image_base_url:
                return f"{self.image_base_url}{url}"
            return PLACEHOLDER_IMAGE_URL.format(seed=10 + product_id)
        if url:
            return url
        return PLACEHOLDER_IMAGE_URL.format(seed=10 + product_id)

    def get_main_image_url(self, product: Product) -> str:
        images = self.get_product_images(product)
        main = next((image for image in images if image.is_main), images[0])
        return self.resolve_image_url(main.url, product.id)
