from pathlib import Path
from typing import Iterable, List, Optional, Union
import json
import logging

from ..models.catalog import Product, Category

logger = logging.getLogger(__name__)


class CatalogRepository:
    """
    Репозиторий каталога: неизменяемый набор категорий и товаров в памяти.
    Заполняется один раз при старте и передается потребителям явно.
    """

    def __init__(self, categories: Iterable[Category] = (), products: Iterable[Product] = ()):
        self._categories: List[Category] = list(categories)
        self._products: List[Product] = []
        self._products_by_id = {}

        for product in products:
            if product.id in self._products_by_id:
                # При дублировании id побеждает первая запись
                logger.warning(f"Duplicate product id {product.id} ('{product.title}') skipped")
                continue
            self._products_by_id[product.id] = product
            self._products.append(product)

        logger.info(f"Catalog loaded: {len(self._categories)} categories, {len(self._products)} products")

    @classmethod
    def from_dict(cls, data: dict) -> "CatalogRepository":
        categories = [Category.from_dict(raw) for raw in data.get("categories") or [] if isinstance(raw, dict)]
        products = [Product.from_dict(raw) for raw in data.get("products") or [] if isinstance(raw, dict)]
        return cls(categories, products)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "CatalogRepository":
        """Загрузить каталог из JSON-файла"""
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        return cls.from_dict(data)

    def get_categories(self) -> List[Category]:
        """Получить все категории"""
        return list(self._categories)

    def get_category_by_id(self, category_id: int) -> Optional[Category]:
        return next((c for c in self._categories if c.id == category_id), None)

    def get_all_products(self) -> List[Product]:
        """Получить все товары"""
        return list(self._products)

    def get_product_by_id(self, product_id: int) -> Optional[Product]:
        """Получить товар по ID"""
        return self._products_by_id.get(product_id)

    def get_products_by_category(self, category_id: int) -> List[Product]:
        """Получить товары категории"""
        return [p for p in self._products if p.category_id == category_id]
