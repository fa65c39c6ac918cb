from dataclasses import dataclass
from os import getenv
from pathlib import Path
from dotenv import load_dotenv
import logging

# Загружаем переменные окружения из файла .env
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent / "data" / "catalog.json"


def _get_int(name: str, default: int) -> int:
    """Прочитать целое число из окружения, при ошибке вернуть значение по умолчанию"""
    raw = getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except (ValueError, TypeError):
        logger.warning(f"Invalid integer for {name}: {raw!r}, using {default}")
        return default


def _get_bool(name: str, default: bool = False) -> bool:
    raw = getenv(name)
    if raw is None:
        return default
    return str(raw).lower() in ('true', '1', 'yes')


@dataclass
class Config:
    """Конфигурация приложения"""

    def __init__(self):
        """Инициализация конфигурации"""
        self.BOT_TOKEN = getenv("BOT_TOKEN")
        self.DATABASE_URL = getenv("DATABASE_URL", "sqlite+aiosqlite:///data/shop.db")
        self.DEBUG = _get_bool("DEBUG")

        # Каталог и изображения
        self.CATALOG_PATH = Path(getenv("CATALOG_PATH") or DEFAULT_CATALOG_PATH)
        self.IMAGE_BASE_URL = (getenv("IMAGE_BASE_URL") or "").rstrip("/")

        # Корзина
        self.CART_STORAGE_KEY = getenv("CART_STORAGE_KEY", "cart")
        # Сортировать ли гравировки при построении идентификатора позиции
        self.CANONICAL_ENGRAVING_ORDER = _get_bool("CANONICAL_ENGRAVING_ORDER")

        # Список товаров и поиск
        self.CATALOG_PAGE_SIZE = max(1, _get_int("CATALOG_PAGE_SIZE", 8))
        self.SEARCH_MIN_LENGTH = max(1, _get_int("SEARCH_MIN_LENGTH", 3))
        self.SEARCH_SUGGESTIONS_LIMIT = max(1, _get_int("SEARCH_SUGGESTIONS_LIMIT", 5))

        self.LOG_DIR = getenv("LOG_DIR", "logs")
