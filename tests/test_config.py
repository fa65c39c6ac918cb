from app.config import Config, DEFAULT_CATALOG_PATH


def test_defaults(monkeypatch):
    for name in ("DATABASE_URL", "CATALOG_PATH", "CART_STORAGE_KEY", "CATALOG_PAGE_SIZE",
                 "CANONICAL_ENGRAVING_ORDER", "IMAGE_BASE_URL"):
        monkeypatch.delenv(name, raising=False)

    config = Config()
    assert config.DATABASE_URL == "sqlite+aiosqlite:///data/shop.db"
    assert config.CATALOG_PATH == DEFAULT_CATALOG_PATH
    assert config.CART_STORAGE_KEY == "cart"
    assert config.CATALOG_PAGE_SIZE == 8
    assert config.CANONICAL_ENGRAVING_ORDER is False
    assert config.IMAGE_BASE_URL == ""


def test_overrides(monkeypatch):
    monkeypatch.setenv("CATALOG_PAGE_SIZE", "12")
    monkeypatch.setenv("CANONICAL_ENGRAVING_ORDER", "true")
    monkeypatch.setenv("IMAGE_BASE_URL", "https://cdn.example.com/")

    config = Config()
    assert config.CATALOG_PAGE_SIZE == 12
    assert config.CANONICAL_ENGRAVING_ORDER is True
    assert config.IMAGE_BASE_URL == "https://cdn.example.com"


def test_invalid_numbers_fall_back(monkeypatch):
    monkeypatch.setenv("CATALOG_PAGE_SIZE", "many")
    monkeypatch.setenv("SEARCH_MIN_LENGTH", "0")

    config = Config()
    assert config.CATALOG_PAGE_SIZE == 8
    assert config.SEARCH_MIN_LENGTH == 1
