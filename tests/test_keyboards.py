from app.catalog.keyboards.cart_kb import CartKeyboard
from app.catalog.keyboards.catalog_kb import CatalogKeyboard
from app.catalog.keyboards.common_kb import format_price
from app.catalog.keyboards.configurator_kb import ConfiguratorKeyboard, CODE_CATEGORIES, get_option_keys
from app.catalog.utils.cart_helpers import format_cart_summary_text, parse_cart_key
from app.catalog.utils.product_formatters import CAPTION_LIMIT, format_product_card, format_products_list
from app.core.constants import ModifierCategory
from app.models.cart import Selection
from app.models.catalog import Product
from app.services.catalog import CatalogPage
from app.services.line_item_builder import build_default_line_item, build_line_item, default_selection


def callback_data(markup):
    return [button.callback_data for row in markup.inline_keyboard for button in row]


def test_format_price():
    assert format_price(19000) == "19 000 ₽"
    assert format_price(0) == "0 ₽"


def test_product_card_shows_discount_only_when_higher(classic_product):
    with_discount = format_product_card(classic_product, "Вертикальные памятники", 19000, 22000)
    assert "<s>22 000 ₽</s>" in with_discount
    assert "19 000 ₽" in with_discount

    without_discount = format_product_card(classic_product, "Вертикальные памятники", 27600, None)
    assert "<s>" not in without_discount


def test_product_card_fits_caption():
    long_product = Product(id=1, title="Стела", description="Гранит. " * 300)
    text = format_product_card(long_product, "Памятники", 19000, configuration="Материал: Мрамор")
    assert len(text) <= CAPTION_LIMIT


def test_configurator_callbacks_fit_telegram_limit(catalog_service):
    for product in catalog_service.list_products():
        markup = ConfiguratorKeyboard.get_configurator_keyboard(product, default_selection(product), 1, 2)
        for data in callback_data(markup):
            assert len(data.encode("utf-8")) <= 64


def test_configurator_marks_selection(classic_product):
    selection = Selection(size="110x50x5", polish_type="combined", engravings=["portrait"])
    markup = ConfiguratorKeyboard.get_configurator_keyboard(classic_product, selection)
    texts = {button.callback_data: button.text for row in markup.inline_keyboard for button in row}

    assert texts["cfg:1:sz:1"].startswith("✅")
    assert not texts["cfg:1:sz:0"].startswith("✅")
    assert texts["cfg:1:po:1"].startswith("✅")
    assert texts["cfg:1:en:1"].startswith("✅")
    assert "cfg:1:add" in texts


def test_option_index_maps_back_to_key(classic_product):
    assert CODE_CATEGORIES["ma"] == ModifierCategory.MATERIALS
    assert get_option_keys(classic_product, CODE_CATEGORIES["ma"])[2] == "marble"
    assert get_option_keys(classic_product, CODE_CATEGORIES["po"]) == ["mirror", "combined"]


def test_products_keyboard_has_quick_add(catalog_service):
    page = catalog_service.paginate(catalog_service.list_products(category_id=1), 1)
    data = callback_data(CatalogKeyboard.get_products_keyboard(page, "catalog:list:1"))
    assert "product:1" in data
    assert "quick:1" in data
    assert "catalog:list:1:2" in data


def test_cart_keyboard_addresses_items_by_key(classic_product):
    item = build_default_line_item(classic_product, quantity=2)
    assert f"cart:item:{item.key}" in callback_data(CartKeyboard.get_cart_keyboard([item]))
    item_data = callback_data(CartKeyboard.get_cart_item_keyboard(item))
    assert {f"cart:minus:{item.key}", f"cart:plus:{item.key}", f"cart:remove:{item.key}"} <= set(item_data)


def test_cart_key_does_not_depend_on_position(classic_product, bare_product):
    first = build_default_line_item(classic_product)
    second = build_line_item(classic_product, Selection(size="110x50x5"))
    third = build_default_line_item(bare_product)

    keys = {first.key, second.key, third.key}
    assert len(keys) == 3
    assert first.key == build_default_line_item(classic_product, quantity=5).key

    # Кнопка старого сообщения находит ту же позицию после удаления соседей
    data = callback_data(CartKeyboard.get_cart_keyboard([first, second, third]))
    later = callback_data(CartKeyboard.get_cart_keyboard([third]))
    assert f"cart:item:{third.key}" in data
    assert f"cart:item:{third.key}" in later


def test_parse_cart_key(classic_product):
    key = build_default_line_item(classic_product).key
    assert parse_cart_key(f"cart:plus:{key}") == key
    assert parse_cart_key("cart:plus:3") is None
    assert parse_cart_key("cart:plus:zzzzzzzzzzzz") is None
    assert parse_cart_key("cart:plus") is None
    assert parse_cart_key(f"cart:plus:{key}:extra") is None


def test_cart_summary(classic_product):
    assert "пуста" in format_cart_summary_text([], 0, 0)
    text = format_cart_summary_text([build_default_line_item(classic_product, quantity=2)], 2, 38000)
    assert "38 000 ₽" in text
    assert "Товаров: 2 шт." in text
    assert "Стандартная комплектация" in text


def test_products_list_escapes_search_query():
    page = CatalogPage(items=[], page=1, total_pages=1, total_count=0)
    text = format_products_list("Результаты поиска «<гранит & мрамор>»", page)
    assert "&lt;гранит &amp; мрамор&gt;" in text
    assert "<гранит" not in text
