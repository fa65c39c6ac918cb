import pytest

from app.core.constants import ModifierCategory, STANDARD_DISPLAY_NAMES
from app.models.cart import Selection
from app.services.line_item_builder import (
    build_configuration_identity,
    build_default_line_item,
    build_line_item,
    default_selection,
    get_option_table,
    resolve_display_name,
)


def test_default_selection_takes_first_options(classic_product):
    selection = default_selection(classic_product)
    assert selection.size == "90x45x5"
    assert selection.base_size == "50x15x15"
    assert selection.flower_size == "90x45"
    assert selection.polish_type == "mirror"
    assert selection.material == "black_granite"
    assert selection.engravings == []


def test_default_selection_without_tables(bare_product):
    selection = default_selection(bare_product)
    assert selection.size is None
    assert selection.base_size is None
    assert selection.polish_type == "mirror"
    assert selection.material == "black_granite"


def test_identity_format(classic_product, bare_product):
    assert build_configuration_identity(
        classic_product.id, default_selection(classic_product)
    ) == "1-90x45x5-50x15x15-90x45-mirror-black_granite-"
    assert build_configuration_identity(
        bare_product.id, default_selection(bare_product)
    ) == "5----mirror-black_granite-"


def test_identity_is_deterministic(classic_product):
    first = Selection(size="110x50x5", material="marble", engravings=["text"])
    second = Selection(size="110x50x5", material="marble", engravings=["text"])
    assert build_configuration_identity(1, first) == build_configuration_identity(1, second)


@pytest.mark.parametrize("field_name, value", [
    ("size", "130x60x5"),
    ("base_size", "60x20x15"),
    ("flower_size", "100x50"),
    ("polish_type", "combined"),
    ("material", "gray_granite"),
    ("engravings", ["portrait"]),
])
def test_identity_differs_per_option(field_name, value):
    base = Selection(size="110x50x5", base_size="50x15x15", flower_size="90x45", material="marble")
    other = Selection(**dict(base.to_dict(), **{field_name: value}))
    assert build_configuration_identity(1, base) != build_configuration_identity(1, other)


def test_identity_differs_per_product():
    selection = Selection(size="110x50x5", material="marble")
    assert build_configuration_identity(1, selection) != build_configuration_identity(2, selection)


def test_engraving_order_matters_by_default():
    first = Selection(engravings=["text", "portrait"])
    second = Selection(engravings=["portrait", "text"])
    assert build_configuration_identity(1, first) != build_configuration_identity(1, second)


def test_canonical_engraving_order():
    first = Selection(engravings=["text", "portrait"])
    second = Selection(engravings=["portrait", "text"])
    identity = build_configuration_identity(1, first, canonical_engravings=True)
    assert identity == build_configuration_identity(1, second, canonical_engravings=True)
    assert identity.endswith("-portrait-text")


def test_resolve_display_name(classic_product):
    table = classic_product.get_modifier_table(ModifierCategory.MATERIALS)
    fallback = STANDARD_DISPLAY_NAMES[ModifierCategory.MATERIALS]
    assert resolve_display_name(table, "marble", fallback) == "Мрамор"
    assert resolve_display_name({}, "gray_granite", fallback) == "Гранит серый"
    assert resolve_display_name(table, "onyx", fallback) == "onyx"
    assert resolve_display_name(table, None, fallback) is None


def test_polish_options_fall_back_to_standard(classic_product):
    table = get_option_table(classic_product, ModifierCategory.POLISH_TYPES)
    assert list(table) == ["mirror", "combined"]
    assert get_option_table(classic_product, ModifierCategory.SIZES) == \
        classic_product.get_modifier_table(ModifierCategory.SIZES)


def test_build_line_item(classic_product):
    selection = Selection(
        size="110x50x5",
        base_size="50x15x15",
        flower_size="90x45",
        polish_type="combined",
        material="gray_granite",
        engravings=["text"],
    )
    item = build_line_item(classic_product, selection, quantity=2)

    assert item.identity == "1-110x50x5-50x15x15-90x45-combined-gray_granite-text"
    assert item.product_id == 1
    # (19000 + 2500 + 2500 + 1700) * 1.15
    assert item.unit_price == 29555
    assert item.quantity == 2
    assert item.total_price == item.unit_price * 2
    assert item.article_code == "001"
    assert item.image == "/images/0000.png"
    assert item.resolved_characteristics.polish_type == "Комбинированная"
    assert item.resolved_characteristics.engravings == ("Текст",)
    assert item.resolved_description == (
        "Размер стелы: 110x50x5 см (+2500 ₽), "
        "Размер подставки: 50x15x15 см (Стандарт), "
        "Размер цветника: 90x45 см (Стандарт), "
        "Полировка: Комбинированная, "
        "Материал: Гранит серый, "
        "Гравировка: Текст"
    )


def test_description_skips_unset_categories(bare_product):
    item = build_line_item(bare_product, default_selection(bare_product))
    assert item.resolved_description == "Полировка: Зеркальная, Материал: Гранит черный"
    assert item.image.startswith("https://")


def test_build_line_item_rejects_zero_quantity(classic_product):
    with pytest.raises(ValueError):
        build_line_item(classic_product, default_selection(classic_product), quantity=0)


def test_default_line_item(classic_product):
    item = build_default_line_item(classic_product)
    assert item.identity == "1-default"
    assert item.unit_price == 19000
    assert item.quantity == 1
    assert item.resolved_description == "Стандартная комплектация"
    assert item.resolved_characteristics.size == "100x50x5"
    assert item.resolved_characteristics.material == "Гранит черный"
    assert item.resolved_characteristics.engravings == ()
