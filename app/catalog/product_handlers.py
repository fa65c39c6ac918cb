from aiogram import Router, F
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, InputMediaPhoto
import logging

from ..core.constants import ModifierCategory
from ..models.catalog import Product
from ..models.cart import Selection
from ..services.catalog import CatalogService
from ..services.cart import CartService
from ..services.pricing import compute_price, get_discount_price
from ..services.line_item_builder import (
    default_selection,
    build_line_item,
    resolve_characteristics,
    describe_characteristics,
)
from .keyboards.catalog_kb import CatalogKeyboard
from .keyboards.configurator_kb import ConfiguratorKeyboard, CODE_CATEGORIES, get_option_keys
from .states import get_list_position, get_selection, save_selection
from .utils.product_formatters import format_product_card, format_success_add
from ..utils.message_editor import update_message, update_caption
from ..utils.callback_helpers import safe_callback_answer, parse_callback_int

logger = logging.getLogger(__name__)

router = Router(name="product_handlers")


async def build_card(
    product: Product,
    selection: Selection,
    catalog_service: CatalogService,
    state: FSMContext
):
    """Текст и клавиатура карточки товара для текущего выбора"""
    price = compute_price(product, selection)
    characteristics = resolve_characteristics(product, selection)
    text = format_product_card(
        product,
        category_name=catalog_service.get_category_name(product.category_id),
        price=price,
        discount_price=get_discount_price(product, price),
        configuration=describe_characteristics(characteristics)
    )

    # Соседние товары берутся из последнего открытого списка
    position = await get_list_position(state)
    products = catalog_service.list_products(category_id=position.category_id or None, query=position.query)
    prev_product, next_product = catalog_service.get_neighbours(product.id, products)

    keyboard = ConfiguratorKeyboard.get_configurator_keyboard(
        product,
        selection,
        prev_product_id=prev_product.id if prev_product else None,
        next_product_id=next_product.id if next_product else None
    )
    return text, keyboard


async def load_selection(product: Product, state: FSMContext) -> Selection:
    """Выбор из FSM для этого товара или выбор по умолчанию"""
    selection = await get_selection(state, product.id)
    if selection is None:
        selection = default_selection(product)
        await save_selection(state, product.id, selection)
    return selection


@router.callback_query(F.data.startswith("product:"))
async def show_product(callback: CallbackQuery, catalog_service: CatalogService, state: FSMContext):
    """Карточка товара с конфигуратором"""
    product_id = parse_callback_int(callback.data, 1)
    if product_id is None:
        await safe_callback_answer(callback, "❌ Неверный формат данных")
        return

    try:
        logger.info(f"User {callback.from_user.id} opening product {product_id}")

        product = catalog_service.get_product_or_placeholder(product_id)
        selection = await load_selection(product, state)
        text, keyboard = await build_card(product, selection, catalog_service, state)

        media = InputMediaPhoto(
            media=catalog_service.get_main_image_url(product),
            caption=text,
            parse_mode="HTML"
        )
        await update_message(callback, media=media, reply_markup=keyboard)
        await safe_callback_answer(callback)

    except Exception as e:
        logger.error(f"Error showing product {product_id} for user {callback.from_user.id}: {e}", exc_info=True)
        await safe_callback_answer(callback, "❌ Произошла ошибка при загрузке товара")


@router.callback_query(F.data.startswith("cfg:") & F.data.endswith(":add"))
async def add_configured_to_cart(
    callback: CallbackQuery,
    catalog_service: CatalogService,
    cart_service: CartService,
    state: FSMContext
):
    """Добавить настроенную конфигурацию в корзину"""
    product_id = parse_callback_int(callback.data, 1)
    if product_id is None:
        await safe_callback_answer(callback, "❌ Неверный формат данных")
        return

    try:
        product = catalog_service.get_product_or_placeholder(product_id)
        selection = await load_selection(product, state)

        line_item = build_line_item(product, selection, canonical_engravings=cart_service.canonical_engravings)
        await cart_service.add_item(line_item)
        logger.info(f"User {callback.from_user.id} added product {product_id} to cart, "
                    f"cart total: {cart_service.total_price}")

        text = format_success_add(line_item, 1)
        keyboard = CatalogKeyboard.get_success_add_keyboard(product_id)
        await update_message(callback, text=text, reply_markup=keyboard)
        await safe_callback_answer(callback, "✅ Товар добавлен в корзину!")

    except Exception as e:
        logger.error(f"Error adding product {product_id} to cart for user {callback.from_user.id}: {e}", exc_info=True)
        await safe_callback_answer(callback, "❌ Не удалось добавить товар в корзину")


@router.callback_query(F.data.startswith("cfg:"))
async def change_option(callback: CallbackQuery, catalog_service: CatalogService, state: FSMContext):
    """
    Изменить выбор в конфигураторе: cfg:{product_id}:{код категории}:{номер варианта}.
    Цена пересчитывается при каждом изменении.
    """
    try:
        _, product_id, code, index = callback.data.split(":")
        product_id, index = int(product_id), int(index)
        category = CODE_CATEGORIES[code]
    except (ValueError, KeyError):
        logger.error(f"Invalid callback data: {callback.data}")
        await safe_callback_answer(callback, "❌ Неверный формат данных")
        return

    try:
        product = catalog_service.get_product_or_placeholder(product_id)
        keys = get_option_keys(product, category)
        if not 0 <= index < len(keys):
            await safe_callback_answer(callback, "❌ Вариант больше недоступен")
            return
        key = keys[index]

        selection = await load_selection(product, state)
        if category == ModifierCategory.ENGRAVINGS:
            selection.toggle_engraving(key)
        elif selection.get(category) == key:
            await safe_callback_answer(callback)
            return
        else:
            selection.select(category, key)
        await save_selection(state, product.id, selection)

        text, keyboard = await build_card(product, selection, catalog_service, state)
        await update_caption(callback, text=text, reply_markup=keyboard)
        await safe_callback_answer(callback)

    except Exception as e:
        logger.error(f"Error changing option for user {callback.from_user.id}: {e}", exc_info=True)
        await safe_callback_answer(callback, "❌ Не удалось изменить параметры")


@router.callback_query(F.data.startswith("quick:"))
async def quick_add_to_cart(callback: CallbackQuery, catalog_service: CatalogService, cart_service: CartService):
    """Быстрое добавление из списка в стандартной комплектации"""
    product_id = parse_callback_int(callback.data, 1)
    if product_id is None:
        await safe_callback_answer(callback, "❌ Неверный формат данных")
        return

    try:
        product = catalog_service.get_product_or_placeholder(product_id)
        await cart_service.quick_add(product)
        logger.info(f"User {callback.from_user.id} quick-added product {product_id}, "
                    f"items in cart: {cart_service.total_items}")
        await safe_callback_answer(callback, f"✅ «{product.title}» добавлен в корзину")

    except Exception as e:
        logger.error(f"Error quick-adding product {product_id} for user {callback.from_user.id}: {e}", exc_info=True)
        await safe_callback_answer(callback, "❌ Не удалось добавить товар в корзину")
