from aiogram import Router
from .navigation_handlers import router as navigation_router
from .product_handlers import router as product_router
from .search_handlers import router as search_router
from .cart import router as cart_router

router = Router(name="catalog")

# Подключаем все роутеры каталога

router.include_router(navigation_router)
router.include_router(product_router)
router.include_router(search_router)
router.include_router(cart_router)
