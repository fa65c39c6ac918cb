"""
Константы конфигуратора памятников
"""

class ModifierCategory:
    """Категории модификаторов цены"""

    SIZES = "sizes"                  # Размер стелы
    BASE_SIZES = "base_sizes"        # Размер подставки
    FLOWER_SIZES = "flower_sizes"    # Размер цветника
    POLISH_TYPES = "polish_types"    # Тип полировки
    MATERIALS = "materials"          # Материал
    ENGRAVINGS = "engravings"        # Гравировка (множественный выбор)

    @classmethod
    def get_label(cls, category: str) -> str:
        """Получить человекочитаемое название категории"""
        labels = {
            cls.SIZES: "Размер стелы",
            cls.BASE_SIZES: "Размер подставки",
            cls.FLOWER_SIZES: "Размер цветника",
            cls.POLISH_TYPES: "Полировка",
            cls.MATERIALS: "Материал",
            cls.ENGRAVINGS: "Гравировка",
        }
        return labels.get(category, category)

    @classmethod
    def get_all(cls) -> list:
        """Все категории в фиксированном порядке (порядок идентификатора позиции)"""
        return [
            cls.SIZES,
            cls.BASE_SIZES,
            cls.FLOWER_SIZES,
            cls.POLISH_TYPES,
            cls.MATERIALS,
            cls.ENGRAVINGS,
        ]

    @classmethod
    def get_additive(cls) -> list:
        """Одиночные категории, чья надбавка прибавляется к цене"""
        return [cls.SIZES, cls.BASE_SIZES, cls.FLOWER_SIZES, cls.MATERIALS]

    @classmethod
    def is_valid(cls, category: str) -> bool:
        return category in cls.get_all()


class PolishType:
    """Типы полировки"""

    MIRROR = "mirror"
    COMBINED = "combined"  # +15% к полной цене


class Material:
    BLACK_GRANITE = "black_granite"
    GRAY_GRANITE = "gray_granite"
    MARBLE = "marble"


# Надбавка за комбинированную полировку, применяется после всех слагаемых
COMBINED_POLISH_MULTIPLIER = "1.15"

# Варианты полировки, которые показываются, если у товара нет своей таблицы
STANDARD_POLISH_TYPES = {
    PolishType.MIRROR: {"price": 0, "name": "Зеркальная (Стандарт)"},
    PolishType.COMBINED: {"price": 0, "name": "Комбинированная (+15% к цене)"},
}

# Названия стандартных вариантов, если в таблице товара их нет
STANDARD_DISPLAY_NAMES = {
    ModifierCategory.POLISH_TYPES: {
        PolishType.MIRROR: "Зеркальная",
        PolishType.COMBINED: "Комбинированная",
    },
    ModifierCategory.MATERIALS: {
        Material.BLACK_GRANITE: "Гранит черный",
        Material.GRAY_GRANITE: "Гранит серый",
        Material.MARBLE: "Мрамор",
    },
    ModifierCategory.ENGRAVINGS: {
        "text": "Текст",
        "portrait": "Портрет",
        "ornament": "Орнамент",
    },
}

# Разделитель частей идентификатора позиции корзины
IDENTITY_SEPARATOR = "-"
DEFAULT_IDENTITY_SUFFIX = "default"

# Стандартная комплектация для быстрого добавления из каталога
QUICK_ADD_CHARACTERISTICS = {
    "size": "100x50x5",
    "base_size": "60x15x15",
    "flower_size": "100x50",
    "polish_type": "Зеркальная",
    "material": "Гранит черный",
}
QUICK_ADD_DESCRIPTION = "Стандартная комплектация"

PLACEHOLDER_IMAGE_URL = "https://img.heroui.chat/image/places?w=500&h=800&u={seed}"
CURRENCY_SIGN = "₽"
