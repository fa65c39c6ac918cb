from aiogram.fsm.state import State, StatesGroup
from aiogram.fsm.context import FSMContext
from typing import Optional

from ..models.cart import Selection


class SearchStates(StatesGroup):
    """Состояния поиска"""
    waiting_for_query = State()  # Ввод поискового запроса


class ListPosition:
    """Последняя открытая страница списка (категория или поиск) для FSM"""
    def __init__(
        self,
        category_id: int = 0,
        page: int = 1,
        query: Optional[str] = None
    ):
        self.category_id = category_id
        self.page = page
        self.query = query

    def to_dict(self) -> dict:
        return {"category_id": self.category_id, "page": self.page, "query": self.query}

    @classmethod
    def from_dict(cls, raw: Optional[dict]) -> "ListPosition":
        if not raw:
            return cls()
        return cls(
            category_id=raw.get("category_id") or 0,
            page=raw.get("page") or 1,
            query=raw.get("query"),
        )


async def save_list_position(state: FSMContext, position: ListPosition):
    await state.update_data(list_position=position.to_dict())


async def get_list_position(state: FSMContext) -> ListPosition:
    data = await state.get_data()
    return ListPosition.from_dict(data.get("list_position"))


async def save_selection(state: FSMContext, product_id: int, selection: Selection):
    """Сохранить выбор конфигуратора для открытого товара"""
    await state.update_data(configurator={"product_id": product_id, "selection": selection.to_dict()})


async def get_selection(state: FSMContext, product_id: int) -> Optional[Selection]:
    """Выбор конфигуратора, если он относится к этому товару"""
    data = await state.get_data()
    configurator = data.get("configurator") or {}
    if configurator.get("product_id") != product_id:
        return None
    return Selection.from_dict(configurator.get("selection"))
