from dataclasses import FrozenInstanceError
import json

import pytest

from app.models.cart import CartLineItem, Selection
from app.repositories.cart_repository import CartStorage, InMemoryCartStorage
from app.services.cart import CartService
from app.services.line_item_builder import build_line_item


def make_item(identity="1-a", unit_price=100, quantity=1, title="Памятник"):
    return CartLineItem(
        identity=identity,
        product_id=1,
        title=title,
        unit_price=unit_price,
        image="/images/0000.png",
        quantity=quantity,
        article_code="001",
        resolved_description="Материал: Гранит черный",
    )


class FailingStorage(CartStorage):
    async def load(self):
        raise RuntimeError("storage is down")

    async def save(self, snapshot):
        raise RuntimeError("storage is down")


class FailingLoadStorage(CartStorage):
    """Чтение падает, запись уходит в рабочее хранилище"""

    def __init__(self, target):
        self.target = target

    async def load(self):
        raise RuntimeError("storage is down")

    async def save(self, snapshot):
        await self.target.save(snapshot)


@pytest.mark.asyncio
async def test_same_identity_merges(storage):
    cart = await CartService.load(storage)
    await cart.add_item(make_item(quantity=1))
    await cart.add_item(make_item(quantity=2))

    assert len(cart.items) == 1
    assert cart.items[0].quantity == 3
    assert cart.total_items == 3
    assert cart.total_price == 300


@pytest.mark.asyncio
async def test_first_snapshot_wins(storage):
    cart = await CartService.load(storage)
    await cart.add_item(make_item(unit_price=100, title="Первый"))
    await cart.add_item(make_item(unit_price=999, title="Второй"))

    item = cart.get_item("1-a")
    assert item.unit_price == 100
    assert item.title == "Первый"
    assert item.quantity == 2


@pytest.mark.asyncio
async def test_insertion_order_is_kept(storage):
    cart = await CartService.load(storage)
    await cart.add_item(make_item("1-b"))
    await cart.add_item(make_item("1-a"))
    await cart.add_item(make_item("1-b"))

    assert [item.identity for item in cart.items] == ["1-b", "1-a"]
    assert cart.index_of("1-a") == 1
    assert cart.get_item_by_key(cart.items[1].key).identity == "1-a"
    assert cart.get_item_by_key("000000000000") is None


@pytest.mark.asyncio
async def test_non_positive_add_is_ignored(storage):
    cart = await CartService.load(storage)
    await cart.add_item(make_item(quantity=0))

    assert cart.is_empty
    assert storage.saves == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("quantity", [0, -3])
async def test_quantity_floor_removes_entry(storage, quantity):
    cart = await CartService.load(storage)
    await cart.add_item(make_item("1-a", unit_price=100, quantity=2))
    await cart.add_item(make_item("1-b", unit_price=50, quantity=1))

    await cart.update_quantity("1-a", quantity)

    assert [item.identity for item in cart.items] == ["1-b"]
    assert cart.total_items == 1
    assert cart.total_price == 50


@pytest.mark.asyncio
async def test_update_quantity_sets_exact_value(storage):
    cart = await CartService.load(storage)
    await cart.add_item(make_item(quantity=2))
    await cart.update_quantity("1-a", 5)

    assert cart.get_item("1-a").quantity == 5
    assert cart.total_price == 500


@pytest.mark.asyncio
async def test_remove_missing_is_noop(storage):
    cart = await CartService.load(storage)
    await cart.add_item(make_item())
    await cart.remove_item("no-such-item")

    assert len(cart.items) == 1
    assert storage.saves == 2


@pytest.mark.asyncio
async def test_clear_cart(storage):
    cart = await CartService.load(storage)
    await cart.add_item(make_item("1-a"))
    await cart.add_item(make_item("1-b"))
    await cart.clear_cart()

    assert cart.is_empty
    assert cart.total_price == 0
    assert json.loads(storage.snapshot) == []


@pytest.mark.asyncio
async def test_every_mutation_is_persisted(storage):
    cart = await CartService.load(storage)
    await cart.add_item(make_item("1-a"))
    await cart.add_item(make_item("1-b"))
    await cart.update_quantity("1-a", 3)
    await cart.remove_item("1-b")

    assert storage.saves == 4
    assert storage.snapshot == cart.serialize()


@pytest.mark.asyncio
async def test_snapshot_uses_camel_case(storage, classic_product):
    cart = await CartService.load(storage)
    await cart.add_to_cart(classic_product, Selection(size="110x50x5", engravings=["text"]))

    record = json.loads(storage.snapshot)[0]
    assert set(record) == {
        "identity", "productId", "title", "unitPrice", "image",
        "quantity", "articleCode", "resolvedDescription", "resolvedCharacteristics",
    }
    assert record["resolvedCharacteristics"]["size"] == "110x50x5 см (+2500 ₽)"
    assert record["resolvedCharacteristics"]["engravings"] == ["Текст"]
    assert "baseSize" not in record["resolvedCharacteristics"]


@pytest.mark.asyncio
async def test_round_trip(storage, classic_product, bare_product):
    cart = await CartService.load(storage)
    await cart.add_to_cart(classic_product, Selection(size="130x60x5", polish_type="combined"), quantity=2)
    await cart.quick_add(bare_product)

    restored = await CartService.load(InMemoryCartStorage(storage.snapshot))

    assert [item.to_dict() for item in restored.items] == [item.to_dict() for item in cart.items]
    assert restored.total_items == cart.total_items
    assert restored.total_price == cart.total_price


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [None, "", "not json", "{\"identity\": \"1-a\"}", "42"])
async def test_missing_or_corrupt_snapshot_gives_empty_cart(payload):
    cart = await CartService.load(InMemoryCartStorage(payload))
    assert cart.is_empty
    assert cart.total_price == 0


@pytest.mark.asyncio
async def test_malformed_records_are_skipped():
    records = [
        make_item("1-a", quantity=1).to_dict(),
        {"identity": "1-b", "quantity": 1},
        dict(make_item("1-c").to_dict(), quantity=0),
        dict(make_item("1-d").to_dict(), quantity="two"),
        "garbage",
        make_item("1-a", quantity=2).to_dict(),
    ]
    cart = await CartService.load(InMemoryCartStorage(json.dumps(records)))

    assert [item.identity for item in cart.items] == ["1-a"]
    assert cart.items[0].quantity == 3


@pytest.mark.asyncio
async def test_storage_failure_on_load_keeps_saved_snapshot():
    saved = InMemoryCartStorage(json.dumps([make_item("1-a", quantity=2).to_dict()]))
    broken = FailingLoadStorage(saved)

    with pytest.raises(RuntimeError):
        await CartService.load(broken)

    assert broken.target.saves == 0
    restored = await CartService.load(saved)
    assert restored.get_item("1-a").quantity == 2


@pytest.mark.asyncio
async def test_storage_failure_on_save_propagates():
    cart = CartService(FailingStorage())
    with pytest.raises(RuntimeError):
        await cart.add_item(make_item())


@pytest.mark.asyncio
async def test_quick_add_is_idempotent(storage, classic_product):
    cart = await CartService.load(storage)
    await cart.quick_add(classic_product)
    await cart.quick_add(classic_product)

    assert len(cart.items) == 1
    item = cart.items[0]
    assert item.identity == "1-default"
    assert item.quantity == 2
    assert item.unit_price == 19000
    assert cart.total_price == 38000


@pytest.mark.asyncio
async def test_quick_add_does_not_merge_with_configured(storage, classic_product):
    cart = await CartService.load(storage)
    await cart.quick_add(classic_product)
    await cart.add_item(build_line_item(classic_product, Selection(size="90x45x5")))

    assert len(cart.items) == 2


@pytest.mark.asyncio
async def test_canonical_engravings_merge(storage, classic_product):
    cart = await CartService.load(storage, canonical_engravings=True)
    await cart.add_to_cart(classic_product, Selection(engravings=["text", "portrait"]))
    await cart.add_to_cart(classic_product, Selection(engravings=["portrait", "text"]))

    assert len(cart.items) == 1
    assert cart.items[0].quantity == 2


@pytest.mark.asyncio
async def test_same_object_added_repeatedly(storage):
    cart = await CartService.load(storage)
    item = make_item(quantity=1)
    for _ in range(3):
        await cart.add_item(item)

    assert cart.get_item("1-a").quantity == 3
    assert item.quantity == 1
    assert json.loads(storage.snapshot)[0]["quantity"] == 3


@pytest.mark.asyncio
async def test_entries_cannot_be_changed_from_outside(storage):
    cart = await CartService.load(storage)
    await cart.add_item(make_item(quantity=2))

    with pytest.raises(FrozenInstanceError):
        cart.items[0].quantity = 0

    saved = cart.get_item("1-a")
    await cart.update_quantity("1-a", 4)
    assert saved.quantity == 2
    assert cart.get_item("1-a").quantity == 4
