import json
import random

import pytest

from conftest import make_item
from cookwho.db.kv_store import MemoryKeyValueStore
from cookwho.services.basket_store import BasketStore


@pytest.fixture
def notes():
    return []


@pytest.fixture
def basket(kv, notes):
    return BasketStore(kv, notify=notes.append)


def test_add_new_item_forces_quantity_one(basket, notes):
    basket.add_item(make_item("a", quantity=4))

    assert [(i.id, i.quantity) for i in basket.items] == [("a", 1)]
    assert notes[-1].title == "Item Added"
    assert notes[-1].description == '"Dish a" has been added to your basket.'


def test_adding_same_item_twice_increments(basket):
    basket.add_item(make_item("a"))
    basket.add_item(make_item("a"))

    assert len(basket.items) == 1
    assert basket.items[0].quantity == 2


def test_remove_absent_item_is_silent(basket, notes, kv):
    basket.add_item(make_item("a"))
    notes.clear()
    before = kv.get("basket")

    basket.remove_item("missing")

    assert notes == []
    assert kv.get("basket") == before
    assert [i.id for i in basket.items] == ["a"]


def test_remove_item_notifies(basket, notes):
    basket.add_item(make_item("a"))
    basket.remove_item("a")

    assert basket.items == []
    assert notes[-1].title == "Item Removed"


def test_decrement_from_one_removes_with_notification(basket, notes):
    basket.add_item(make_item("a"))
    notes.clear()

    basket.decrement_quantity("a")

    assert basket.items == []
    assert [n.title for n in notes] == ["Item Removed"]


def test_decrement_above_one(basket, notes):
    basket.add_item(make_item("a"))
    basket.increment_quantity("a")
    basket.increment_quantity("a")
    notes.clear()

    basket.decrement_quantity("a")

    assert basket.items[0].quantity == 2
    assert notes == []


def test_decrement_and_increment_absent_are_noops(basket):
    basket.add_item(make_item("a"))
    snapshot = basket.items

    basket.decrement_quantity("nope")
    basket.increment_quantity("nope")

    assert basket.items == snapshot


def test_clear_basket(basket, kv):
    basket.add_item(make_item("a"))
    basket.add_item(make_item("b"))

    basket.clear_basket()

    assert basket.items == []
    assert json.loads(kv.get("basket")) == []


def test_total_price_tracks_every_mutation(basket):
    basket.add_item(make_item("a", price=2.5))
    assert basket.total_price == pytest.approx(2.5)
    basket.add_item(make_item("b", price=4.0))
    basket.increment_quantity("b")
    assert basket.total_price == pytest.approx(10.5)
    basket.decrement_quantity("a")
    assert basket.total_price == pytest.approx(8.0)
    basket.clear_basket()
    assert basket.total_price == 0


def test_random_operation_sequences_keep_invariants(kv):
    rng = random.Random(1234)
    basket = BasketStore(kv)
    ids = ["a", "b", "c", "d"]
    prices = {"a": 1.1, "b": 2.25, "c": 9.99, "d": 0.5}
    for _ in range(500):
        op = rng.choice(["add", "inc", "dec", "remove"])
        item_id = rng.choice(ids)
        if op == "add":
            basket.add_item(make_item(item_id, price=prices[item_id]))
        elif op == "inc":
            basket.increment_quantity(item_id)
        elif op == "dec":
            basket.decrement_quantity(item_id)
        else:
            basket.remove_item(item_id)

        items = basket.items
        assert all(i.quantity >= 1 for i in items)
        assert len({i.id for i in items}) == len(items)
        assert basket.total_price == pytest.approx(sum(i.price * i.quantity for i in items))


def test_persist_and_reload_round_trip(kv):
    basket = BasketStore(kv)
    basket.add_item(make_item("a", price=3.75, image_urls=["x.jpg"], tags=["vegan"]))
    basket.add_item(make_item("b", price=1.0))
    basket.increment_quantity("b")
    original = basket.items

    reloaded = BasketStore(kv)

    assert reloaded.items == original


def test_load_falls_back_to_empty_on_bad_data():
    assert BasketStore(MemoryKeyValueStore({"basket": "{not json"})).items == []
    assert BasketStore(MemoryKeyValueStore({"basket": '[{"id": "a"}]'})).items == []
    assert BasketStore(MemoryKeyValueStore({"basket": "42"})).items == []
    assert BasketStore(MemoryKeyValueStore()).items == []


def test_separate_keys_are_separate_baskets(kv):
    first = BasketStore(kv, key="basket:one")
    second = BasketStore(kv, key="basket:two")
    first.add_item(make_item("a"))

    assert BasketStore(kv, key="basket:two").items == []
    assert second.items == []
    assert [i.id for i in BasketStore(kv, key="basket:one").items] == ["a"]
