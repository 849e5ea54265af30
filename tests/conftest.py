import asyncio
import os

os.environ.setdefault("DOCUMENT_STORE", "memory")
os.environ.setdefault("BASKET_BACKEND", "memory")

import pytest
from fastapi.testclient import TestClient

from cookwho.core.dependencies import get_kv, get_store
from cookwho.db.documents import doc, menu_items_path, MASTER_MENU_CATEGORIES, RESTAURANTS, USERS
from cookwho.db.kv_store import MemoryKeyValueStore
from cookwho.db.memory_store import InMemoryDocumentStore
from cookwho.main import app
from cookwho.models.basket import BasketItem
from cookwho.utils.jwt_handler import create_access_token

# London, and cooks roughly 3 km and 20 km north of it (1 degree of latitude ~ 111.2 km)
HOME = {"latitude": 51.5, "longitude": -0.1}
NEAR_LAT = 51.5 + 3 / 111.195
FAR_LAT = 51.5 + 20 / 111.195


def run(coro):
    return asyncio.run(coro)


def make_item(item_id="dish-1", price=5.5, restaurant_id="cook-a", **extra) -> BasketItem:
    data = {
        "id": item_id,
        "name": f"Dish {item_id}",
        "price": price,
        "quantity": 1,
        "restaurant_id": restaurant_id,
        "restaurant_name": f"Kitchen {restaurant_id}",
        "image_urls": [],
    }
    data.update(extra)
    return BasketItem(**data)


async def seed_marketplace(store: InMemoryDocumentStore):
    """
    cook-a: available, ~3 km, serves breakfast
    cook-b: unavailable, same spot as HOME
    cook-c: available, ~20 km, serves curry
    """
    await store.set_document(doc(MASTER_MENU_CATEGORIES, "cat-breakfast"), {"name": "Full Breakfast", "cuisine": "English"})
    await store.set_document(doc(MASTER_MENU_CATEGORIES, "cat-curry"), {"name": "Chicken Curry", "cuisine": "Indian"})
    cooks = [
        ("cook-a", "Alice's Kitchen", NEAR_LAT, True),
        ("cook-b", "Bob's Kitchen", 51.5, False),
        ("cook-c", "Chandra's Kitchen", FAR_LAT, True),
    ]
    for cook_id, name, lat, available in cooks:
        await store.set_document(doc(USERS, cook_id), {
            "username": cook_id.replace("-", "_"),
            "display_name": name,
            "email": f"{cook_id}@example.com",
            "is_cook": True,
            "is_admin": False,
        })
        await store.set_document(doc(RESTAURANTS, cook_id), {
            "user_id": cook_id,
            "name": name,
            "latitude": lat,
            "longitude": -0.1,
            "is_available": available,
        })
    await store.set_document(doc(menu_items_path("cook-a"), "breakfast-a"), {
        "master_category_id": "cat-breakfast", "name": "Full Breakfast", "description": "Eggs, bacon, beans",
        "price": 8.5, "tags": [], "image_urls": ["https://img.example/breakfast.jpg"],
    })
    await store.set_document(doc(menu_items_path("cook-a"), "toast-a"), {
        "master_category_id": "cat-toast", "name": "Toast", "description": "", "price": 1.25,
    })
    await store.set_document(doc(menu_items_path("cook-c"), "curry-c"), {
        "master_category_id": "cat-curry", "name": "Chicken Curry", "description": "Medium", "price": 9.99,
    })


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def seeded_store(store):
    run(seed_marketplace(store))
    return store


@pytest.fixture
def kv():
    return MemoryKeyValueStore()


@pytest.fixture
def client(seeded_store, kv):
    app.dependency_overrides[get_store] = lambda: seeded_store
    app.dependency_overrides[get_kv] = lambda: kv
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_headers(user_id: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'id': user_id, 'sub': user_id})}"}


@pytest.fixture
def customer(seeded_store):
    run(seeded_store.set_document(doc(USERS, "customer-1"), {
        "username": "hungry", "display_name": "Hungry Customer", "email": "hungry@example.com",
        "is_cook": False, "is_admin": False,
    }))
    return auth_headers("customer-1")


@pytest.fixture
def admin(seeded_store):
    run(seeded_store.set_document(doc(USERS, "admin-1"), {
        "username": "admin", "display_name": "Admin", "email": "admin@example.com",
        "is_cook": False, "is_admin": True,
    }))
    return auth_headers("admin-1")
