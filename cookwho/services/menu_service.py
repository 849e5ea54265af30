from typing import List, Optional

from cookwho.db.document_store import DocumentStore
from cookwho.db.documents import collection, doc, menu_items_path, MASTER_MENU_CATEGORIES, RESTAURANTS
from cookwho.db.mutations import CollectionMutations
from cookwho.models.menu import MasterMenuCategoryCreate, MenuItemCreate, MenuItemUpdate
from cookwho.utils.logger import get_logger

logger = get_logger("Menu_Service")

# master menu categories

async def list_categories(store: DocumentStore, cuisine: Optional[str] = None) -> List[dict]:
    query = collection(MASTER_MENU_CATEGORIES)
    if cuisine:
        query = query.where("cuisine", cuisine)
    return await store.get_documents(query.order("name"))

async def create_category(store: DocumentStore, payload: MasterMenuCategoryCreate, actor_email: str = None) -> dict:
    existing = await store.exists(
        collection(MASTER_MENU_CATEGORIES).where("cuisine", payload.cuisine).where("name", payload.name)
    )
    if existing:
        raise ValueError("Category with same name already exists for this cuisine")
    data = payload.model_dump()
    ref = await CollectionMutations(store, MASTER_MENU_CATEGORIES).add_document(data)
    logger.info("Master menu category created", extra={"actor": actor_email, "category_id": ref.id})
    return {**data, "id": ref.id}

async def delete_category(store: DocumentStore, category_id: str, actor_email: str = None):
    if await store.get_document(doc(MASTER_MENU_CATEGORIES, category_id)) is None:
        raise ValueError("Category not found")
    await CollectionMutations(store, MASTER_MENU_CATEGORIES).delete_document(category_id)
    logger.info("Master menu category deleted", extra={"actor": actor_email, "category_id": category_id})
    return {"message": "deleted", "category_id": category_id}

# cook menu items, stored under restaurants/{restaurant_id}/menuItems

async def list_menu_items(store: DocumentStore, restaurant_id: str, category_id: Optional[str] = None) -> List[dict]:
    query = collection(menu_items_path(restaurant_id))
    if category_id:
        query = query.where("master_category_id", category_id)
    return await store.get_documents(query.order("name"))

async def get_menu_item(store: DocumentStore, restaurant_id: str, item_id: str) -> Optional[dict]:
    return await store.get_document(doc(menu_items_path(restaurant_id), item_id))

async def create_menu_item(store: DocumentStore, restaurant_id: str, payload: MenuItemCreate, actor_email: str = None) -> dict:
    """
    A cook's dish is an instance of a master category with its own price,
    description and images.
    """
    if await store.get_document(doc(RESTAURANTS, restaurant_id)) is None:
        raise ValueError("Set up your restaurant before adding menu items")
    category = await store.get_document(doc(MASTER_MENU_CATEGORIES, payload.master_category_id))
    if category is None:
        raise ValueError("Invalid master menu category")

    data = payload.model_dump()
    data["name"] = payload.name or category["name"]
    data["price"] = round(float(payload.price), 2)
    ref = await CollectionMutations(store, menu_items_path(restaurant_id)).add_document(data)
    logger.info("Menu item created", extra={"restaurant_id": restaurant_id, "actor": actor_email, "item_id": ref.id})
    return {**data, "id": ref.id}

async def update_menu_item(store: DocumentStore, restaurant_id: str, item_id: str, payload: MenuItemUpdate, actor_email: str = None) -> dict:
    update_doc = {k: v for k, v in payload.model_dump().items() if v is not None}
    if "price" in update_doc:
        update_doc["price"] = round(float(update_doc["price"]), 2)
    if await get_menu_item(store, restaurant_id, item_id) is None:
        raise ValueError("Menu item not found")
    await CollectionMutations(store, menu_items_path(restaurant_id)).update_document(item_id, update_doc)
    logger.info("Menu item updated", extra={"actor": actor_email, "item_id": item_id})
    return await get_menu_item(store, restaurant_id, item_id)

async def delete_menu_item(store: DocumentStore, restaurant_id: str, item_id: str, actor_email: str = None):
    if await get_menu_item(store, restaurant_id, item_id) is None:
        raise ValueError("Menu item not found")
    await CollectionMutations(store, menu_items_path(restaurant_id)).delete_document(item_id)
    logger.info("Menu item deleted", extra={"actor": actor_email, "item_id": item_id})
    return {"message": "deleted", "item_id": item_id}
