from fastapi.concurrency import run_in_threadpool
from cookwho.core.exceptions import BasketConflictError
from cookwho.db.document_store import DocumentStore
from cookwho.db.documents import doc, menu_items_path, RESTAURANTS, USERS
from cookwho.models.basket import BasketItem
from cookwho.services.basket_store import BasketStore
from cookwho.utils.email import send_cook_alert
from cookwho.utils.logger import get_logger

logger = get_logger("Basket_Service")

async def build_basket_item(store: DocumentStore, restaurant_id: str, item_id: str) -> BasketItem:
    """Snapshot a cook's menu item as a basket line. Raises ValueError if either record is missing."""
    restaurant = await store.get_document(doc(RESTAURANTS, restaurant_id))
    if restaurant is None:
        raise ValueError("Restaurant not found")
    menu_item = await store.get_document(doc(menu_items_path(restaurant_id), item_id))
    if menu_item is None:
        raise ValueError("Menu item not found")
    return BasketItem(
        id=menu_item["id"],
        name=menu_item["name"],
        price=menu_item["price"],
        quantity=1,
        restaurant_id=restaurant["id"],
        restaurant_name=restaurant["name"],
        image_urls=menu_item.get("image_urls") or [],
        description=menu_item.get("description"),
        master_category_id=menu_item.get("master_category_id"),
        tags=menu_item.get("tags") or [],
    )

def add_to_basket(basket: BasketStore, item: BasketItem, confirm_clear: bool = False):
    """
    Adds item, keeping the basket to a single restaurant. When the basket holds
    another restaurant's items, nothing changes unless confirm_clear is set, in
    which case the basket is cleared first.
    """
    current = basket.restaurant_id
    if current is not None and current != item.restaurant_id:
        if not confirm_clear:
            logger.info(f"Basket conflict: {current} vs {item.restaurant_id}, confirmation required")
            raise BasketConflictError(current, item.restaurant_id)
        basket.clear_basket()
    basket.add_item(item)

async def alert_cook(store: DocumentStore, cook_id: str, item_name: str) -> dict:
    """Best effort email to the cook; failures are logged, never raised."""
    cook = await store.get_document(doc(USERS, cook_id))
    if not cook or not cook.get("email"):
        logger.warning(f"No cook email for {cook_id}, skipping alert")
        return {"success": False, "message": "Cook has no email address"}
    result = await run_in_threadpool(send_cook_alert, cook["email"], item_name, cook.get("display_name"))
    if result["success"]:
        logger.info(f"Cook alert sent successfully: {result['message']}")
    else:
        logger.error(f"Failed to send cook alert: {result['message']}")
    return result
