# services/basket_store.py
import json
from typing import Callable, List, Optional

from pydantic import ValidationError

from cookwho.db.kv_store import KeyValueStore
from cookwho.models.basket import BasketItem, Notification
from cookwho.utils.logger import get_logger

logger = get_logger("Basket_Store")

DEFAULT_BASKET_KEY = "basket"


class BasketStore:
    """
    In-progress order for one client. Every mutation updates the items and
    writes the whole basket to storage before returning.

    Operations on an id that is not in the basket are silent no-ops.
    Keeping the basket to one restaurant is the caller's job
    (see basket_service.add_to_basket).
    """

    def __init__(self, storage: KeyValueStore, key: str = DEFAULT_BASKET_KEY,
                 notify: Optional[Callable[[Notification], None]] = None):
        self.storage = storage
        self.key = key
        self.notify = notify
        self._items: List[BasketItem] = self._load()

    def _load(self) -> List[BasketItem]:
        try:
            raw = self.storage.get(self.key)
            if not raw:
                return []
            return [BasketItem.model_validate(entry) for entry in json.loads(raw)]
        except (ValueError, TypeError, ValidationError) as e:
            logger.error(f"Failed to parse basket from storage key {self.key}: {e}")
            return []

    def _save(self):
        self.storage.set(self.key, json.dumps([item.model_dump() for item in self._items]))

    def _emit(self, title: str, description: str):
        if self.notify is not None:
            self.notify(Notification(title=title, description=description))

    def _find(self, item_id: str) -> Optional[BasketItem]:
        return next((i for i in self._items if i.id == item_id), None)

    @property
    def items(self) -> List[BasketItem]:
        return [item.model_copy() for item in self._items]

    @property
    def restaurant_id(self) -> Optional[str]:
        return self._items[0].restaurant_id if self._items else None

    @property
    def total_price(self) -> float:
        return sum(item.price * item.quantity for item in self._items)

    def __len__(self):
        return len(self._items)

    def add_item(self, item: BasketItem):
        existing = self._find(item.id)
        if existing:
            existing.quantity += 1
        else:
            self._items.append(item.model_copy(update={"quantity": 1}))
        self._save()
        logger.info(f"Item {item.id} added to basket {self.key}")
        self._emit("Item Added", f'"{item.name}" has been added to your basket.')

    def remove_item(self, item_id: str):
        if self._find(item_id) is None:
            return
        self._items = [i for i in self._items if i.id != item_id]
        self._save()
        self._emit("Item Removed", "The item has been removed from your basket.")

    def increment_quantity(self, item_id: str):
        item = self._find(item_id)
        if item is None:
            return
        item.quantity += 1
        self._save()

    def decrement_quantity(self, item_id: str):
        item = self._find(item_id)
        if item is None:
            return
        if item.quantity > 1:
            item.quantity -= 1
            self._save()
        else:
            self.remove_item(item_id)

    def clear_basket(self):
        self._items = []
        self._save()
        logger.info(f"Basket {self.key} cleared")
