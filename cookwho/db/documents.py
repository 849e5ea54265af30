# db/documents.py
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Tuple

from bson import ObjectId

# collection paths
USERS = "users"
RESTAURANTS = "restaurants"
MASTER_MENU_CATEGORIES = "masterMenuCategories"
ORDERS = "orders"
MENU_ITEMS = "menuItems"

def menu_items_path(restaurant_id: str) -> str:
    return f"{RESTAURANTS}/{restaurant_id}/{MENU_ITEMS}"

def new_document_id() -> str:
    return str(ObjectId())


@dataclass(frozen=True)
class DocumentRef:
    """Address of one document: collection path plus id."""
    path: str
    id: str

    def __post_init__(self):
        if not self.id:
            raise ValueError("Document id is required")
        if len(self.path.split("/")) % 2 == 0:
            raise ValueError(f"Not a collection path: {self.path}")


@dataclass(frozen=True)
class Query:
    """
    Equality filters over one collection path, with optional ordering and limit.
    Instances are immutable; where/order/limit return new queries.
    """
    path: str
    filters: Tuple[Tuple[str, Any], ...] = field(default_factory=tuple)
    order_by: Optional[str] = None
    descending: bool = False
    limit: Optional[int] = None

    def where(self, field_name: str, value: Any) -> "Query":
        return Query(self.path, self.filters + ((field_name, value),), self.order_by, self.descending, self.limit)

    def order(self, field_name: str, descending: bool = False) -> "Query":
        return Query(self.path, self.filters, field_name, descending, self.limit)

    def take(self, limit: int) -> "Query":
        return Query(self.path, self.filters, self.order_by, self.descending, limit)

    def matches(self, record: dict) -> bool:
        return all(record.get(name) == value for name, value in self.filters)


def doc(path: str, document_id: str) -> DocumentRef:
    return DocumentRef(path, document_id)

def collection(path: str) -> Query:
    return Query(path)


class Subscription:
    """
    Handle for a live listener. unsubscribe() releases it and is safe to call twice.
    """

    def __init__(self, release: Callable[[], Any]):
        self._release = release
        self.active = True

    def unsubscribe(self):
        if not self.active:
            return
        self.active = False
        self._release()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.unsubscribe()
        return False
