# db/bindings.py
from typing import Any, Callable, Generic, List, Optional, TypeVar

from cookwho.db.document_store import DocumentStore
from cookwho.db.documents import DocumentRef, Query, Subscription
from cookwho.utils.logger import get_logger

logger = get_logger("Bindings")

T = TypeVar("T")


class _Binding(Generic[T]):
    """
    Holds the latest snapshot of one live listener. bind() swaps the target,
    releasing the previous listener first; bind(None) publishes an empty,
    settled state without listening.
    """

    kind = "source"

    def __init__(self, store: DocumentStore, on_change: Optional[Callable[["_Binding"], Any]] = None):
        self.store = store
        self.on_change = on_change
        self.data: Optional[T] = None
        self.loading = True
        self.target = None
        self._subscription: Optional[Subscription] = None

    def _listen(self, target) -> Subscription:
        raise NotImplementedError

    def bind(self, target):
        if self._subscription is not None and target is self.target:
            return self
        self._release()
        self.target = target
        if target is None:
            self.data = None
            self.loading = False
            self._publish()
            return self
        self.loading = True
        self._subscription = self._listen(target)
        return self

    def _handle_next(self, snapshot):
        self.data = snapshot
        self.loading = False
        self._publish()

    def _handle_error(self, error: Exception):
        logger.error(f"Error fetching {self.kind}: {error}", exc_info=error)
        self.loading = False
        self._publish()

    def _publish(self):
        if self.on_change is not None:
            self.on_change(self)

    def _release(self):
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    @property
    def active(self) -> bool:
        return self._subscription is not None and self._subscription.active

    def close(self):
        self._release()
        self.target = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False


class DocumentBinding(_Binding[dict]):
    """Latest value of a single document, merged with its id, or None if it does not exist."""

    kind = "document"

    def _listen(self, target: DocumentRef) -> Subscription:
        return self.store.listen_document(target, self._handle_next, self._handle_error)


class CollectionBinding(_Binding[List[dict]]):
    """Latest full result list of a query. Each distinct query object is a new subscription."""

    kind = "collection"

    def _listen(self, target: Query) -> Subscription:
        return self.store.listen_query(target, self._handle_next, self._handle_error)
