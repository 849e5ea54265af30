# db/memory_store.py
import copy
from typing import Dict, List, Optional

from cookwho.db.document_store import DocumentStore
from cookwho.db.documents import DocumentRef, Query, Subscription, new_document_id
from cookwho.utils.logger import get_logger

logger = get_logger("Memory_Store")


class InMemoryDocumentStore(DocumentStore):
    """
    Dict-backed store used for local runs and tests. Listeners get the current
    snapshot as soon as they attach and again after every write that touches them.
    """

    def __init__(self):
        self._collections: Dict[str, Dict[str, dict]] = {}
        self._doc_listeners: Dict[int, tuple] = {}
        self._query_listeners: Dict[int, tuple] = {}
        self._next_token = 0

    def _records(self, path: str) -> Dict[str, dict]:
        return self._collections.setdefault(path, {})

    def _read(self, ref: DocumentRef) -> Optional[dict]:
        data = self._collections.get(ref.path, {}).get(ref.id)
        if data is None:
            return None
        return {**copy.deepcopy(data), "id": ref.id}

    def _run(self, query: Query) -> List[dict]:
        records = [
            {**copy.deepcopy(data), "id": doc_id}
            for doc_id, data in self._collections.get(query.path, {}).items()
        ]
        out = [r for r in records if query.matches(r)]
        if query.order_by:
            out.sort(key=lambda r: (r.get(query.order_by) is None, r.get(query.order_by)), reverse=query.descending)
        if query.limit is not None:
            out = out[:query.limit]
        return out

    async def get_document(self, ref: DocumentRef) -> Optional[dict]:
        return self._read(ref)

    async def get_documents(self, query: Query) -> List[dict]:
        return self._run(query)

    async def add_document(self, path: str, data: dict) -> DocumentRef:
        ref = DocumentRef(path, new_document_id())
        return await self.set_document(ref, data)

    async def set_document(self, ref: DocumentRef, data: dict) -> DocumentRef:
        stored = {k: v for k, v in copy.deepcopy(data).items() if k != "id"}
        self._records(ref.path)[ref.id] = stored
        self._notify(ref)
        return ref

    async def update_document(self, ref: DocumentRef, data: dict) -> DocumentRef:
        existing = self._collections.get(ref.path, {}).get(ref.id)
        if existing is None:
            raise ValueError(f"Document not found: {ref.path}/{ref.id}")
        existing.update({k: v for k, v in copy.deepcopy(data).items() if k != "id"})
        self._notify(ref)
        return ref

    async def delete_document(self, ref: DocumentRef) -> None:
        if self._collections.get(ref.path, {}).pop(ref.id, None) is not None:
            self._notify(ref)

    def _register(self, table: dict, entry: tuple) -> Subscription:
        token = self._next_token
        self._next_token += 1
        table[token] = entry
        return Subscription(lambda: table.pop(token, None))

    def listen_document(self, ref, on_next, on_error) -> Subscription:
        subscription = self._register(self._doc_listeners, (ref, on_next, on_error))
        self._deliver(on_next, self._read(ref))
        return subscription

    def listen_query(self, query, on_next, on_error) -> Subscription:
        subscription = self._register(self._query_listeners, (query, on_next, on_error))
        self._deliver(on_next, self._run(query))
        return subscription

    def _deliver(self, on_next, snapshot):
        try:
            on_next(snapshot)
        except Exception:
            logger.exception("Listener failed while handling snapshot")

    def _notify(self, ref: DocumentRef):
        # copy: a listener may unsubscribe while we iterate
        for token, (target, on_next, on_error) in list(self._doc_listeners.items()):
            if token in self._doc_listeners and target == ref:
                self._deliver(on_next, self._read(ref))
        for token, (query, on_next, on_error) in list(self._query_listeners.items()):
            if token in self._query_listeners and query.path == ref.path:
                self._deliver(on_next, self._run(query))
