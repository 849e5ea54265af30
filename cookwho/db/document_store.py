"""Document store interface."""
from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from cookwho.db.documents import DocumentRef, Query, Subscription

DocumentListener = Callable[[Optional[dict]], None]
QueryListener = Callable[[List[dict]], None]
ErrorListener = Callable[[Exception], None]


class DocumentStore(ABC):
    """
    Records are plain dicts merged with their "id". Missing documents read as None.
    """

    @abstractmethod
    async def get_document(self, ref: DocumentRef) -> Optional[dict]:
        pass

    @abstractmethod
    async def get_documents(self, query: Query) -> List[dict]:
        pass

    async def exists(self, query: Query) -> bool:
        """True when at least one document matches the query."""
        return len(await self.get_documents(query.take(1))) > 0

    @abstractmethod
    async def add_document(self, path: str, data: dict) -> DocumentRef:
        pass

    @abstractmethod
    async def set_document(self, ref: DocumentRef, data: dict) -> DocumentRef:
        pass

    @abstractmethod
    async def update_document(self, ref: DocumentRef, data: dict) -> DocumentRef:
        """Merge fields into an existing document. Raises ValueError if it is missing."""

    @abstractmethod
    async def delete_document(self, ref: DocumentRef) -> None:
        pass

    @abstractmethod
    def listen_document(self, ref: DocumentRef, on_next: DocumentListener, on_error: ErrorListener) -> Subscription:
        pass

    @abstractmethod
    def listen_query(self, query: Query, on_next: QueryListener, on_error: ErrorListener) -> Subscription:
        pass
