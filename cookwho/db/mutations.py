# db/mutations.py
from typing import Optional

from cookwho.db.document_store import DocumentStore
from cookwho.db.documents import DocumentRef
from cookwho.utils.logger import get_logger

logger = get_logger("Collection_Mutations")


class CollectionMutations:
    """
    Writes against one collection path. A None path means the caller is not ready
    yet (e.g. the owning restaurant id is unknown); every write then fails.
    Store errors are logged and re-raised for the caller to surface.
    """

    def __init__(self, store: DocumentStore, path: Optional[str]):
        self.store = store
        self.path = path

    def _require_path(self) -> str:
        if not self.path:
            raise ValueError("Collection reference is not available.")
        return self.path

    async def add_document(self, data: dict) -> DocumentRef:
        path = self._require_path()
        try:
            return await self.store.add_document(path, data)
        except Exception as e:
            logger.error(f"Error adding document to {path}: {e}")
            raise

    async def update_document(self, document_id: str, data: dict) -> DocumentRef:
        path = self._require_path()
        try:
            return await self.store.update_document(DocumentRef(path, document_id), data)
        except Exception as e:
            logger.error(f"Error updating document {path}/{document_id}: {e}")
            raise

    async def set_document(self, document_id: str, data: dict) -> DocumentRef:
        path = self._require_path()
        try:
            return await self.store.set_document(DocumentRef(path, document_id), data)
        except Exception as e:
            logger.error(f"Error setting document {path}/{document_id}: {e}")
            raise

    async def delete_document(self, document_id: str) -> None:
        path = self._require_path()
        try:
            await self.store.delete_document(DocumentRef(path, document_id))
        except Exception as e:
            logger.error(f"Error deleting document {path}/{document_id}: {e}")
            raise
