import asyncio
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError

from cookwho.db.document_store import DocumentStore
from cookwho.db.documents import DocumentRef, Query, Subscription, new_document_id, RESTAURANTS, MENU_ITEMS, USERS, ORDERS
from cookwho.db.memory_store import InMemoryDocumentStore
from cookwho.settings.config import settings
from cookwho.utils.logger import get_logger

logger = get_logger("DB_OPERATION")

PARENT_FIELD = "_parent"


class MongoConnection:
    def __init__(self):
        logger.info("Initializing MongoDB Connection")
        self.client = AsyncIOMotorClient(settings.MONGO_URI)
        self.db = self.client[settings.DB_NAME]

    async def connect(self):
        try:
            # Force an actual connection & authentication check
            await self.db.command("ping")
            logger.info("Successfully connected to MongoDB and authenticated.")
            logger.info(f"Using Database: {settings.DB_NAME}")
        except Exception as e:
            logger.error(f"Could not connect to MongoDB: {e}")
            raise e


def _split_path(path: str):
    """
    "restaurants/abc/menuItems" -> ("menuItems", "restaurants/abc").
    Subcollections share one Mongo collection, told apart by the parent path.
    """
    segments = path.split("/")
    parent = "/".join(segments[:-1]) or None
    return segments[-1], parent


def _to_record(d: Optional[dict]) -> Optional[dict]:
    if d is None:
        return None
    out = {k: v for k, v in d.items() if k not in ("_id", PARENT_FIELD)}
    out["id"] = str(d["_id"])
    return out


class MongoDocumentStore(DocumentStore):
    """
    Document store over MongoDB. Live listeners are asyncio tasks reading a change
    stream (needs a replica set); the first snapshot is read directly.
    """

    def __init__(self, db):
        self.db = db

    def _collection(self, path: str):
        name, _ = _split_path(path)
        return self.db[name]

    def _scope(self, path: str) -> dict:
        _, parent = _split_path(path)
        return {PARENT_FIELD: parent} if parent else {}

    def _filter(self, query: Query) -> dict:
        f = dict(self._scope(query.path))
        for name, value in query.filters:
            f[name] = value
        return f

    async def get_document(self, ref: DocumentRef) -> Optional[dict]:
        d = await self._collection(ref.path).find_one({"_id": ref.id, **self._scope(ref.path)})
        return _to_record(d)

    async def get_documents(self, query: Query) -> List[dict]:
        cursor = self._collection(query.path).find(self._filter(query))
        if query.order_by:
            cursor = cursor.sort(query.order_by, DESCENDING if query.descending else ASCENDING)
        if query.limit is not None:
            cursor = cursor.limit(query.limit)
        docs = await cursor.to_list(length=query.limit)
        return [_to_record(d) for d in docs]

    async def add_document(self, path: str, data: dict) -> DocumentRef:
        return await self.set_document(DocumentRef(path, new_document_id()), data)

    async def set_document(self, ref: DocumentRef, data: dict) -> DocumentRef:
        body = {k: v for k, v in data.items() if k != "id"}
        body.update(self._scope(ref.path))
        try:
            await self._collection(ref.path).replace_one({"_id": ref.id}, body, upsert=True)
        except PyMongoError:
            logger.exception(f"DB error setting document {ref.path}/{ref.id}")
            raise
        return ref

    async def update_document(self, ref: DocumentRef, data: dict) -> DocumentRef:
        body = {k: v for k, v in data.items() if k != "id"}
        try:
            result = await self._collection(ref.path).update_one(
                {"_id": ref.id, **self._scope(ref.path)}, {"$set": body}
            )
        except PyMongoError:
            logger.exception(f"DB error updating document {ref.path}/{ref.id}")
            raise
        if result.matched_count == 0:
            raise ValueError(f"Document not found: {ref.path}/{ref.id}")
        return ref

    async def delete_document(self, ref: DocumentRef) -> None:
        try:
            await self._collection(ref.path).delete_one({"_id": ref.id, **self._scope(ref.path)})
        except PyMongoError:
            logger.exception(f"DB error deleting document {ref.path}/{ref.id}")
            raise

    def _spawn(self, coro) -> Subscription:
        task = asyncio.get_running_loop().create_task(coro)
        return Subscription(task.cancel)

    def listen_document(self, ref, on_next, on_error) -> Subscription:
        return self._spawn(self._watch_document(ref, on_next, on_error))

    def listen_query(self, query, on_next, on_error) -> Subscription:
        return self._spawn(self._watch_query(query, on_next, on_error))

    async def _watch_document(self, ref: DocumentRef, on_next, on_error):
        pipeline = [{"$match": {"documentKey._id": ref.id}}]
        try:
            async with self._collection(ref.path).watch(pipeline, full_document="updateLookup") as stream:
                on_next(await self.get_document(ref))
                async for change in stream:
                    if change["operationType"] == "delete":
                        on_next(None)
                    else:
                        on_next(_to_record(change.get("fullDocument")))
        except asyncio.CancelledError:
            raise
        except Exception as e:
            on_error(e)

    async def _watch_query(self, query: Query, on_next, on_error):
        try:
            # deletes carry no document body, so any change re-runs the query
            async with self._collection(query.path).watch() as stream:
                on_next(await self.get_documents(query))
                async for _ in stream:
                    on_next(await self.get_documents(query))
        except asyncio.CancelledError:
            raise
        except Exception as e:
            on_error(e)


mongo_conn: Optional[MongoConnection] = None
_memory_store: Optional[InMemoryDocumentStore] = None

def get_document_store() -> DocumentStore:
    global mongo_conn, _memory_store
    if settings.DOCUMENT_STORE == "memory":
        if _memory_store is None:
            logger.info("Using in-memory document store")
            _memory_store = InMemoryDocumentStore()
        return _memory_store
    if mongo_conn is None:
        mongo_conn = MongoConnection()
    return MongoDocumentStore(mongo_conn.db)

async def create_indexes():
    if settings.DOCUMENT_STORE != "mongo":
        return
    store = get_document_store()
    await mongo_conn.connect()
    await store.db[RESTAURANTS].create_index("is_available")
    await store.db[MENU_ITEMS].create_index([(PARENT_FIELD, ASCENDING), ("master_category_id", ASCENDING)])
    await store.db[USERS].create_index("email", unique=True)
    await store.db[USERS].create_index("username", unique=True)
    await store.db[ORDERS].create_index("user_id")
    await store.db[ORDERS].create_index("stripe_payment_intent_id", unique=True, sparse=True)
    logger.info("Indexes created")
