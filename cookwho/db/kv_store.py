# db/kv_store.py
import os
from urllib.parse import quote
from pathlib import Path
from typing import Dict, Optional

import redis

from cookwho.settings.config import settings
from cookwho.utils.logger import get_logger

logger = get_logger("KV_Store")


class KeyValueStore:
    """String persistence port used by the basket: get/set/clear by key."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def clear(self, key: str) -> None:
        raise NotImplementedError


class MemoryKeyValueStore(KeyValueStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.values: Dict[str, str] = dict(initial or {})

    def get(self, key):
        return self.values.get(key)

    def set(self, key, value):
        self.values[key] = value

    def clear(self, key):
        self.values.pop(key, None)


class FileKeyValueStore(KeyValueStore):
    """One file per key under a directory."""

    def __init__(self, directory: str):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        safe = quote(key, safe="")
        return self.directory / f"{safe}.json"

    def get(self, key):
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key, value):
        path = self._path(key)
        tmp = path.with_suffix(".tmp")
        tmp.write_text(value, encoding="utf-8")
        os.replace(tmp, path)

    def clear(self, key):
        self._path(key).unlink(missing_ok=True)


class RedisKeyValueStore(KeyValueStore):
    def __init__(self, client: redis.Redis):
        self.client = client

    def get(self, key):
        return self.client.get(key)

    def set(self, key, value):
        self.client.set(key, value)

    def clear(self, key):
        self.client.delete(key)


_kv_store: Optional[KeyValueStore] = None

def get_kv_store() -> KeyValueStore:
    global _kv_store
    if _kv_store is not None:
        return _kv_store
    backend = settings.BASKET_BACKEND
    if backend == "redis":
        client = redis.Redis.from_url(settings.REDIS_URL, decode_responses=True)
        _kv_store = RedisKeyValueStore(client)
    elif backend == "file":
        _kv_store = FileKeyValueStore(settings.BASKET_FILE_DIR)
    elif backend == "memory":
        _kv_store = MemoryKeyValueStore()
    else:
        raise ValueError(f"Unknown basket backend: {backend}")
    logger.info(f"Basket persistence backend: {backend}")
    return _kv_store
