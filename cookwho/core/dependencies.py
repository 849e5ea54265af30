from fastapi import Depends, Header, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from typing import List, Optional

from cookwho.db.db_operation import get_document_store
from cookwho.db.document_store import DocumentStore
from cookwho.db.documents import doc, USERS
from cookwho.db.kv_store import KeyValueStore, get_kv_store
from cookwho.models.basket import Notification
from cookwho.models.user import UserOut
from cookwho.services.basket_store import BasketStore
from cookwho.settings.config import settings
from cookwho.utils.jwt_handler import decode_access_token
from cookwho.utils.logger import get_logger

logger = get_logger("Dependencies")

# tells fastapi to expect a token in the request header after login
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login", auto_error=False)


def get_store() -> DocumentStore:
    return get_document_store()

def get_kv() -> KeyValueStore:
    return get_kv_store()


async def _user_from_token(token: str, store: DocumentStore) -> UserOut:
    try:
        payload = decode_access_token(token)
    except ValueError:
        logger.error("JWT Error: Invalid token")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    user_id = payload.get("id")
    if user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token: no user id found")
    user = await store.get_document(doc(USERS, user_id))
    if user is None:
        logger.warning(f"User not found for id: {user_id}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    return UserOut(**user)

async def get_current_user(token: str = Depends(oauth2_scheme), store: DocumentStore = Depends(get_store)) -> UserOut:
    """
    Decode token and load the user it names.
    """
    return await _user_from_token(token, store)

async def get_optional_user(token: Optional[str] = Depends(optional_oauth2_scheme),
                            store: DocumentStore = Depends(get_store)) -> Optional[UserOut]:
    if not token:
        return None
    return await _user_from_token(token, store)

def require_cook(current_user: UserOut = Depends(get_current_user)) -> UserOut:
    if not current_user.is_cook:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only cooks can manage a restaurant")
    return current_user

def require_admin(current_user: UserOut = Depends(get_current_user)) -> UserOut:
    if not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return current_user


class BasketSession:
    """A BasketStore plus the notifications raised while handling one request."""

    def __init__(self, storage: KeyValueStore, key: str):
        self.notifications: List[Notification] = []
        self.store = BasketStore(storage, key=key, notify=self.notifications.append)

def basket_key(session_id: Optional[str]) -> str:
    if not session_id:
        return settings.BASKET_STORAGE_KEY
    return f"{settings.BASKET_STORAGE_KEY}:{session_id}"

def get_basket(x_basket_session: Optional[str] = Header(None), storage: KeyValueStore = Depends(get_kv)) -> BasketSession:
    return BasketSession(storage, basket_key(x_basket_session))
